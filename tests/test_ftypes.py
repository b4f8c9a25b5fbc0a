import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from shopcore.ftypes import Maybe, Result, ResultKind


# ТЕСТЫ Maybe
def test_maybe_some_and_none_behavior():
    just = Maybe.some(42)
    nothing = Maybe.nothing()

    assert not just.is_none()
    assert nothing.is_none()
    assert just.get_or_else(0) == 42
    assert nothing.get_or_else(0) == 0
    assert Maybe.of(None).is_none()


def test_maybe_map_and_bind():
    maybe_val = Maybe.some(10)
    assert maybe_val.map(lambda x: x * 2).get_or_else(0) == 20
    assert maybe_val.bind(lambda x: Maybe.some(x + 5)).get_or_else(0) == 15
    assert Maybe.nothing().map(lambda x: x * 2).is_none()


# ТЕСТЫ Result
def test_result_ok_and_fail():
    ok = Result.ok((1, 2))
    fail = Result.fail(ResultKind.STOCK_EXCEEDED, "too many", 5)

    assert ok.is_ok and ok.kind is ResultKind.OK
    assert not fail.is_ok
    assert fail.payload == 5
    assert fail.get_or_else("default") == "default"
    assert ok.get_or_else("default") == (1, 2)


def test_result_fail_requires_error_kind():
    with pytest.raises(ValueError):
        Result.fail(ResultKind.OK, "not an error")


def test_result_map_and_bind_skip_failures():
    ok = Result.ok(5)
    fail = Result.fail(ResultKind.COUPON_UNUSABLE, "nope")

    assert ok.map(lambda x: x * 2).payload == 10
    assert ok.bind(lambda x: Result.fail(ResultKind.RANGE_INVALID, "bad")).kind is (
        ResultKind.RANGE_INVALID
    )
    assert fail.map(lambda x: x * 2) is fail
    assert fail.bind(lambda x: Result.ok(x)) is fail
