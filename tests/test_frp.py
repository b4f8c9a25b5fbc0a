import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from shopcore.frp import (
    DISMISS,
    NOTIFY_ERROR,
    NOTIFY_SUCCESS,
    NOTIFY_WARNING,
    EventBus,
    apply_events,
    create_event,
    create_notification_bus,
    initial_state,
    result_to_event,
)
from shopcore.ftypes import Result, ResultKind


def test_eventbus_immutability():
    """EventBus должен быть иммутабельным"""
    bus1 = EventBus()
    bus2 = bus1.subscribe("TEST", lambda e, s: s)

    assert bus1.subscribers == ()
    assert len(bus2.subscribers) == 1
    assert bus1 is not bus2


def test_success_event_adds_notification():
    bus = create_notification_bus()
    state = initial_state()

    new_state = bus.publish(create_event(NOTIFY_SUCCESS, {"message": "ok!"}), state)

    assert len(new_state["notifications"]) == 1
    assert new_state["notifications"][0].type == "success"
    assert new_state["notifications"][0].message == "ok!"
    assert new_state["last_event"] == NOTIFY_SUCCESS
    assert state["notifications"] == ()


def test_dismiss_removes_only_target():
    bus = create_notification_bus()
    first = create_event(NOTIFY_ERROR, {"message": "a"})
    second = create_event(NOTIFY_WARNING, {"message": "b"})
    state = apply_events(bus, (first, second), initial_state())

    state = bus.publish(create_event(DISMISS, {"notification_id": first.id}), state)

    assert [n.message for n in state["notifications"]] == ["b"]
    assert state["notifications"][0].type == "warning"


def test_result_to_event_mapping():
    ok = result_to_event(Result.ok(1), "done")
    assert ok.name == NOTIFY_SUCCESS and ok.payload["message"] == "done"

    own_message = result_to_event(Result.ok(1, "applied"))
    assert own_message.payload["message"] == "applied"

    fail = result_to_event(Result.fail(ResultKind.STOCK_INSUFFICIENT, "empty"), "done")
    assert fail.name == NOTIFY_ERROR and fail.payload["message"] == "empty"


def test_unknown_event_leaves_state():
    bus = create_notification_bus()
    state = initial_state()
    assert bus.publish(create_event("UNKNOWN", {}), state) == state
