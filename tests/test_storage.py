import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import logging
from shopcore.storage import JsonStorage


def test_save_and_load(tmp_path):
    storage = JsonStorage(tmp_path / "store")
    storage.save("coupons", [{"code": "PERCENT10"}])
    assert storage.load("coupons", []) == [{"code": "PERCENT10"}]


def test_missing_key_returns_default(tmp_path):
    storage = JsonStorage(tmp_path)
    assert storage.load("cart", ["default"]) == ["default"]


def test_corrupt_file_falls_back_to_default(tmp_path, caplog):
    (tmp_path / "cart.json").write_text("{not json", encoding="utf-8")
    storage = JsonStorage(tmp_path)
    with caplog.at_level(logging.WARNING):
        assert storage.load("cart", []) == []
    assert "Failed to load cart" in caplog.text


def test_empty_value_removes_key(tmp_path):
    storage = JsonStorage(tmp_path)
    storage.save("cart", [1, 2])
    assert (tmp_path / "cart.json").exists()
    storage.save("cart", [])
    assert not (tmp_path / "cart.json").exists()
    storage.save("cart", None)
    storage.remove("cart")


def test_unserializable_value_is_logged_not_raised(tmp_path, caplog):
    storage = JsonStorage(tmp_path)
    with caplog.at_level(logging.WARNING):
        storage.save("products", [object()])
    assert "Failed to save products" in caplog.text
