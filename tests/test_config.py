import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from shopcore.config import ROOT_DIR, load_settings


def test_defaults(monkeypatch):
    for key in ("SEED_PATH", "STORAGE_DIR", "CURRENCY", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    s = load_settings()
    assert s.seed_path == str(ROOT_DIR / "data" / "seed.json")
    assert s.currency == "₩"
    assert s.log_level == "INFO"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("CURRENCY", "₸")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SEED_PATH", "   ")
    s = load_settings()
    assert s.storage_dir == str(tmp_path)
    assert s.currency == "₸"
    assert s.log_level == "DEBUG"
    assert s.seed_path.endswith("seed.json")
