from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonStorage:
    """
    Best-effort key/value снимки состояния: один JSON-файл на ключ.
    Ошибки чтения -> значение по умолчанию, ошибки записи -> warning в лог.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load %s from %s: %s", key, path, e)
            return default

    def save(self, key: str, value: Any) -> None:
        """None и пустые списки удаляют ключ, как в localStorage-обёртке"""
        path = self._path(key)
        try:
            if value is None or (isinstance(value, (list, tuple)) and not value):
                path.unlink(missing_ok=True)
                return
            text = json.dumps(value, ensure_ascii=False, indent=2)
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.warning("Failed to save %s to %s: %s", key, path, e)

    def remove(self, key: str) -> None:
        self.save(key, None)
