"""
Persistent client-side key-value storage.

A small JSON file standing in for browser localStorage: string keys,
JSON-serializable values, survives restarts.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger("foodlog.client.storage")

DEFAULT_STORAGE_PATH = Path.home() / ".config" / "foodlog" / "local_storage.json"


class LocalStorage:
    """JSON-file backed key-value store."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path or os.getenv("FOODLOG_STORAGE_PATH") or DEFAULT_STORAGE_PATH)

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable local storage {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)
        # Holds a bearer token
        os.chmod(self.path, 0o600)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
