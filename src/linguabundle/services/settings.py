"""Settings service — load/save ~/.config/linguabundle/settings.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

_SETTINGS_FILE = Path.home() / ".config" / "linguabundle" / "settings.json"
DATA_DIR = Path.home() / ".local" / "share" / "linguabundle"

STORE_BACKENDS = ("json", "sqlite", "memory")

DEFAULTS: dict[str, Any] = {
    # Storage
    "store_backend": "json",  # json / sqlite / memory
    "store_path": "",  # empty = backend default under DATA_DIR

    # Import limits
    "max_json_depth": 64,
    "max_entry_bytes": 16 * 1024 * 1024,

    # Projects
    "default_project_name": "Translation Project {timestamp}",

    # Remote service
    "remote_url": "",
    "request_timeout": 30,
    "max_retries": 3,

    # Diagnostics
    "log_level": "INFO",
}


class Settings:
    """Application settings backed by a JSON file."""

    _instance: Settings | None = None

    def __init__(self):
        self._data: dict[str, Any] = dict(DEFAULTS)
        self._load()

    @classmethod
    def get(cls) -> Settings:
        if cls._instance is None:
            cls._instance = Settings()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    # ── Public API ────────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self._data.get(key, DEFAULTS.get(key))

    def __setitem__(self, key: str, value: Any):
        self._data[key] = value

    def get_value(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default if default is not None else DEFAULTS.get(key))

    def set_value(self, key: str, value: Any):
        self._data[key] = value

    def save(self):
        _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
        _SETTINGS_FILE.write_text(
            json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8"
        )

    # ── Convenience properties ────────────────────────────────────

    def store_location(self, backend: str | None = None) -> Path:
        """Configured store location, or the backend's default file."""
        configured = self._data.get("store_path") or ""
        if configured:
            return Path(configured).expanduser()
        backend = backend or self["store_backend"]
        suffix = "db" if backend == "sqlite" else "json"
        return DATA_DIR / f"projects.{suffix}"

    # ── Private ───────────────────────────────────────────────────

    def _load(self):
        if _SETTINGS_FILE.exists():
            try:
                stored = json.loads(_SETTINGS_FILE.read_text("utf-8"))
                if isinstance(stored, dict):
                    self._data.update(stored)
            except (OSError, ValueError) as e:
                log.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_FILE, e)
