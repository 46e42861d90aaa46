"""Shared fixtures for LinguaBundle tests."""
import io
import json
import sys
import zipfile
from pathlib import Path

import pytest

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def make_zip(members):
    """Build a ZIP archive from {path: str | bytes | dict}; dicts become JSON."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for path, payload in members.items():
            if isinstance(payload, dict):
                payload = json.dumps(payload)
            zf.writestr(path, payload)
    return buf.getvalue()


def read_zip(data):
    """Return {path: parsed JSON} for every member of an archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: json.loads(zf.read(name).decode("utf-8")) for name in zf.namelist()}


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Never read or write the real settings file."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr("linguabundle.services.settings._SETTINGS_FILE", settings_file)
    monkeypatch.setattr("linguabundle.services.settings.DATA_DIR", tmp_path / "data")
    from linguabundle.services.settings import Settings
    Settings.reset_instance()
    yield settings_file
    Settings.reset_instance()


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    """Each store backend in turn."""
    from linguabundle.services.store import JsonFileStore, MemoryStore
    from linguabundle.services.sqlite_store import SQLiteStore
    if request.param == "memory":
        s = MemoryStore()
    elif request.param == "json":
        s = JsonFileStore(tmp_path / "projects.json")
    else:
        s = SQLiteStore(tmp_path / "projects.db")
    yield s
    s.close()


@pytest.fixture
def service(store):
    from linguabundle.services.bundle import BundleService
    return BundleService(store)


@pytest.fixture
def basic_zip():
    return make_zip({
        "en/a.json": {"x": "hi", "y": {"z": "yo"}},
        "de/a.json": {"x": "hallo"},
    })
