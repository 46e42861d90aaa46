# SPDX-License-Identifier: GPL-3.0-or-later
"""Project store contract and the in-memory / JSON-file backends.

The bundle service only talks to a store through ``ProjectStore``; a
store instance is created by the caller (see ``open_store``) and handed
in explicitly. Each method is atomic on its own, nothing more.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from gettext import gettext as _

from linguabundle.errors import NotFoundError, project_not_found
from linguabundle.models import JsonTree, Project, TranslationFile

log = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def now() -> str:
    return datetime.now().isoformat()


class ProjectStore(ABC):
    """Persistence for projects and their translation files."""

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        """Return the project, or None if it does not exist."""

    @abstractmethod
    def get_all_projects(self) -> list[Project]:
        """All projects in creation order."""

    @abstractmethod
    def create_project(self, name: str, locales: list[str]) -> Project:
        ...

    @abstractmethod
    def update_project(self, project_id: str, *, name: Optional[str] = None,
                       locales: Optional[list[str]] = None) -> Project:
        """Apply a partial update. Raises NotFoundError for unknown ids."""

    @abstractmethod
    def get_translation_files(self, project_id: str) -> list[TranslationFile]:
        """Files of one project in creation order."""

    @abstractmethod
    def create_translation_file(self, project_id: str, filename: str, locale: str,
                                content: JsonTree) -> TranslationFile:
        ...

    @abstractmethod
    def update_translation_file(self, file_id: str, content: JsonTree) -> TranslationFile:
        """Replace a file's content and bump ``updated_at``."""

    @abstractmethod
    def delete_translation_files(self, project_id: str, locale: Optional[str] = None) -> None:
        """Delete a project's files, optionally only those of one locale."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class MemoryStore(ProjectStore):
    """Process-local store. Returned records are copies."""

    def __init__(self):
        self._projects: dict[str, Project] = {}
        self._files: dict[str, TranslationFile] = {}

    # Hooks for subclasses that mirror the maps somewhere else.
    def _sync_in(self) -> None:
        pass

    def _sync_out(self) -> None:
        pass

    def get_project(self, project_id: str) -> Optional[Project]:
        self._sync_in()
        project = self._projects.get(project_id)
        return copy.deepcopy(project) if project else None

    def get_all_projects(self) -> list[Project]:
        self._sync_in()
        return [copy.deepcopy(p) for p in self._projects.values()]

    def create_project(self, name: str, locales: list[str]) -> Project:
        self._sync_in()
        project = Project(id=new_id(), name=name, locales=list(locales), created_at=now())
        self._projects[project.id] = project
        self._sync_out()
        return copy.deepcopy(project)

    def update_project(self, project_id: str, *, name: Optional[str] = None,
                       locales: Optional[list[str]] = None) -> Project:
        self._sync_in()
        project = self._projects.get(project_id)
        if project is None:
            raise project_not_found(project_id)
        if name is not None:
            project.name = name
        if locales is not None:
            project.locales = list(locales)
        self._sync_out()
        return copy.deepcopy(project)

    def get_translation_files(self, project_id: str) -> list[TranslationFile]:
        self._sync_in()
        return [copy.deepcopy(f) for f in self._files.values() if f.project_id == project_id]

    def create_translation_file(self, project_id: str, filename: str, locale: str,
                                content: JsonTree) -> TranslationFile:
        self._sync_in()
        tf = TranslationFile(
            id=new_id(),
            project_id=project_id,
            filename=filename,
            locale=locale,
            content=copy.deepcopy(content),
            updated_at=now(),
        )
        self._files[tf.id] = tf
        self._sync_out()
        return copy.deepcopy(tf)

    def update_translation_file(self, file_id: str, content: JsonTree) -> TranslationFile:
        self._sync_in()
        tf = self._files.get(file_id)
        if tf is None:
            raise NotFoundError(_("Translation file not found: {id}").format(id=file_id))
        tf.content = copy.deepcopy(content)
        tf.updated_at = now()
        self._sync_out()
        return copy.deepcopy(tf)

    def delete_translation_files(self, project_id: str, locale: Optional[str] = None) -> None:
        self._sync_in()
        doomed = [
            fid for fid, f in self._files.items()
            if f.project_id == project_id and (not locale or f.locale == locale)
        ]
        for fid in doomed:
            del self._files[fid]
        self._sync_out()


class JsonFileStore(MemoryStore):
    """Store kept in a single JSON document, re-read before every call.

    An unreadable document is moved aside to ``<name>.bak`` and the
    store starts out empty.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    def _sync_in(self) -> None:
        self._projects = {}
        self._files = {}
        if not self.path.exists():
            return
        try:
            text = self.path.read_text("utf-8")
        except OSError as e:
            log.warning("Treating unreadable store %s as empty: %s", self.path, e)
            return
        try:
            data = json.loads(text)
            projects = [Project.from_dict(p) for p in data.get("projects", [])]
            files = [TranslationFile.from_dict(f) for f in data.get("files", [])]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            backup = self.path.with_name(self.path.name + ".bak")
            self.path.replace(backup)
            log.warning("Moved unreadable store %s to %s: %s", self.path, backup, e)
            return
        self._projects = {p.id: p for p in projects}
        self._files = {f.id: f for f in files}

    def _sync_out(self) -> None:
        data = {
            "projects": [p.to_dict() for p in self._projects.values()],
            "files": [f.to_dict() for f in self._files.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        tmp.replace(self.path)


def open_store(settings, backend: Optional[str] = None,
               path: Optional[str | Path] = None) -> ProjectStore:
    """Build the store selected by settings (or the explicit overrides)."""
    backend = backend or settings["store_backend"]
    if backend == "memory":
        return MemoryStore()
    location = Path(path).expanduser() if path else settings.store_location(backend)
    if backend == "json":
        return JsonFileStore(location)
    if backend == "sqlite":
        from linguabundle.services.sqlite_store import SQLiteStore
        return SQLiteStore(location)
    raise ValueError(f"Unknown store backend: {backend!r}")
