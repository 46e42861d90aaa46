# SPDX-License-Identifier: GPL-3.0-or-later
"""SQLite-backed project store."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from gettext import gettext as _

from linguabundle.errors import NotFoundError, project_not_found
from linguabundle.models import JsonTree, Project, TranslationFile
from linguabundle.services.store import ProjectStore, new_id, now


class SQLiteStore(ProjectStore):
    """Projects and files in two tables; locales and content as JSON text."""

    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path)
        self._ensure_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Connection that commits on success and is always closed."""
        conn = sqlite3.connect(self._db_path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    locales TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS translation_files (
                    id TEXT PRIMARY KEY,
                    project_id TEXT NOT NULL,
                    filename TEXT NOT NULL,
                    locale TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '{}',
                    updated_at TEXT
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_files_project
                ON translation_files(project_id, locale)
            """)

    # ── Rows ──────────────────────────────────────────────────────

    @staticmethod
    def _project_from_row(row) -> Project:
        pid, name, locales, created_at = row
        return Project(id=pid, name=name, locales=json.loads(locales), created_at=created_at)

    @staticmethod
    def _file_from_row(row) -> TranslationFile:
        fid, project_id, filename, locale, content, updated_at = row
        return TranslationFile(
            id=fid,
            project_id=project_id,
            filename=filename,
            locale=locale,
            content=json.loads(content),
            updated_at=updated_at,
        )

    # ── Projects ──────────────────────────────────────────────────

    def get_project(self, project_id: str) -> Optional[Project]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, locales, created_at FROM projects WHERE id = ?",
                (project_id,),
            ).fetchone()
        return self._project_from_row(row) if row else None

    def get_all_projects(self) -> list[Project]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, locales, created_at FROM projects ORDER BY rowid"
            ).fetchall()
        return [self._project_from_row(r) for r in rows]

    def create_project(self, name: str, locales: list[str]) -> Project:
        project = Project(id=new_id(), name=name, locales=list(locales), created_at=now())
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO projects (id, name, locales, created_at) VALUES (?, ?, ?, ?)",
                (project.id, project.name, json.dumps(project.locales), project.created_at),
            )
        return project

    def update_project(self, project_id: str, *, name: Optional[str] = None,
                       locales: Optional[list[str]] = None) -> Project:
        project = self.get_project(project_id)
        if project is None:
            raise project_not_found(project_id)
        if name is not None:
            project.name = name
        if locales is not None:
            project.locales = list(locales)
        with self._connect() as conn:
            conn.execute(
                "UPDATE projects SET name = ?, locales = ? WHERE id = ?",
                (project.name, json.dumps(project.locales), project_id),
            )
        return project

    # ── Translation files ─────────────────────────────────────────

    def get_translation_files(self, project_id: str) -> list[TranslationFile]:
        with self._connect() as conn:
            rows = conn.execute("""
                SELECT id, project_id, filename, locale, content, updated_at
                FROM translation_files WHERE project_id = ? ORDER BY rowid
            """, (project_id,)).fetchall()
        return [self._file_from_row(r) for r in rows]

    def create_translation_file(self, project_id: str, filename: str, locale: str,
                                content: JsonTree) -> TranslationFile:
        tf = TranslationFile(
            id=new_id(),
            project_id=project_id,
            filename=filename,
            locale=locale,
            content=json.loads(json.dumps(content)),
            updated_at=now(),
        )
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO translation_files
                (id, project_id, filename, locale, content, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (tf.id, project_id, filename, locale,
                  json.dumps(content, ensure_ascii=False), tf.updated_at))
        return tf

    def update_translation_file(self, file_id: str, content: JsonTree) -> TranslationFile:
        updated_at = now()
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE translation_files SET content = ?, updated_at = ? WHERE id = ?",
                (json.dumps(content, ensure_ascii=False), updated_at, file_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(_("Translation file not found: {id}").format(id=file_id))
            row = conn.execute("""
                SELECT id, project_id, filename, locale, content, updated_at
                FROM translation_files WHERE id = ?
            """, (file_id,)).fetchone()
        return self._file_from_row(row)

    def delete_translation_files(self, project_id: str, locale: Optional[str] = None) -> None:
        with self._connect() as conn:
            if locale:
                conn.execute(
                    "DELETE FROM translation_files WHERE project_id = ? AND locale = ?",
                    (project_id, locale),
                )
            else:
                conn.execute("DELETE FROM translation_files WHERE project_id = ?", (project_id,))
