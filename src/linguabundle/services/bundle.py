# SPDX-License-Identifier: GPL-3.0-or-later
"""Import, export, edit and extend translation projects.

Works purely through an injected ``ProjectStore``. Keys and statistics
are rebuilt from the stored files on every read.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional, Union

from gettext import gettext as _

from linguabundle.errors import (
    BundleImportError,
    DuplicateLocaleError,
    ExportError,
    InvalidKeyError,
    InvalidLocaleError,
    NotFoundError,
    ParseError,
    TemplateSourceMissingError,
    project_not_found,
)
from linguabundle.models import Project, ProjectData, TranslationFile
from linguabundle.parsers import DEFAULT_MAX_DEPTH, safe_loads_json
from linguabundle.parsers.archive import ArchiveEntry, read_archive, write_archive
from linguabundle.parsers.json_parser import dump_json, empty_copy, set_path_value
from linguabundle.services.keytable import build_key_table, compute_stats
from linguabundle.services.store import ProjectStore

log = logging.getLogger(__name__)

# New locales are always templated from this one.
TEMPLATE_LOCALE = "en"

DEFAULT_NAME_TEMPLATE = "Translation Project {timestamp}"

RawEntry = Union[ArchiveEntry, tuple[str, bytes]]


def _as_entry(entry: RawEntry) -> ArchiveEntry:
    if isinstance(entry, ArchiveEntry):
        return entry
    path, data = entry
    return ArchiveEntry(path=path, data=data, is_dir=path.endswith("/"))


def split_entry_path(path: str) -> Optional[tuple[str, str]]:
    """Map an archive path to ``(locale, filename)``.

    The first segment is the locale and the last is the filename; any
    directories in between are dropped, so ``en/forms/contact.json``
    becomes ``("en", "contact.json")``. Returns None for paths that are
    not ``.json`` files inside a locale folder.
    """
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        return None
    locale, filename = parts[0], parts[-1]
    if not filename.endswith(".json"):
        return None
    return locale, filename


class BundleService:
    """Operations on translation projects held in a store."""

    def __init__(self, store: ProjectStore, max_depth: int = DEFAULT_MAX_DEPTH,
                 max_entry_bytes: Optional[int] = None,
                 name_template: str = DEFAULT_NAME_TEMPLATE):
        self.store = store
        self.max_depth = max_depth
        self.max_entry_bytes = max_entry_bytes
        self.name_template = name_template

    @classmethod
    def from_settings(cls, store: ProjectStore, settings) -> BundleService:
        return cls(
            store,
            max_depth=settings["max_json_depth"],
            max_entry_bytes=settings["max_entry_bytes"],
            name_template=settings["default_project_name"] or DEFAULT_NAME_TEMPLATE,
        )

    # ── Reading ───────────────────────────────────────────────────

    def list_projects(self) -> list[Project]:
        return self.store.get_all_projects()

    def get_project_data(self, project_id: str) -> ProjectData:
        project = self.store.get_project(project_id)
        if project is None:
            raise project_not_found(project_id)
        files = self.store.get_translation_files(project_id)
        keys = build_key_table((f.locale, f.filename, f.content) for f in files)
        stats = compute_stats(keys, project.locales)
        return ProjectData(project=project, files=files, keys=keys, stats=stats)

    # ── Import / export ───────────────────────────────────────────

    def import_archive(self, data: bytes, project_name: Optional[str] = None) -> ProjectData:
        """Create a project from a ZIP archive of ``{locale}/{file}.json`` entries."""
        return self.import_entries(read_archive(data, self.max_entry_bytes), project_name)

    def import_entries(self, entries: Iterable[RawEntry],
                       project_name: Optional[str] = None) -> ProjectData:
        """Create a project from raw archive entries.

        Entries that fail to parse are skipped with a warning. Nothing is
        written to the store unless at least one locale survives.
        """
        bundles: dict[str, dict[str, dict]] = {}
        skipped = 0
        for entry in map(_as_entry, entries):
            if entry.is_dir:
                continue
            target = split_entry_path(entry.path)
            if target is None:
                continue
            locale, filename = target
            try:
                content = safe_loads_json(entry.data, self.max_depth, entry.path)
            except ParseError as e:
                log.warning("Failed to parse JSON file: %s (%s)", entry.path, e.message)
                skipped += 1
                continue
            files = bundles.setdefault(locale, {})
            if filename in files:
                log.warning("%s collapses onto %s/%s, replacing the earlier file",
                            entry.path, locale, filename)
            files[filename] = content

        if not bundles:
            raise BundleImportError(_("No valid locale folders with JSON files found"))

        name = project_name or self.name_template.format(timestamp=int(time.time() * 1000))
        project = self.store.create_project(name, list(bundles))
        count = 0
        for locale, files in bundles.items():
            for filename, content in files.items():
                self.store.create_translation_file(project.id, filename, locale, content)
                count += 1
        log.info("Imported project %s (%s): %d locales, %d files, %d skipped",
                 project.name, project.id, len(bundles), count, skipped)
        return self.get_project_data(project.id)

    def export_archive(self, project_id: str) -> bytes:
        """Write every file of a project to a ZIP archive at ``{locale}/{filename}``."""
        files = self.store.get_translation_files(project_id)
        if not files:
            raise ExportError(_("No translation files found"))
        log.info("Exporting %d files of project %s", len(files), project_id)
        return write_archive((f"{f.locale}/{f.filename}", dump_json(f.content)) for f in files)

    # ── Editing ───────────────────────────────────────────────────

    def update_translation(self, project_id: str, filename: str, key: str, locale: str,
                           value: str) -> TranslationFile:
        """Set one translated string, creating missing parent objects."""
        if not isinstance(value, str):
            raise InvalidKeyError(_("Translation value must be a string, not {type}").format(
                type=type(value).__name__))
        if not key or "" in key.split("."):
            raise InvalidKeyError(_("Invalid translation key: '{key}'").format(key=key))
        if self.store.get_project(project_id) is None:
            raise project_not_found(project_id)
        for tf in self.store.get_translation_files(project_id):
            if tf.locale == locale and tf.filename == filename:
                break
        else:
            raise NotFoundError(
                _("No file {locale}/{filename} in project").format(locale=locale, filename=filename))
        content = set_path_value(tf.content, key, value)
        log.debug("Setting %s in %s/%s", key, locale, filename)
        return self.store.update_translation_file(tf.id, content)

    def add_locale(self, project_id: str, locale_code: str) -> ProjectData:
        """Add a locale whose files are empty copies of the English ones."""
        code = (locale_code or "").strip()
        if not code:
            raise InvalidLocaleError(_("Locale code must not be empty"))
        project = self.store.get_project(project_id)
        if project is None:
            raise project_not_found(project_id)
        if code in project.locales:
            raise DuplicateLocaleError(
                _("Locale {code} already exists in this project").format(code=code))
        templates = [
            f for f in self.store.get_translation_files(project_id)
            if f.locale == TEMPLATE_LOCALE
        ]
        if not templates:
            raise TemplateSourceMissingError(
                _("No English locale found to use as template"))

        for tf in templates:
            self.store.create_translation_file(project_id, tf.filename, code,
                                               empty_copy(tf.content))
        self.store.update_project(project_id, locales=[*project.locales, code])
        log.info("Added locale %s to project %s from %d template files",
                 code, project_id, len(templates))
        return self.get_project_data(project_id)
