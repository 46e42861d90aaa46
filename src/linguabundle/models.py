"""Project, file and derived key/statistics records.

``to_dict()`` produces the camelCase transfer shape shared with UI and
HTTP collaborators; ``from_dict()`` accepts the same shape.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

JsonTree = dict[str, Any]


@dataclass
class Project:
    """A translation project and its ordered locale list."""
    id: str
    name: str
    locales: list[str] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name, "locales": list(self.locales)}
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        return cls(
            id=data["id"],
            name=data["name"],
            locales=list(data.get("locales", [])),
            created_at=data.get("createdAt"),
        )


@dataclass
class TranslationFile:
    """One JSON document: a (project, locale, filename) triple and its tree."""
    id: str
    project_id: str
    filename: str
    locale: str
    content: JsonTree = field(default_factory=dict)
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "projectId": self.project_id,
            "filename": self.filename,
            "locale": self.locale,
            "content": copy.deepcopy(self.content),
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> TranslationFile:
        return cls(
            id=data["id"],
            project_id=data["projectId"],
            filename=data["filename"],
            locale=data["locale"],
            content=copy.deepcopy(data.get("content", {})),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class TranslationKey:
    """A dot-path within one file, with the value each locale defines for it."""
    key: str
    file: str
    translations: dict[str, str] = field(default_factory=dict)

    @property
    def identity(self) -> tuple[str, str]:
        return (self.key, self.file)

    def to_dict(self) -> dict:
        return {"key": self.key, "file": self.file, "translations": dict(self.translations)}

    @classmethod
    def from_dict(cls, data: dict) -> TranslationKey:
        return cls(key=data["key"], file=data["file"],
                   translations=dict(data.get("translations", {})))


@dataclass
class LocaleStats:
    locale: str
    total_keys: int
    translated_keys: int
    completeness: int

    def to_dict(self) -> dict:
        return {
            "locale": self.locale,
            "totalKeys": self.total_keys,
            "translatedKeys": self.translated_keys,
            "completeness": self.completeness,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LocaleStats:
        return cls(
            locale=data["locale"],
            total_keys=int(data["totalKeys"]),
            translated_keys=int(data["translatedKeys"]),
            completeness=int(data["completeness"]),
        )


@dataclass
class ProjectData:
    """A project with its files and the keys and stats derived from them."""
    project: Project
    files: list[TranslationFile]
    keys: list[TranslationKey]
    stats: list[LocaleStats]

    def stats_for(self, locale: str) -> Optional[LocaleStats]:
        for s in self.stats:
            if s.locale == locale:
                return s
        return None

    def find_file(self, locale: str, filename: str) -> Optional[TranslationFile]:
        for f in self.files:
            if f.locale == locale and f.filename == filename:
                return f
        return None

    def to_dict(self) -> dict:
        return {
            "project": self.project.to_dict(),
            "files": [f.to_dict() for f in self.files],
            "keys": [k.to_dict() for k in self.keys],
            "stats": [s.to_dict() for s in self.stats],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ProjectData:
        return cls(
            project=Project.from_dict(data["project"]),
            files=[TranslationFile.from_dict(f) for f in data.get("files", [])],
            keys=[TranslationKey.from_dict(k) for k in data.get("keys", [])],
            stats=[LocaleStats.from_dict(s) for s in data.get("stats", [])],
        )
