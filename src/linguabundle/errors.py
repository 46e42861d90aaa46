"""Error taxonomy for bundle operations.

Every error the core surfaces carries a machine-readable ``kind`` and a
human message, so callers can report a structured failure without
inspecting exception types.
"""

from __future__ import annotations

from gettext import gettext as _


class BundleError(Exception):
    """Base class for all surfaced bundle errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ParseError(BundleError):
    """A single archive entry could not be parsed as a JSON object."""

    kind = "parse"

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class BundleImportError(BundleError):
    kind = "import"


class NotFoundError(BundleError):
    kind = "not_found"


class TemplateSourceMissingError(BundleError):
    kind = "template_source_missing"


class ExportError(BundleError):
    kind = "export"


class DuplicateLocaleError(BundleError):
    kind = "duplicate_locale"


class InvalidLocaleError(BundleError):
    kind = "invalid_locale"


class PathConflictError(BundleError):
    """An edit path runs through a value that is not a nested object."""

    kind = "path_conflict"


class InvalidKeyError(BundleError):
    """An edit names an empty key or passes a value that is not a string."""

    kind = "invalid_key"


# ── Remote ────────────────────────────────────────────────────────────

class RemoteError(BundleError):
    kind = "remote"


class RemoteTimeoutError(RemoteError):
    kind = "remote_timeout"


class RemoteAuthError(RemoteError):
    kind = "remote_auth"


def project_not_found(project_id: str) -> NotFoundError:
    return NotFoundError(_("Project not found: {id}").format(id=project_id))
