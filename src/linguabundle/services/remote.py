# SPDX-License-Identifier: GPL-3.0-or-later
"""Client for a translation bundle service over HTTP."""

from __future__ import annotations

import logging
import time
from typing import Optional

import requests
from gettext import gettext as _

from linguabundle.errors import (
    NotFoundError,
    RemoteAuthError,
    RemoteError,
    RemoteTimeoutError,
)
from linguabundle.models import JsonTree, Project, ProjectData, TranslationFile

log = logging.getLogger(__name__)


# ── Retry helper ──────────────────────────────────────────────────────

def _request_with_retry(method: str, url: str, max_retries: int = 3,
                        timeout: int = 30, **kwargs) -> requests.Response:
    """Make an HTTP request with retry logic."""
    for attempt in range(max_retries):
        try:
            r = requests.request(method, url, timeout=timeout, **kwargs)
            if r.status_code == 401:
                raise RemoteAuthError(_("Authentication failed."))
            if r.status_code == 403:
                raise RemoteAuthError(_("Access denied."))
            if r.status_code == 429:
                # Rate limited, back off
                wait = min(2 ** attempt * 2, 30)
                log.debug("Rate limited on %s, retrying in %ss", url, wait)
                time.sleep(wait)
                continue
            if r.status_code >= 500:
                wait = min(2 ** attempt, 10)
                log.debug("Server error %s on %s, retrying in %ss", r.status_code, url, wait)
                time.sleep(wait)
                continue
            return r
        except requests.Timeout as e:
            if attempt < max_retries - 1:
                time.sleep(2 ** attempt)
                continue
            raise RemoteTimeoutError(
                _("Request timed out after {n} attempts").format(n=max_retries)) from e
        except requests.ConnectionError as e:
            if attempt < max_retries - 1:
                time.sleep(2 ** attempt)
                continue
            raise RemoteError(_("Connection failed: {error}").format(error=str(e))) from e
    # If we exhausted retries due to 429/5xx
    raise RemoteError(_("Request failed after {n} retries").format(n=max_retries))


def _error_message(r: requests.Response) -> str:
    try:
        return r.json().get("message") or r.reason
    except (ValueError, AttributeError):
        return r.text or r.reason


class RemoteBundleClient:
    """Talks to the ``/api/projects`` routes of a bundle server."""

    def __init__(self, base_url: str, timeout: int = 30, max_retries: int = 3):
        if not base_url:
            raise ValueError("A base URL is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries

    @classmethod
    def from_settings(cls, settings) -> RemoteBundleClient:
        return cls(settings["remote_url"], timeout=settings["request_timeout"],
                   max_retries=settings["max_retries"])

    def _call(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/api/projects{path}"
        r = _request_with_retry(method, url, max_retries=self.max_retries,
                                timeout=self.timeout, **kwargs)
        if r.status_code == 404:
            raise NotFoundError(_error_message(r))
        if not r.ok:
            raise RemoteError(_("Server returned {status}: {message}").format(
                status=r.status_code, message=_error_message(r)))
        return r

    def list_projects(self) -> list[Project]:
        return [Project.from_dict(p) for p in self._call("GET", "").json()]

    def get_project_data(self, project_id: str) -> ProjectData:
        return ProjectData.from_dict(self._call("GET", f"/{project_id}").json())

    def upload_archive(self, data: bytes, project_name: Optional[str] = None) -> ProjectData:
        form = {"projectName": project_name} if project_name else {}
        r = self._call(
            "POST", "/upload",
            files={"zipFile": ("translations.zip", data, "application/zip")},
            data=form,
        )
        return ProjectData.from_dict(r.json())

    def update_translation(self, project_id: str, file_id: str,
                           content: JsonTree) -> TranslationFile:
        r = self._call("PATCH", f"/{project_id}/translations",
                       json={"fileId": file_id, "content": content})
        return TranslationFile.from_dict(r.json())

    def add_locale(self, project_id: str, locale_code: str,
                   display_name: Optional[str] = None) -> ProjectData:
        r = self._call("POST", f"/{project_id}/locales", json={
            "localeCode": locale_code,
            "displayName": display_name or locale_code,
        })
        return ProjectData.from_dict(r.json())

    def export_archive(self, project_id: str) -> bytes:
        return self._call("GET", f"/{project_id}/export").content
