"""ZIP bundle reading and writing."""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import Iterable, Optional

from linguabundle.errors import BundleImportError

log = logging.getLogger(__name__)


@dataclass
class ArchiveEntry:
    """A raw archive member."""
    path: str
    data: bytes = b""
    is_dir: bool = False


def read_archive(data: bytes, max_entry_bytes: Optional[int] = None) -> list[ArchiveEntry]:
    """Return the members of a ZIP archive in archive order.

    Members that cannot be extracted (corrupt, encrypted, or larger than
    ``max_entry_bytes`` once uncompressed) are skipped with a warning.
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise BundleImportError(f"Not a ZIP archive: {e}") from e

    entries = []
    with zf:
        for info in zf.infolist():
            if info.is_dir():
                entries.append(ArchiveEntry(path=info.filename, is_dir=True))
                continue
            if max_entry_bytes and info.file_size > max_entry_bytes:
                log.warning("Skipping %s: %d bytes exceeds limit of %d",
                            info.filename, info.file_size, max_entry_bytes)
                continue
            try:
                payload = zf.read(info)
            except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as e:
                log.warning("Skipping unreadable archive member %s: %s", info.filename, e)
                continue
            entries.append(ArchiveEntry(path=info.filename, data=payload))
    return entries


def write_archive(members: Iterable[tuple[str, str]]) -> bytes:
    """Build a ZIP archive from ``(path, text)`` pairs, UTF-8 encoded."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path, text in members:
            zf.writestr(path, text.encode("utf-8"))
    return buf.getvalue()
