"""Key table and completeness statistics derived from translation files."""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Iterable, Optional

from linguabundle.models import LocaleStats, TranslationKey
from linguabundle.parsers.json_parser import flatten

STATUS_FILTERS = ("all", "missing", "complete", "empty")


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer, with .5 going up (12.5 -> 13)."""
    return math.floor(value + Fraction(1, 2))


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(Fraction(part * 100, total))


def _is_translated(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def build_key_table(files: Iterable[tuple[str, str, dict]]) -> list[TranslationKey]:
    """Merge ``(locale, filename, tree)`` triples into one key table.

    Keys are identified by ``(dot_path, filename)``. Output order is the
    order in which each key was first seen; a later value for the same
    locale overwrites an earlier one.
    """
    table: dict[tuple[str, str], TranslationKey] = {}
    for locale, filename, tree in files:
        for path, value in flatten(tree):
            entry = table.get((path, filename))
            if entry is None:
                entry = table[(path, filename)] = TranslationKey(key=path, file=filename)
            entry.translations[locale] = value
    return list(table.values())


def compute_stats(keys: list[TranslationKey], locales: Iterable[str]) -> list[LocaleStats]:
    """Per-locale completeness against the total key count of all files."""
    total = len(keys)
    stats = []
    for locale in locales:
        translated = sum(1 for k in keys if _is_translated(k.translations.get(locale)))
        stats.append(LocaleStats(
            locale=locale,
            total_keys=total,
            translated_keys=translated,
            completeness=percentage(translated, total),
        ))
    return stats


def overall_progress(stats: list[LocaleStats]) -> int:
    """Mean completeness over all locales."""
    if not stats:
        return 0
    return round_half_up(Fraction(sum(s.completeness for s in stats), len(stats)))


def file_groups(keys: Iterable[TranslationKey]) -> list[str]:
    """Distinct filenames in first-seen order."""
    return list(dict.fromkeys(k.file for k in keys))


def keys_per_file(keys: Iterable[TranslationKey]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for k in keys:
        counts[k.file] = counts.get(k.file, 0) + 1
    return counts


def _matches_status(key: TranslationKey, locales: list[str], status: str) -> bool:
    if status == "missing":
        return any(not _is_translated(key.translations.get(loc)) for loc in locales)
    if status == "complete":
        return all(_is_translated(key.translations.get(loc)) for loc in locales)
    if status == "empty":
        return any(key.translations.get(loc) == "" for loc in locales)
    return True


def filter_keys(keys: Iterable[TranslationKey], locales: Iterable[str], query: str = "",
                filename: Optional[str] = None, status: str = "all") -> list[TranslationKey]:
    """Filter keys by dot-path substring, owning file and translation status.

    ``status`` is one of ``all``, ``missing`` (some locale lacks a
    non-blank value), ``complete`` (every locale has one) or ``empty``
    (some locale holds exactly ``""``).
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status!r}")
    locales = list(locales)
    needle = query.lower()
    return [
        k for k in keys
        if needle in k.key.lower()
        and (not filename or k.file == filename)
        and _matches_status(k, locales, status)
    ]
