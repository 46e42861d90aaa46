"""Nested JSON translation trees: flatten, unflatten, template, edit.

Only string values are translation leaves. Nested objects are walked;
numbers, booleans, null and arrays are neither leaves nor walked, so
they never show up as keys.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Iterable, Iterator

from linguabundle.errors import PathConflictError


def flatten(obj: dict, prefix: str = "") -> Iterator[tuple[str, str]]:
    """Yield ``(dot_path, value)`` for every string leaf in document order."""
    stack = [(prefix or None, iter(obj.items()))]
    while stack:
        base, items = stack[-1]
        for k, v in items:
            full_key = k if base is None else f"{base}.{k}"
            if isinstance(v, str):
                yield full_key, v
            elif isinstance(v, dict):
                stack.append((full_key, iter(v.items())))
                break
        else:
            stack.pop()


def _descend(tree: dict, parts: list[str], path: str) -> dict:
    """Walk ``parts`` from ``tree``, creating missing objects on the way."""
    d = tree
    for part in parts:
        if part not in d:
            d[part] = {}
        child = d[part]
        if not isinstance(child, dict):
            raise PathConflictError(
                f"Cannot descend into '{part}' of '{path}': it holds a {type(child).__name__}")
        d = child
    return d


def unflatten(pairs: Iterable[tuple[str, str]]) -> dict:
    """Rebuild a nested tree from dot-path pairs."""
    result: dict = {}
    for key, value in pairs:
        parts = key.split(".")
        _descend(result, parts[:-1], key)[parts[-1]] = value
    return result


def set_path_value(tree: dict, dot_path: str, value: str) -> dict:
    """Return a copy of ``tree`` with the leaf at ``dot_path`` set to ``value``.

    Intermediate objects that do not exist yet are created, so editing a
    brand-new key works. The input tree is left untouched.
    """
    updated = copy.deepcopy(tree)
    parts = dot_path.split(".")
    parent = _descend(updated, parts[:-1], dot_path)
    if isinstance(parent.get(parts[-1]), dict):
        raise PathConflictError(f"'{dot_path}' is an object, not a translation string")
    parent[parts[-1]] = value
    return updated


def empty_copy(obj: dict) -> dict:
    """Copy a tree's structure with every string leaf replaced by ``""``.

    Values that are neither strings nor objects are copied unchanged.
    """
    result: dict = {}
    stack = [(obj, result)]
    while stack:
        src, dst = stack.pop()
        for k, v in src.items():
            if isinstance(v, str):
                dst[k] = ""
            elif isinstance(v, dict):
                dst[k] = {}
                stack.append((v, dst[k]))
            else:
                dst[k] = copy.deepcopy(v)
    return result


def dump_json(obj: Any) -> str:
    """Serialize a tree the way exported files are written."""
    return json.dumps(obj, ensure_ascii=False, indent=2) + "\n"
