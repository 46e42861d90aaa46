"""Format-level helpers for JSON translation trees and ZIP bundles."""

from __future__ import annotations

import json
from typing import Any, Union

from linguabundle.errors import ParseError

DEFAULT_MAX_DEPTH = 64


def tree_depth(value: Any) -> int:
    """Return the nesting depth of objects and arrays in a JSON value.

    A scalar has depth 0, ``{}`` has depth 1, ``{"a": {}}`` depth 2.
    """
    deepest = 0
    stack = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        depth += 1
        deepest = max(deepest, depth)
        stack.extend((child, depth) for child in children)
    return deepest


def safe_loads_json(data: Union[str, bytes], max_depth: int = DEFAULT_MAX_DEPTH,
                    path: str = "") -> dict:
    """Parse a JSON document that must hold an object, with a nesting cap.

    Guards against documents crafted to exhaust the interpreter (deep
    nesting) in addition to plain syntax errors. Raises ParseError.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Not valid UTF-8: {e}", path) from e
    else:
        text = data
    try:
        obj = json.loads(text)
    except RecursionError as e:
        raise ParseError("JSON nesting too deep", path) from e
    except ValueError as e:
        raise ParseError(f"Invalid JSON: {e}", path) from e
    if not isinstance(obj, dict):
        raise ParseError(
            f"Top-level JSON value must be an object, got {type(obj).__name__}", path)
    if max_depth and tree_depth(obj) > max_depth:
        raise ParseError(f"JSON nesting exceeds {max_depth} levels", path)
    return obj
