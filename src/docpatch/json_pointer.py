"""
JSON Pointer parsing and parent resolution.

Pointers are "/" separated; inside a token "~1" stands for "/" and "~0" for
"~". An empty pointer (or "/") addresses the whole document, which the patch
engine does not accept as a mutation target.
"""

from __future__ import annotations

import re
from typing import Any

from docpatch.errors import InvalidPathError, PathResolutionError

APPEND_TOKEN = "-"

_ARRAY_INDEX_RE = re.compile(r"0|[1-9]\d*")
_SIGNED_INDEX_RE = re.compile(r"0|-?[1-9]\d*")
_BAD_ESCAPE_RE = re.compile(r"~(?![01])")


def decode_token(token: str, path: str = "") -> str:
    if _BAD_ESCAPE_RE.search(token):
        raise InvalidPathError(
            f"Invalid escape sequence in JSON Pointer token '{token}'", path
        )
    return token.replace("~1", "/").replace("~0", "~")


def escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def build_json_pointer(tokens: list[str]) -> str:
    """Join tokens back into a pointer string, escaping as needed."""
    return "".join("/" + escape_token(str(t)) for t in tokens)


def parse_json_pointer(path: str) -> list[str]:
    """
    Split a JSON Pointer into unescaped tokens.

    Raises:
        InvalidPathError: if the pointer is empty, addresses the root, does
            not start with "/", or contains a bad "~" escape.
    """
    if not isinstance(path, str):
        raise InvalidPathError("Invalid path: must be a string", None)
    if path.strip() == "" or path == "/":
        raise InvalidPathError("Path cannot be empty.", path)
    if not path.startswith("/"):
        raise InvalidPathError(
            f'Invalid JSON Pointer (must start with "/"): {path}', path
        )
    return [decode_token(t, path) for t in path.split("/")[1:]]


def parse_array_index(token: str) -> int | None:
    """Return the index a token denotes, or None when it is not an index."""
    if not _ARRAY_INDEX_RE.fullmatch(token):
        return None
    return int(token)


def parse_signed_index(token: str) -> int | None:
    """Like parse_array_index, but a leading "-" gives a negative number."""
    if not _SIGNED_INDEX_RE.fullmatch(token):
        return None
    return int(token)


def _step(node: Any, token: str, path: str, position: int) -> Any:
    if isinstance(node, dict):
        if token not in node:
            raise PathResolutionError(
                f"Property not found: '{token}' at token index {position} "
                f"(path {path})",
                path,
            )
        return node[token]

    if isinstance(node, list):
        idx = parse_array_index(token)
        if idx is None:
            raise PathResolutionError(
                f"Invalid array index token '{token}' at token index {position} "
                f"(path {path})",
                path,
            )
        if idx >= len(node):
            raise PathResolutionError(
                f"Array index out of range: {idx} (length {len(node)}) "
                f"at token index {position} (path {path})",
                path,
            )
        return node[idx]

    raise PathResolutionError(
        f"Cannot traverse '{token}': value at token index {position} is a "
        f"{describe_type(node)} (path {path})",
        path,
    )


def resolve_parent(document: Any, tokens: list[str], path: str = "") -> tuple[Any, str]:
    """
    Walk every token except the last one.

    Returns:
        The container holding the target and the final, unresolved token.
    """
    if not tokens:
        raise InvalidPathError("Path cannot be empty.", path)

    node = document
    for position, token in enumerate(tokens[:-1]):
        node = _step(node, token, path, position)
    return node, tokens[-1]


def get_value(document: Any, path: str) -> Any:
    """Return the value a pointer addresses."""
    tokens = parse_json_pointer(path)
    parent, last = resolve_parent(document, tokens, path)
    return _step(parent, last, path, len(tokens) - 1)


def describe_type(v: Any) -> str:
    if v is None:
        return "null"
    if isinstance(v, list):
        return "array"
    if isinstance(v, dict):
        return "object"
    if isinstance(v, bool):
        return "boolean"
    if isinstance(v, (int, float)):
        return "number"
    if isinstance(v, str):
        return "string"
    return type(v).__name__
