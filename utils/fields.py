# utils/fields.py
"""
Narrow accessors for the untyped JSON records returned by the API.

Each required lookup takes a `purpose` string that becomes the error message,
so a failure says which field was needed and for what.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from utils.errors import MissingFieldError

Node = Dict[str, Any]


def dig(node: Any, *keys: str) -> Any:
    """Follow nested mapping keys; None as soon as one is missing."""
    cur = node
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur


def require_str(node: Any, key: str, purpose: str) -> str:
    value = dig(node, key)
    if not isinstance(value, str):
        raise MissingFieldError(key, purpose)
    return value


def require_int(node: Any, key: str, purpose: str) -> int:
    value = optional_int(node, key)
    if value is None:
        raise MissingFieldError(key, purpose)
    return value


def optional_int(node: Any, key: str) -> Optional[int]:
    value = dig(node, key)
    # bool is an int subclass; JSON true/false is never an id
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def require_list(node: Any, key: str, purpose: str) -> List[Any]:
    value = optional_list(node, key)
    if value is None:
        raise MissingFieldError(key, purpose)
    return value


def optional_list(node: Any, key: str) -> Optional[List[Any]]:
    value = dig(node, key)
    return value if isinstance(value, list) else None


def require_link(node: Any, rel: str, purpose: str) -> str:
    """`links.<rel>` as a string, e.g. the `self` URL of a course or message."""
    value = dig(node, "links", rel)
    if not isinstance(value, str):
        raise MissingFieldError(f"links.{rel}", purpose)
    return value
