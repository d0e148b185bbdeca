# utils/strings.py
from __future__ import annotations

PATH_SEPARATOR = "/"
REPLACEMENT = "_"


def sanitize_component(s: str) -> str:
    """
    Make a single path component out of an API-provided title or filename.

    Only the path separator is neutralized ("a/b.pdf" -> "a_b.pdf"); everything
    else is kept so the export mirrors the names users see in Schoology.
    """
    return (s or "").replace(PATH_SEPARATOR, REPLACEMENT)
