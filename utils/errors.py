# utils/errors.py
from __future__ import annotations

from typing import Any, Mapping


class ExportError(Exception):
    """Base class for failures that abort the export run."""


class MissingFieldError(ExportError):
    """A required key is absent (or has the wrong type) in a fetched record."""

    def __init__(self, field: str, purpose: str) -> None:
        self.field = field
        self.purpose = purpose
        super().__init__(f"{purpose} (field {field!r} missing or invalid)")


class UnknownItemTypeError(ExportError):
    """A folder item carries a type this client does not know how to export."""

    def __init__(self, item_type: Any, record: Mapping[str, Any] | None = None) -> None:
        self.item_type = item_type
        self.record = dict(record or {})
        super().__init__(f"unrecognized item type: {item_type!r}")


class AuthorizationError(ExportError):
    """The OAuth token exchange returned something unusable."""
