#models.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from utils.errors import UnknownItemTypeError
from utils.fields import require_str
from utils.strings import sanitize_component


@dataclass(frozen=True, slots=True)
class Credentials:
    consumer_key: str
    consumer_secret: str
    user_token: Optional[str] = None  # absent during the request-token phase
    user_secret: Optional[str] = None

    @property
    def has_user(self) -> bool:
        return bool(self.user_token) and bool(self.user_secret)

    def with_user(self, token: str, secret: str) -> "Credentials":
        return Credentials(self.consumer_key, self.consumer_secret, token, secret)


class ItemType(str, Enum):
    """Kinds of entries a course folder listing can hold."""
    FOLDER = "folder"
    PAGE = "page"
    DOCUMENT = "document"
    ASSIGNMENT = "assignment"

    @classmethod
    def parse(cls, value: Any, record: Mapping[str, Any] | None = None) -> "ItemType":
        try:
            return cls(value)
        except ValueError:
            raise UnknownItemTypeError(value, record) from None


@dataclass(frozen=True, slots=True)
class FolderItem:
    type: ItemType
    title: str
    location: str  # absolute URL of the full record

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> "FolderItem":
        item_type = ItemType.parse(node.get("type"), node)
        return cls(
            type=item_type,
            title=require_str(node, "title", "failed to get folder item title"),
            location=require_str(node, "location", "failed to get folder item location"),
        )

    @property
    def dirname(self) -> str:
        return sanitize_component(self.title)


@dataclass(frozen=True, slots=True)
class Attachment:
    download_path: str
    filename: str

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> "Attachment":
        return cls(
            download_path=require_str(node, "download_path", "failed to get file attachment download path"),
            filename=require_str(node, "filename", "failed to get file attachment name"),
        )

    @property
    def safe_name(self) -> str:
        return sanitize_component(self.filename)
