# export/export_attachments.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List

from models import Attachment
from utils.api import SchoologyAPI
from utils.fields import dig
from utils.fs import atomic_write

PathFor = Callable[[str], Path]


def iter_attachments(node: Dict[str, Any]) -> Iterator[Attachment]:
    """File attachments of a record (`attachments.files.file[]`); nothing when absent."""
    files = dig(node, "attachments", "files", "file")
    if not isinstance(files, list):
        return
    for f in files:
        yield Attachment.from_node(f)


def export_attachments(node: Dict[str, Any], path_for: PathFor, api: SchoologyAPI) -> List[Path]:
    """
    Download every file attachment of `node`.

    `path_for` maps the sanitized filename to its destination, which is how
    callers add prefixes such as `attachment_` or `update_<id>_`. Attachments
    whose sanitized names collide land on the same path; the last one wins.
    The first failing download aborts the rest.
    """
    written: List[Path] = []
    for attachment in iter_attachments(node):
        dest = path_for(attachment.safe_name)
        atomic_write(dest, api.get_bytes(attachment.download_path))
        written.append(dest)
    return written
