# export/export_content.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List

from logging_setup import get_logger
from models import FolderItem, ItemType
from utils.api import SchoologyAPI
from utils.errors import UnknownItemTypeError
from utils.fields import optional_list, require_int
from utils.fs import atomic_write, ensure_dir, write_json
from export.export_attachments import export_attachments

DETAIL_QUERY = "?with_attachments=TRUE&richtext=1"
SUBMISSIONS_QUERY = "?with_attachments=TRUE&all_revisions=TRUE"
ATTACHMENT_PREFIX = "attachment_"


def export_folder(dest: Path, folder: Dict[str, Any], api: SchoologyAPI, *, course_id: str | int = "-") -> None:
    """
    Mirror a course folder listing (and everything below it) under `dest`.

    Layout, one directory per item named after its title ("/" -> "_"):
      <dest>/<folder title>/...                  (recursive)
      <dest>/<page title>/page.html + attachment_*
      <dest>/<document title>/info.json + attachment_*
      <dest>/<assignment title>/info.json
                              ├─ revision_<id>/info.json + attachments
                              └─ grade.json

    Items are exported in listing order. The first failure, including an
    item type we don't know, aborts the whole walk.
    """
    log = get_logger(artifact="files", course_id=course_id)
    ensure_dir(dest)

    items = optional_list(folder, "folder-item") or []
    seen: set[str] = set()
    for node in items:
        try:
            item = FolderItem.from_node(node)
        except UnknownItemTypeError:
            log.error("unrecognized folder item", extra={"record": node, "path": str(dest)})
            raise

        if item.dirname in seen:
            log.warning(
                "sibling items share a directory",
                extra={"title": item.title, "path": str(dest)},
            )
        seen.add(item.dirname)

        log.debug("exporting item", extra={"type": item.type.value, "title": item.title})
        _HANDLERS[item.type](dest / item.dirname, item, api, course_id)


def _export_subfolder(item_dir: Path, item: FolderItem, api: SchoologyAPI, course_id: str | int) -> None:
    export_folder(item_dir, api.get_raw(item.location), api, course_id=course_id)


def _prefixed(item_dir: Path) -> Callable[[str], Path]:
    return lambda name: item_dir / f"{ATTACHMENT_PREFIX}{name}"


def _export_page(item_dir: Path, item: FolderItem, api: SchoologyAPI, course_id: str | int) -> None:
    info = api.get_raw(item.location + DETAIL_QUERY)
    ensure_dir(item_dir)
    body = info.get("body") if isinstance(info, dict) else None
    atomic_write(item_dir / "page.html", body if isinstance(body, str) else "")
    export_attachments(info, _prefixed(item_dir), api)


def _export_document(item_dir: Path, item: FolderItem, api: SchoologyAPI, course_id: str | int) -> None:
    info = api.get_raw(item.location + DETAIL_QUERY)
    ensure_dir(item_dir)
    write_json(item_dir / "info.json", info)
    export_attachments(info, _prefixed(item_dir), api)


def submissions_url(location: str) -> str:
    """.../sections/5/assignments/30 -> .../sections/5/submissions/30?..."""
    return location.replace("assignments", "submissions") + SUBMISSIONS_QUERY


def grade_url(location: str) -> str:
    """.../sections/5/assignments/30 -> .../sections/5/grades?assignment_id=30"""
    return location.replace("assignments/", "grades?assignment_id=")


def _export_assignment(item_dir: Path, item: FolderItem, api: SchoologyAPI, course_id: str | int) -> None:
    log = get_logger(artifact="assignments", course_id=course_id)

    info = api.get_raw(item.location + DETAIL_QUERY)
    ensure_dir(item_dir)
    write_json(item_dir / "info.json", info)

    # info -> revisions -> grade, strictly in this order
    submissions = api.get_raw(submissions_url(item.location))
    revisions: List[Dict[str, Any]] = optional_list(submissions, "revision") or []
    for revision in revisions:
        revision_id = require_int(revision, "revision_id", "failed to get submission revision id")
        revision_dir = item_dir / f"revision_{revision_id}"
        ensure_dir(revision_dir)
        write_json(revision_dir / "info.json", revision)
        export_attachments(revision, lambda name, d=revision_dir: d / name, api)

    write_json(item_dir / "grade.json", api.get_raw(grade_url(item.location)))
    log.info("exported assignment", extra={"title": item.title, "revisions": len(revisions)})


_HANDLERS: Dict[ItemType, Callable[[Path, FolderItem, SchoologyAPI, Any], None]] = {
    ItemType.FOLDER: _export_subfolder,
    ItemType.PAGE: _export_page,
    ItemType.DOCUMENT: _export_document,
    ItemType.ASSIGNMENT: _export_assignment,
}
