# export/export_updates.py
from __future__ import annotations

from pathlib import Path

from logging_setup import get_logger
from utils.api import SchoologyAPI
from utils.fields import require_int, require_list
from utils.fs import write_json
from utils.pagination import iter_pages, page_items
from export.export_attachments import export_attachments
from export.export_users import ExportedUsers, ensure_exported

UPDATES_START = "recent/?extended&options&start=0&limit=50&created_offset=0&with_attachments=TRUE&richtext=1"


def export_updates(
    updates_root: Path,
    api: SchoologyAPI,
    users_root: Path,
    exported: ExportedUsers,
) -> ExportedUsers:
    """
    Export the activity feed.

    Layout:
      updates/updates_<n>.json               raw page n (0-based)
      updates/update_<id>_<filename>         attachments of each update

    Authors of updates and of their comments are exported along the way.
    Returns the updated set of exported users.
    """
    log = get_logger(artifact="updates")

    for n, page in enumerate(iter_pages(api, api.url(UPDATES_START))):
        log.info("exporting updates (%s)", n)
        for update in page_items(page, "update", "failed to get update info"):
            update_id = require_int(update, "id", "failed to get update id")

            author = require_int(update, "uid", "failed to get update user id")
            exported = ensure_exported(author, exported, users_root, api)

            for comment in require_list(update, "comments", "failed to get update comments"):
                commenter = require_int(comment, "uid", "failed to get update comment user id")
                exported = ensure_exported(commenter, exported, users_root, api)

            export_attachments(
                update,
                lambda name, uid=update_id: updates_root / f"update_{uid}_{name}",
                api,
            )

        write_json(updates_root / f"updates_{n}.json", page)

    return exported
