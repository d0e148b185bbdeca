# export/export_messages.py
from __future__ import annotations

from itertools import chain
from pathlib import Path

from logging_setup import get_logger
from utils.api import SchoologyAPI
from utils.fields import optional_int, require_int, require_link
from utils.fs import write_json
from utils.pagination import iter_pages, page_items
from export.export_attachments import export_attachments
from export.export_users import ExportedUsers, ensure_exported

_QUERY = "?extended&options&start=0&limit=50&created_offset=0&with_attachments=TRUE&richtext=1"
INBOX_START = "messages/inbox" + _QUERY
SENT_START = "messages/sent" + _QUERY


def export_messages(
    messages_root: Path,
    api: SchoologyAPI,
    users_root: Path,
    exported: ExportedUsers,
) -> ExportedUsers:
    """
    Export inbox then sent messages.

    Layout:
      messages/messages_<n>.json             raw page n, numbered across inbox and sent
      messages/message_<id>.json             full message thread
      messages/message_<id>_<filename>       attachments

    Message authors are exported along the way. Returns the updated set.
    """
    log = get_logger(artifact="messages")

    pages = chain(
        iter_pages(api, api.url(INBOX_START)),
        iter_pages(api, api.url(SENT_START)),
    )
    for n, page in enumerate(pages):
        log.info("exporting messages (%s)", n)
        for message in page_items(page, "message", "failed to get messages info"):
            message_id = require_int(message, "id", "failed to get message id")
            message_url = require_link(message, "self", "failed to get message url")

            write_json(messages_root / f"message_{message_id}.json", api.get_raw(message_url))

            export_attachments(
                message,
                lambda name, mid=message_id: messages_root / f"message_{mid}_{name}",
                api,
            )

            author = optional_int(message, "author_id")
            if author is not None:
                exported = ensure_exported(author, exported, users_root, api)

        write_json(messages_root / f"messages_{n}.json", page)

    return exported
