# utils/pagination.py
from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional

from utils.api import SchoologyAPI
from utils.fields import dig, require_list


def next_link(page: Any) -> Optional[str]:
    """The `links.next` cursor of a page, or None on the last page."""
    nxt = dig(page, "links", "next")
    return nxt if isinstance(nxt, str) and nxt else None


def iter_pages(api: SchoologyAPI, url: str) -> Iterator[Dict[str, Any]]:
    """
    Walk a feed by following `links.next`.

    Yields each page as fetched; the next URL is used unmodified since it
    already carries the server's cursor. Stops on the first page without a
    next link. Fetch errors propagate and end the walk.
    """
    current: Optional[str] = url
    while current:
        page = api.get_raw(current)
        yield page
        current = next_link(page)


def page_items(page: Dict[str, Any], key: str, purpose: str) -> List[Dict[str, Any]]:
    """Items of one page under the caller's collection key ("update", "message", ...)."""
    return require_list(page, key, purpose)
