# export/export_users.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, FrozenSet

from logging_setup import get_logger
from utils.api import SchoologyAPI
from utils.fields import require_str
from utils.fs import atomic_write, create_dir, write_json

ExportedUsers = FrozenSet[int]


def export_user(users_root: Path, api: SchoologyAPI, user_id: int) -> Dict[str, Any]:
    """
    Export one user profile.

    Layout:
      users/<user_id>/user_info.json
                    └─ user_image.png

    The directory must not exist yet. Returns the fetched profile.
    """
    log = get_logger(artifact="users")

    user_dir = users_root / str(user_id)
    create_dir(user_dir)

    log.info("exporting user", extra={"user_id": user_id})
    user_info = api.get(f"users/{user_id}")
    write_json(user_dir / "user_info.json", user_info)

    picture_url = require_str(user_info, "picture_url", "failed to get user picture url")
    atomic_write(user_dir / "user_image.png", api.get_bytes(picture_url, signed=False))

    return user_info


def ensure_exported(
    user_id: int,
    exported: ExportedUsers,
    users_root: Path,
    api: SchoologyAPI,
) -> ExportedUsers:
    """
    Export `user_id` unless it is already in `exported`.

    Returns the set to carry forward. Callers must always pass the set
    returned by the previous call; the walk is sequential, which is what
    keeps every profile directory written exactly once.
    """
    if user_id in exported:
        return exported
    export_user(users_root, api, user_id)
    return exported | {user_id}
