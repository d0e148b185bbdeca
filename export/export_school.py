# export/export_school.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from logging_setup import get_logger
from utils.api import SchoologyAPI
from utils.fields import require_str
from utils.fs import atomic_write, write_json


def export_school(dest: Path, api: SchoologyAPI, school_id: int) -> Dict[str, Any]:
    """
    Export a school (or building, which the API models as a school).

    Layout:
      <dest>/info.json
      <dest>/picture.png
    """
    log = get_logger(artifact=dest.name)
    log.info("exporting school", extra={"school_id": school_id})

    info = api.get(f"schools/{school_id}")
    write_json(dest / "info.json", info)

    picture_url = require_str(info, "picture_url", "failed to get school/building picture url")
    atomic_write(dest / "picture.png", api.get_bytes(picture_url, signed=False))
    return info
