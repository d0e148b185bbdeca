# export/export_course.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from logging_setup import get_logger
from utils.api import SchoologyAPI
from utils.fields import require_link, require_list, require_str
from utils.fs import atomic_write, create_dir, write_json
from export.export_content import export_folder


def export_course(courses_root: Path, api: SchoologyAPI, uid: int, section: Dict[str, Any]) -> str:
    """
    Export one course (section entry from the user's listing).

    Layout:
      courses/<course_id>/info.json
                        ├─ banner.png
                        ├─ grades.json
                        └─ files/...      (course folder tree, see export_folder)

    Returns the course id.
    """
    course_id = require_str(section, "id", "failed to get course id")
    log = get_logger(artifact="course", course_id=course_id)

    course_dir = courses_root / course_id
    create_dir(course_dir)
    log.info("exporting course %s", course_id)

    course_info = api.get_raw(require_link(section, "self", "failed to get course url"))
    write_json(course_dir / "info.json", course_info)

    banner_url = require_str(course_info, "profile_url", "failed to get course banner url")
    atomic_write(course_dir / "banner.png", api.get_bytes(banner_url))

    write_json(course_dir / "grades.json", api.get(f"users/{uid}/grades/?section_id={course_id}"))

    root_folder = api.get(f"courses/{course_id}/folder/0")
    try:
        export_folder(course_dir / "files", root_folder, api, course_id=course_id)
    except Exception:
        log.error("failed to export course files")
        raise

    return course_id


def export_courses(courses_root: Path, api: SchoologyAPI, uid: int) -> List[str]:
    """
    Export every section the user is or was enrolled in.
    Writes the raw listing to courses/info.json and returns the exported ids in order.
    """
    log = get_logger(artifact="courses")

    courses = api.get(f"users/{uid}/sections?include_past=1")
    write_json(courses_root / "info.json", courses)

    sections: List[Dict[str, Any]] = require_list(courses, "section", "failed to get courses")
    log.debug("courses to export: %s", [s.get("id", "") for s in sections])

    return [export_course(courses_root, api, uid, section) for section in sections]
