#!/usr/bin/env python3
"""
Schoology account export runner.

Usage:
  python scripts/run_export.py creds.txt
  python scripts/run_export.py creds.txt --export-root backups -vv
"""

from __future__ import annotations
import argparse
import sys
import time
from pathlib import Path

# --- ensure repo root on sys.path ---
THIS_FILE = Path(__file__).resolve()
REPO_ROOT = THIS_FILE.parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from logging_setup import setup_logging, get_logger
from utils.api import SchoologyAPI
from utils.fields import require_int
from utils.fs import atomic_write, create_dir
from utils.oauth import resolve_credentials
from export.export_users import export_user
from export.export_school import export_school
from export.export_updates import export_updates
from export.export_messages import export_messages
from export.export_course import export_courses


TOP_LEVEL_DIRS = ["school", "building", "updates", "messages", "users", "courses"]


def export_account(api: SchoologyAPI, export_root: Path, *, stamp: int | None = None) -> Path:
    """
    Export everything reachable from the authenticated user into a fresh
    export_root/export_<unix millis>/ tree. Returns that directory.
    """
    log = get_logger(artifact="runner")

    stamp = int(time.time() * 1000) if stamp is None else stamp
    export_dir = export_root / f"export_{stamp}"
    create_dir(export_dir)
    dirs = {name: export_dir / name for name in TOP_LEVEL_DIRS}
    for d in dirs.values():
        create_dir(d)

    uid = require_int(api.get("app-user-info"), "api_uid", "failed to get uid")
    log.info("logged in as user %s", uid)
    atomic_write(dirs["users"] / "self", str(uid))

    user_info = export_user(dirs["users"], api, uid)
    exported = frozenset({uid})

    export_school(dirs["school"], api, require_int(user_info, "school_id", "failed to get school id"))
    export_school(dirs["building"], api, require_int(user_info, "building_id", "failed to get building id"))

    exported = export_updates(dirs["updates"], api, dirs["users"], exported)
    exported = export_messages(dirs["messages"], api, dirs["users"], exported)

    export_courses(dirs["courses"], api, uid)

    log.info("exported users", extra={"count": len(exported)})
    return export_dir


def main() -> int:
    p = argparse.ArgumentParser(description="Export a Schoology account")
    p.add_argument("credentials", type=Path, help="Credentials file (domain, app key, app secret[, user token, user secret])")
    p.add_argument("--export-root", type=Path, default=Path("."), help="Directory to create the export_<timestamp> tree in")
    p.add_argument("-v", "--verbose", action="count", default=1, help="Increase verbosity (-v for debug output)")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    args = p.parse_args()

    # 0=WARNING, 1=INFO (default), 2+=DEBUG
    setup_logging(verbosity=0 if args.quiet else args.verbose)
    log = get_logger(artifact="runner")

    start = time.monotonic()
    try:
        creds = resolve_credentials(SchoologyAPI, args.credentials)
        export_dir = export_account(SchoologyAPI(creds), args.export_root)
    except Exception as e:
        log.error("✗ export failed", extra={"error": str(e)})
        raise

    log.info("✓ exported to %s in %.1fs", export_dir, time.monotonic() - start)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
