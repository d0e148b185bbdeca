# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ---------- import helpers ----------
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import Credentials
from utils.api import SchoologyAPI

BASE = "https://api.test/v1"


def attachments(*files: tuple[str, str]) -> dict:
    """Build the `attachments.files.file[]` shape from (filename, download_path) pairs."""
    return {"files": {"file": [{"filename": n, "download_path": p} for n, p in files]}}


def mock_user(m, user_id: int, **fields) -> None:
    """Register users/<id> plus its (unsigned) picture."""
    pic = f"https://cdn.test/users/{user_id}.png"
    m.get(f"{BASE}/users/{user_id}", json={"id": user_id, "picture_url": pic, **fields})
    m.get(pic, content=f"pic-{user_id}".encode())


@pytest.fixture(autouse=True)
def _no_sleep_and_no_jitter(monkeypatch):
    # Make retries instant & deterministic
    monkeypatch.setattr("utils.api.time.sleep", lambda *_: None)
    monkeypatch.setattr("utils.api.random.uniform", lambda *_: 0.0)


@pytest.fixture
def creds() -> Credentials:
    return Credentials("app-key", "app-secret", "user-token", "user-secret")


@pytest.fixture
def api(creds) -> SchoologyAPI:
    return SchoologyAPI(creds, BASE, max_retries=2)


@pytest.fixture
def users_root(tmp_path: Path) -> Path:
    root = tmp_path / "users"
    root.mkdir()
    return root
