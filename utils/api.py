# utils/api.py
from __future__ import annotations

import os
import time
import requests
import logging
import random
import sys
from pathlib import Path
from typing import Dict, Any
from urllib.parse import urljoin

from dotenv import load_dotenv

# --- ensure repo root on sys.path ---
THIS_FILE = Path(__file__).resolve()
REPO_ROOT = THIS_FILE.parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from models import Credentials
from utils.oauth import oauth_header


def _load_env_if_opted_in() -> None:
    """
    only load .env files when explicitly opted in
    - Set PYTHON_DOTENV_LOAD=1 to enable
    - PYTHON_DOTENV_DISABLE=1 always disables
    """
    if os.getenv("PYTHON_DOTENV_DISABLE") == "1":
        return
    if os.getenv("PYTHON_DOTENV_LOAD") != "1":
        return

    # Load env files (repo defaults, then local overrides)
    load_dotenv(str(REPO_ROOT / ".env"))
    load_dotenv(str(REPO_ROOT / ".env.local"), override=True)

# Do NOT load by default; tests control the environment.
_load_env_if_opted_in()

# --- Tunables ---------------------------------------------------------------
DEFAULT_TIMEOUT: tuple[float, float] = (5, 60)  # (connect, read) seconds
DEFAULT_MAX_RETRIES = 10
USER_AGENT = "SchoologyExport/1.0"
API_BASE = os.getenv("SCHOOLOGY_API_BASE") or "https://api.schoology.com/v1"

# Allow overrides via env (e.g., SCHOOLOGY_HTTP_TIMEOUT="10,300")
_to = os.getenv("SCHOOLOGY_HTTP_TIMEOUT")
if _to:
    try:
        parts = [float(p.strip()) for p in _to.split(",")]
        if len(parts) == 2:
            DEFAULT_TIMEOUT = (parts[0], parts[1])  # type: ignore[assignment]
    except ValueError:
        logging.getLogger(__name__).warning("ignoring malformed SCHOOLOGY_HTTP_TIMEOUT=%r", _to)

_retries = os.getenv("SCHOOLOGY_MAX_RETRIES")
if _retries and _retries.strip().isdigit():
    DEFAULT_MAX_RETRIES = int(_retries)

log = logging.getLogger(__name__)


class SchoologyAPI:
    """
    Signed, retrying access to the Schoology REST API.

    Every request gets a fresh OAuth header (new nonce/timestamp) and
    `Accept: application/json`. Transient failures (429, 5xx, connection
    errors, timeouts) are retried with exponential backoff; anything else
    is raised to the caller.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str | None = None,
        *,
        max_retries: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not credentials.consumer_key or not credentials.consumer_secret:
            raise ValueError("SchoologyAPI consumer key and secret are required (check your credentials file)")

        self.credentials = credentials
        self.api_root = (base_url or API_BASE).rstrip("/") + "/"
        self.max_retries = DEFAULT_MAX_RETRIES if max_retries is None else max_retries

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def with_credentials(self, credentials: Credentials) -> "SchoologyAPI":
        """Same endpoint/session, different signer (used while authorizing)."""
        return SchoologyAPI(credentials, self.api_root, max_retries=self.max_retries, session=self.session)

    # Endpoints are relative to the API root ("users/42"); absolute URLs pass through
    def url(self, endpoint: str) -> str:
        ep = (endpoint or "").strip()
        if ep.startswith("http://") or ep.startswith("https://"):
            return ep
        return urljoin(self.api_root, ep.lstrip("/"))

    def _headers(self, signed: bool) -> Dict[str, str]:
        if not signed:
            return {}
        return {
            "Authorization": oauth_header(self.credentials),
            "Accept": "application/json",
        }

    def _backoff(self, delay: float) -> float:
        return delay + random.uniform(0, 0.25 * delay)

    # Basic retry/backoff for 429/5xx + timeouts
    def _request(self, method: str, url: str, *, signed: bool = True, **kwargs) -> requests.Response:
        max_attempts = self.max_retries + 1
        delay = 1.0
        for attempt in range(1, max_attempts + 1):
            log.debug('Fetching "%s"', url)
            try:
                resp = self.session.request(
                    method, url, headers=self._headers(signed), timeout=DEFAULT_TIMEOUT, **kwargs
                )

                if resp.status_code == 429 and attempt < max_attempts:
                    retry_after = float(resp.headers.get("Retry-After", delay))
                    wait_time = self._backoff(retry_after)
                    log.warning(
                        "Rate limited: 429 received. Retrying after %.2fs (attempt %s/%s)",
                        wait_time, attempt, max_attempts,
                        extra={"url": url, "retry_after": retry_after},
                    )
                    time.sleep(wait_time)
                    delay *= 2
                    continue

                resp.raise_for_status()
                return resp

            except requests.HTTPError as e:
                status = getattr(e.response, "status_code", None)
                if status and status >= 500 and attempt < max_attempts:
                    wait_time = self._backoff(delay)
                    log.warning(
                        "Server error %s. Retrying after %.2fs (attempt %s/%s)",
                        status, wait_time, attempt, max_attempts,
                        extra={"url": url},
                    )
                    time.sleep(wait_time)
                    delay *= 2
                    continue
                raise

            except (requests.ConnectionError, requests.Timeout):
                if attempt < max_attempts:
                    wait_time = self._backoff(delay)
                    log.warning(
                        "Connection/timeout error. Retrying after %.2fs (attempt %s/%s)",
                        wait_time, attempt, max_attempts,
                        extra={"url": url},
                    )
                    time.sleep(wait_time)
                    delay *= 2
                    continue
                raise

        # unreachable: the last attempt either returns or raises
        raise RuntimeError(f"retry loop exhausted for {url}")

    def get(self, endpoint: str) -> Any:
        """GET a path under the API root and return the parsed JSON body."""
        return self._request("GET", self.url(endpoint)).json()

    def get_raw(self, url: str) -> Any:
        """
        GET an absolute URL handed out by the API (links.self, links.next,
        folder item locations) and return parsed JSON. The URL is used as-is.
        """
        return self._request("GET", url).json()

    def get_bytes(self, url: str, *, signed: bool = True) -> bytes:
        """
        Download a binary body. Attachments need the OAuth header; profile
        pictures live on a CDN and are fetched unsigned.
        """
        return self._request("GET", self.url(url), signed=signed).content

    def get_text(self, endpoint: str) -> str:
        """GET a path and return the body as text (OAuth token endpoints are form-encoded)."""
        return self._request("GET", self.url(endpoint)).text


__all__ = [
    "SchoologyAPI",
    "DEFAULT_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "USER_AGENT",
    "API_BASE",
]
