# utils/oauth.py
"""
OAuth1 (PLAINTEXT) support for the Schoology API.

- `oauth_header` builds the per-request Authorization value.
- `load_credentials` reads the credentials file given on the command line.
- `authorize` runs the three-legged flow when the file has no user token yet.
"""
from __future__ import annotations

import sys
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Tuple
from urllib.parse import parse_qsl

from logging_setup import get_logger
from models import Credentials
from utils.errors import AuthorizationError

if TYPE_CHECKING:
    from utils.api import SchoologyAPI

log = get_logger(artifact="oauth")

REALM = "Schoology API"


def oauth_header(creds: Credentials, *, nonce: str | None = None, timestamp: int | None = None) -> str:
    """Authorization header value; empty token/secret when no user is bound yet."""
    nonce = nonce or uuid.uuid4().hex
    timestamp = int(time.time()) if timestamp is None else timestamp
    return (
        f'OAuth realm="{REALM}",'
        f'oauth_consumer_key="{creds.consumer_key}",'
        f'oauth_token="{creds.user_token or ""}",'
        f'oauth_nonce="{nonce}",'
        f'oauth_timestamp="{timestamp}",'
        'oauth_signature_method="PLAINTEXT",'
        'oauth_version="1.0",'
        f'oauth_signature="{creds.consumer_secret}%26{creds.user_secret or ""}"'
    )


@dataclass(frozen=True, slots=True)
class CredentialsFile:
    domain: str
    credentials: Credentials


def load_credentials(path: Path) -> CredentialsFile:
    """
    Credentials file, one value per line:
      1. Schoology domain (e.g. app.schoology.com)
      2. consumer key
      3. consumer secret
      4. user token   (optional)
      5. user secret  (optional)
    """
    lines = [ln.strip() for ln in Path(path).read_text(encoding="utf-8").splitlines()]
    names = ("schoology domain", "app token", "app secret")
    for i, name in enumerate(names):
        if i >= len(lines) or not lines[i]:
            raise AuthorizationError(f"no {name} in credentials file {path}")

    domain, key, secret = lines[0], lines[1], lines[2]
    user_token = lines[3] if len(lines) > 3 and lines[3] else None
    user_secret = lines[4] if len(lines) > 4 and lines[4] else None
    if not (user_token and user_secret):
        user_token = user_secret = None
    return CredentialsFile(domain, Credentials(key, secret, user_token, user_secret))


def _parse_token_pair(body: str, what: str) -> Tuple[str, str]:
    # body looks like "oauth_token=abc&oauth_token_secret=def"; order matters, names don't
    values = [v for _, v in parse_qsl(body.strip(), keep_blank_values=True)]
    if len(values) < 1 or not values[0]:
        raise AuthorizationError(f"failed to get {what} token from answer")
    if len(values) < 2 or not values[1]:
        raise AuthorizationError(f"failed to get {what} secret from answer")
    return values[0], values[1]


def authorize(
    api: SchoologyAPI,
    domain: str,
    *,
    wait: Callable[[str], object] = input,
) -> Credentials:
    """
    Three-legged authorization for a first run.
    `api` is a SchoologyAPI bound to consumer-only credentials; returns
    credentials carrying the access token and secret.
    """
    app = api.credentials
    request_token, request_secret = _parse_token_pair(
        api.get_text("oauth/request_token"), "request"
    )

    url = f"https://{domain}/oauth/authorize?oauth_callback=example.com&oauth_token={request_token}"
    # interactive: goes to the terminal whatever the log level
    print(url, file=sys.stderr)
    print("open the above url and press ENTER once authorized", file=sys.stderr)
    log.debug("waiting for authorization", extra={"url": url})
    wait("")

    access_api = api.with_credentials(app.with_user(request_token, request_secret))
    token, secret = _parse_token_pair(access_api.get_text("oauth/access_token"), "client")
    log.debug("obtained access token %s", token)
    return app.with_user(token, secret)


def resolve_credentials(api_factory: Callable[[Credentials], SchoologyAPI], path: Path,
                        wait: Optional[Callable[[str], object]] = None) -> Credentials:
    """Read the credentials file, authorizing interactively when it has no user part."""
    cf = load_credentials(path)
    if cf.credentials.has_user:
        return cf.credentials
    return authorize(api_factory(cf.credentials), cf.domain, wait=wait or input)
