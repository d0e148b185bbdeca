# tests/test_oauth.py
from pathlib import Path

import pytest

from logging_setup import setup_logging
from models import Credentials
from utils.api import SchoologyAPI
from utils.errors import AuthorizationError
from utils.oauth import authorize, load_credentials, oauth_header, resolve_credentials
from tests.conftest import BASE


def test_oauth_header_with_user():
    creds = Credentials("ck", "cs", "ut", "us")
    header = oauth_header(creds, nonce="n0nce", timestamp=1700000000)
    assert header == (
        'OAuth realm="Schoology API",oauth_consumer_key="ck",oauth_token="ut",'
        'oauth_nonce="n0nce",oauth_timestamp="1700000000",oauth_signature_method="PLAINTEXT",'
        'oauth_version="1.0",oauth_signature="cs%26us"'
    )


def test_oauth_header_without_user_leaves_token_empty():
    header = oauth_header(Credentials("ck", "cs"), nonce="x", timestamp=1)
    assert 'oauth_token=""' in header
    assert 'oauth_signature="cs%26"' in header


def _write(tmp_path: Path, *lines: str) -> Path:
    p = tmp_path / "creds.txt"
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def test_load_credentials_full(tmp_path):
    cf = load_credentials(_write(tmp_path, "app.schoology.com", "ck", "cs", "ut", "us"))
    assert cf.domain == "app.schoology.com"
    assert cf.credentials == Credentials("ck", "cs", "ut", "us")
    assert cf.credentials.has_user


def test_load_credentials_without_user(tmp_path):
    cf = load_credentials(_write(tmp_path, "app.schoology.com", "ck", "cs"))
    assert not cf.credentials.has_user
    assert cf.credentials.user_token is None


def test_load_credentials_half_user_part_is_ignored(tmp_path):
    cf = load_credentials(_write(tmp_path, "app.schoology.com", "ck", "cs", "ut"))
    assert cf.credentials.user_token is None
    assert cf.credentials.user_secret is None


def test_load_credentials_missing_secret(tmp_path):
    with pytest.raises(AuthorizationError, match="app secret"):
        load_credentials(_write(tmp_path, "app.schoology.com", "ck"))


def test_authorize_three_legged(requests_mock):
    requests_mock.get(f"{BASE}/oauth/request_token", text="oauth_token=rt&oauth_token_secret=rs")
    requests_mock.get(f"{BASE}/oauth/access_token", text="oauth_token=at&oauth_token_secret=as")
    prompts = []

    api = SchoologyAPI(Credentials("ck", "cs"), BASE, max_retries=0)
    creds = authorize(api, "app.schoology.com", wait=prompts.append)

    assert creds == Credentials("ck", "cs", "at", "as")
    assert prompts == [""]
    first, second = requests_mock.request_history
    assert 'oauth_token=""' in first.headers["Authorization"]
    assert 'oauth_token="rt"' in second.headers["Authorization"]
    assert 'oauth_signature="cs%26rs"' in second.headers["Authorization"]


def test_authorize_rejects_bad_answer(requests_mock):
    requests_mock.get(f"{BASE}/oauth/request_token", text="oauth_token=rt")
    api = SchoologyAPI(Credentials("ck", "cs"), BASE, max_retries=0)

    with pytest.raises(AuthorizationError, match="request secret"):
        authorize(api, "app.schoology.com", wait=lambda _: None)


def test_resolve_credentials_skips_flow_when_user_present(tmp_path, requests_mock):
    path = _write(tmp_path, "app.schoology.com", "ck", "cs", "ut", "us")

    creds = resolve_credentials(lambda c: SchoologyAPI(c, BASE), path)

    assert creds.user_token == "ut"
    assert requests_mock.call_count == 0


def test_authorize_prompt_shown_when_quiet(requests_mock, capsys):
    requests_mock.get(f"{BASE}/oauth/request_token", text="oauth_token=rt&oauth_token_secret=rs")
    requests_mock.get(f"{BASE}/oauth/access_token", text="oauth_token=at&oauth_token_secret=as")
    setup_logging(verbosity=0)
    try:
        api = SchoologyAPI(Credentials("ck", "cs"), BASE, max_retries=0)
        authorize(api, "app.schoology.com", wait=lambda _: None)
    finally:
        with capsys.disabled():
            setup_logging(verbosity=1)

    err = capsys.readouterr().err
    assert "https://app.schoology.com/oauth/authorize?oauth_callback=example.com&oauth_token=rt" in err
    assert "press ENTER" in err
