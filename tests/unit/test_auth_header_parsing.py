from __future__ import annotations

import base64

import pytest


def _encode(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def test_parse_auth_header_returns_key_and_secret() -> None:
    from services.ewallet.app.auth import parse_auth_header

    assert parse_auth_header(f"OMGServer {_encode('access:secret')}", "OMGServer") == ("access", "secret")


def test_parse_auth_header_keeps_colons_in_secret() -> None:
    from services.ewallet.app.auth import parse_auth_header

    assert parse_auth_header(f"OMGClient {_encode('key:a:b')}", "OMGClient") == ("key", "a:b")


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "OMGClient",
        f"OMGClient {_encode('key:secret')}",
        f"Basic {_encode('key:secret')}",
        "OMGServer not-base64!",
        f"OMGServer {_encode('no-separator')}",
        f"OMGServer {_encode(':secret')}",
    ],
)
def test_parse_auth_header_rejects_invalid_values(value: str | None) -> None:
    from services.ewallet.app.auth import parse_auth_header
    from services.ewallet.app.errors import ApiError

    with pytest.raises(ApiError) as exc:
        parse_auth_header(value, "OMGServer")
    assert exc.value.code == "client:invalid_auth_scheme"


def test_accept_header_matches_api_version() -> None:
    from services.ewallet.app.auth import accept_header
    from services.ewallet.testing.conn_case import HEADER_ACCEPT

    assert accept_header() == HEADER_ACCEPT
