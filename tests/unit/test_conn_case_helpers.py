from __future__ import annotations

import base64
import json
from enum import Enum

import httpx
import pytest


def test_stringify_keys_converts_nested_mapping_keys() -> None:
    from services.ewallet.testing.conn_case import stringify_keys

    class Kind(Enum):
        MINT = "mint"

    out = stringify_keys({1: {"a": {Kind.MINT: [1, 2]}}, "b": "x"})
    assert out == {"1": {"a": {"mint": [1, 2]}}, "b": "x"}


def test_stringify_keys_uses_atom_names_for_booleans_and_none() -> None:
    from services.ewallet.testing.conn_case import convert_key, stringify_keys

    assert stringify_keys({True: 1, False: {None: 2}}) == {"true": 1, "false": {"nil": 2}}
    assert convert_key(0) == "0"


def test_stringify_keys_leaves_non_mappings_alone() -> None:
    from services.ewallet.testing.conn_case import stringify_keys

    assert stringify_keys([{"a": 1}]) == [{"a": 1}]
    assert stringify_keys("value") == "value"
    assert stringify_keys(None) is None


def test_put_auth_header_encodes_key_pair() -> None:
    from services.ewallet.testing.conn_case import put_auth_header

    headers = put_auth_header({}, "OMGServer", "access", "secret")
    expected = base64.b64encode(b"access:secret").decode("ascii")
    assert headers == {"authorization": f"OMGServer {expected}"}


def test_put_auth_header_accepts_encoded_content() -> None:
    from services.ewallet.testing.conn_case import put_auth_header

    assert put_auth_header({}, "OMGClient", "abc123") == {"authorization": "OMGClient abc123"}


def test_build_headers_per_actor_type() -> None:
    from services.ewallet.testing.conn_case import HEADER_ACCEPT, build_headers

    assert build_headers() == {"accept": HEADER_ACCEPT}

    provider = build_headers(("OMGServer", "k", "s"))
    assert set(provider) == {"accept", "authorization"}
    assert provider["authorization"].startswith("OMGServer ")

    client = build_headers(("OMGClient", "k", "t"), idempotency_token="123")
    assert set(client) == {"idempotency-token", "accept", "authorization"}
    assert client["idempotency-token"] == "123"


class _Recorder:
    def __init__(self, status: int = 200):
        self.requests: list[httpx.Request] = []
        self.status = status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json={"version": "1", "success": True, "data": {}})


def _case(recorder: _Recorder):
    from services.ewallet.testing.conn_case import ConnCase

    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url="http://test")
    return client, ConnCase(client, session=None, ledger_session=None)


def _decoded_auth(request: httpx.Request) -> tuple[str, str]:
    auth_type, content = request.headers["authorization"].split(" ", 1)
    return auth_type, base64.b64decode(content).decode("utf-8")


@pytest.mark.asyncio
async def test_public_request_sends_accept_header_only() -> None:
    from services.ewallet.testing.conn_case import HEADER_ACCEPT

    recorder = _Recorder()
    client, case = _case(recorder)
    async with client:
        body = await case.public_request("status", {"a": 1})

    assert body["success"] is True
    (req,) = recorder.requests
    assert req.method == "POST"
    assert req.url.path == "/api/status"
    assert req.headers["accept"] == HEADER_ACCEPT
    assert "authorization" not in req.headers
    assert "idempotency-token" not in req.headers
    assert json.loads(req.content) == {"a": 1}


@pytest.mark.asyncio
async def test_provider_request_uses_access_and_secret_key() -> None:
    from services.ewallet.testing.conn_case import ACCESS_KEY, SECRET_KEY

    recorder = _Recorder()
    client, case = _case(recorder)
    async with client:
        await case.provider_request("/user.get")

    (req,) = recorder.requests
    assert req.url.path == "/api/user.get"
    assert _decoded_auth(req) == ("OMGServer", f"{ACCESS_KEY}:{SECRET_KEY}")
    assert "idempotency-token" not in req.headers


@pytest.mark.asyncio
async def test_client_request_uses_api_key_and_auth_token() -> None:
    from services.ewallet.testing.conn_case import API_KEY, AUTH_TOKEN

    recorder = _Recorder()
    client, case = _case(recorder)
    async with client:
        await case.client_request("me.get")

    (req,) = recorder.requests
    assert _decoded_auth(req) == ("OMGClient", f"{API_KEY}:{AUTH_TOKEN}")
    assert "idempotency-token" not in req.headers


@pytest.mark.asyncio
async def test_idempotent_requests_carry_the_token() -> None:
    recorder = _Recorder()
    client, case = _case(recorder)
    async with client:
        await case.provider_request_with_idempotency("transfer", "idem-1")
        await case.client_request_with_idempotency("me.transfer", "idem-2")

    provider_req, client_req = recorder.requests
    assert provider_req.headers["idempotency-token"] == "idem-1"
    assert _decoded_auth(provider_req)[0] == "OMGServer"
    assert client_req.headers["idempotency-token"] == "idem-2"
    assert _decoded_auth(client_req)[0] == "OMGClient"


@pytest.mark.asyncio
async def test_request_asserts_expected_status() -> None:
    recorder = _Recorder(status=500)
    client, case = _case(recorder)
    async with client:
        with pytest.raises(AssertionError, match="expected 200, got 500"):
            await case.public_request("status")
        await case.public_request("status", status=500)


@pytest.mark.asyncio
async def test_request_rejects_empty_path() -> None:
    recorder = _Recorder()
    client, case = _case(recorder)
    async with client:
        with pytest.raises(ValueError, match="non-empty"):
            await case.public_request("")
    assert recorder.requests == []
