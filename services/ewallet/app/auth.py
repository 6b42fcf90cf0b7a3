from __future__ import annotations

import base64
import binascii

from fastapi import Depends, Header
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import credentials
from services.ewallet.app.db import get_session
from services.ewallet.app.errors import ApiError
from services.ewallet.app.logging import logger
from services.ewallet.app.observability import AUTH_FAILURE_TOTAL
from services.ewallet.app.settings import SETTINGS


PROVIDER_AUTH_TYPE = "OMGServer"
CLIENT_AUTH_TYPE = "OMGClient"


def accept_header() -> str:
    return f"application/vnd.omisego.v{SETTINGS.api_version}+json"


def _reject(code: str, description: str) -> ApiError:
    AUTH_FAILURE_TOTAL.labels(code).inc()
    logger.info("request_rejected", code=code)
    return ApiError(code, description)


def parse_auth_header(value: str | None, expected_type: str) -> tuple[str, str]:
    """
    Split a BasicAuth-like header ("<Type> <base64(key:secret)>") into (key, secret).
    """
    if not value:
        raise _reject("client:invalid_auth_scheme", "The provided authentication scheme is not supported.")
    auth_type, _, content = value.strip().partition(" ")
    if auth_type != expected_type or not content:
        raise _reject("client:invalid_auth_scheme", "The provided authentication scheme is not supported.")
    try:
        decoded = base64.b64decode(content.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise _reject("client:invalid_auth_scheme", "The provided authentication scheme is not supported.")
    key, sep, secret = decoded.partition(":")
    if not sep or not key or not secret:
        raise _reject("client:invalid_auth_scheme", "The provided authentication scheme is not supported.")
    return key, secret


async def require_accept(accept: str | None = Header(default=None)) -> None:
    if accept != accept_header():
        raise ApiError("client:invalid_version", f"Invalid API version. Given: '{accept}'.")


async def provider_account(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Row:
    access_key, secret_key = parse_auth_header(authorization, PROVIDER_AUTH_TYPE)
    account = await credentials.authenticate_key(session, access_key, secret_key)
    if account is None:
        raise _reject("client:invalid_access_secret_key", "Invalid access and secret key pair.")
    return account


async def client_user(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Row:
    api_key, auth_token = parse_auth_header(authorization, CLIENT_AUTH_TYPE)
    user = await credentials.authenticate_client(session, api_key, auth_token)
    if user is None:
        raise _reject("user:access_token_not_found", "There is no user corresponding to the provided access token.")
    return user


async def require_idempotency_token(idempotency_token: str | None = Header(default=None)) -> str:
    if not idempotency_token:
        raise ApiError(
            "client:no_idempotency_token_provided",
            "The call you made requires the Idempotency-Token header to prevent duplication.",
        )
    return idempotency_token
