from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Row

from services.ewallet.app.settings import SETTINGS


def envelope(data: dict[str, Any], *, success: bool = True) -> dict[str, Any]:
    return {"version": SETTINGS.api_version, "success": success, "data": data}


def error(code: str, description: str, messages: dict[str, list[str]] | None = None) -> dict[str, Any]:
    return envelope(
        {"object": "error", "code": code, "description": description, "messages": messages},
        success=False,
    )


def user(row: Row) -> dict[str, Any]:
    return {
        "object": "user",
        "id": str(row.id),
        "username": row.username,
        "provider_user_id": row.provider_user_id,
        "email": row.email,
        "metadata": row.metadata,
    }


def minted_token(row: Row) -> dict[str, Any]:
    return {
        "object": "minted_token",
        "id": str(row.id),
        "symbol": row.symbol,
        "name": row.name,
        "subunit_to_unit": row.subunit_to_unit,
    }


def transfer(row: Row, token: Row) -> dict[str, Any]:
    return {
        "object": "transaction",
        "id": str(row.id),
        "idempotency_token": row.idempotency_token,
        "from": row.from_address,
        "to": row.to_address,
        "amount": int(row.amount),
        "minted_token": minted_token(token),
        "status": row.status,
        "metadata": row.metadata,
    }
