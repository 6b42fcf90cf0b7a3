from __future__ import annotations

import sqlalchemy as sa
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import observability, serializers, transaction_gate, users
from services.ewallet.app.auth import client_user, provider_account, require_accept, require_idempotency_token
from services.ewallet.app.db import ENGINE, get_session
from services.ewallet.app.errors import ApiError, ChangesetError, GateError
from services.ewallet.app.logging import configure_logging, logger
from services.ewallet.app.schemas import MeTransferRequest, TransferRequest, UserGetRequest
from services.ewallet.app.settings import SETTINGS
from services.ledger.app.db import ENGINE as LEDGER_ENGINE, get_ledger_session


app = FastAPI(title="eWallet API", version="0.1.0")
configure_logging(SETTINGS.log_level, service="ewallet_api")
observability.setup_tracing(app, service_name="ewallet_api")
observability.add_metrics_middleware(app, service_name="ewallet_api")
observability.instrument_sqlalchemy(ENGINE, LEDGER_ENGINE)


def _error_response(code: str, description: str, messages: dict | None = None) -> JSONResponse:
    observability.API_ERROR_TOTAL.labels(code).inc()
    logger.info("api_error", code=code)
    return JSONResponse(serializers.error(code, description, messages))


# Errors are rendered as envelopes with `success: false`; the HTTP status stays 200.
@app.exception_handler(ApiError)
async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
    return _error_response(exc.code, exc.description, exc.messages)


@app.exception_handler(ChangesetError)
async def _changeset_error(request: Request, exc: ChangesetError) -> JSONResponse:
    return _error_response("client:invalid_parameter", "Invalid parameter provided.", exc.errors)


@app.exception_handler(GateError)
async def _gate_error(request: Request, exc: GateError) -> JSONResponse:
    return _error_response(exc.code, exc.description)


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"] if p != "body") or "body"
        messages.setdefault(field, []).append(err["msg"])
    return _error_response("client:invalid_parameter", "Invalid parameter provided.", messages)


@app.get("/healthz")
async def healthz(session: AsyncSession = Depends(get_session)) -> dict:
    await session.execute(sa.text("SELECT 1"))
    return {"ok": True}


api = APIRouter(prefix="/api", dependencies=[Depends(require_accept)])


@api.post("/status")
async def status() -> dict:
    return serializers.envelope({"object": "status", "success": True})


@api.post("/me.get")
async def me_get(user: Row = Depends(client_user)) -> dict:
    return serializers.envelope(serializers.user(user))


@api.post("/user.get")
async def user_get(
    req: UserGetRequest,
    account: Row = Depends(provider_account),
    session: AsyncSession = Depends(get_session),
) -> dict:
    user = await users.get_by_provider_user_id(session, req.provider_user_id)
    if user is None:
        raise ApiError("user:provider_user_id_not_found", "There is no user corresponding to the provided provider_user_id.")
    return serializers.envelope(serializers.user(user))


@api.post("/transfer")
async def transfer(
    req: TransferRequest,
    account: Row = Depends(provider_account),
    idempotency_token: str = Depends(require_idempotency_token),
    session: AsyncSession = Depends(get_session),
    ledger_session: AsyncSession = Depends(get_ledger_session),
) -> dict:
    params = {**req.model_dump(), "idempotency_token": idempotency_token}
    txn, _balances, token = await transaction_gate.process_with_addresses(session, ledger_session, params)
    logger.info("transfer_requested", actor="provider", account_id=str(account.id), transfer_id=str(txn.id))
    return serializers.envelope(serializers.transfer(txn, token))


@api.post("/me.transfer")
async def me_transfer(
    req: MeTransferRequest,
    user: Row = Depends(client_user),
    idempotency_token: str = Depends(require_idempotency_token),
    session: AsyncSession = Depends(get_session),
    ledger_session: AsyncSession = Depends(get_ledger_session),
) -> dict:
    balance = await users.get_primary_balance(session, user)
    if balance is None:
        raise ApiError("user:balance_not_found", "The user has no primary balance.")
    params = {**req.model_dump(), "from_address": balance.address, "idempotency_token": idempotency_token}
    txn, _balances, token = await transaction_gate.process_with_addresses(session, ledger_session, params)
    logger.info("transfer_requested", actor="client", user_id=str(user.id), transfer_id=str(txn.id))
    return serializers.envelope(serializers.transfer(txn, token))


app.include_router(api)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "services.ewallet.app.main:app",
        host=SETTINGS.host,
        port=SETTINGS.port,
        log_level=SETTINGS.log_level.lower(),
    )


if __name__ == "__main__":
    run()
