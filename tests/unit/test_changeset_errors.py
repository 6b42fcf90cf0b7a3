from __future__ import annotations

import pytest


def test_validate_reports_field_errors() -> None:
    from services.ewallet.app import repo
    from services.ewallet.app.errors import ChangesetError
    from services.ewallet.app.schemas import UserParams

    with pytest.raises(ChangesetError) as exc:
        repo.validate(UserParams, {"email": "not-an-email", "password": "short"})

    assert set(exc.value.errors) == {"email", "password"}


def test_validate_reports_model_errors_under_params() -> None:
    from services.ewallet.app import repo
    from services.ewallet.app.errors import ChangesetError
    from services.ewallet.app.schemas import UserParams

    with pytest.raises(ChangesetError) as exc:
        repo.validate(UserParams, {"username": "johndoe"})

    assert list(exc.value.errors) == ["params"]
    assert "provider_user_id" in exc.value.errors["params"][0]


def test_validate_accepts_provider_and_admin_users() -> None:
    from services.ewallet.app import repo
    from services.ewallet.app.schemas import UserParams

    provider = repo.validate(UserParams, {"username": "johndoe", "provider_user_id": "p1"})
    admin = repo.validate(UserParams, {"email": "admin@example.com", "password": "long-enough"})

    assert provider.email is None
    assert admin.metadata == {}


def test_validate_rejects_unknown_fields() -> None:
    from services.ewallet.app import repo
    from services.ewallet.app.errors import ChangesetError
    from services.ewallet.app.schemas import MintParams

    with pytest.raises(ChangesetError) as exc:
        repo.validate(
            MintParams,
            {"idempotency_token": "x", "token_id": "00000000-0000-0000-0000-000000000000", "amount": 1, "bogus": 1},
        )
    assert "bogus" in exc.value.errors


def test_gate_error_message() -> None:
    from services.ewallet.app.errors import GateError

    err = GateError("transaction:same_address", "same")
    assert str(err) == "transaction:same_address: same"
    assert err.code == "transaction:same_address"
