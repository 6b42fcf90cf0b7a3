from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class AccountParams(StrictModel):
    name: Annotated[str, Field(min_length=1)]
    description: str | None = None
    parent_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class UserParams(StrictModel):
    username: str | None = None
    provider_user_id: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=8)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _identity(self):
        # Provider users are identified by username + provider_user_id, admin users by email + password.
        provider = self.username is not None and self.provider_user_id is not None
        admin = self.email is not None and self.password is not None
        if not (provider or admin):
            raise ValueError("either username and provider_user_id, or email and password, must be provided")
        return self


class RoleParams(StrictModel):
    name: Annotated[str, Field(min_length=1)]
    display_name: str | None = None


class KeyParams(StrictModel):
    account_id: UUID
    access_key: Annotated[str, Field(min_length=1)]
    secret_key: Annotated[str, Field(min_length=1)]


class ApiKeyParams(StrictModel):
    key: Annotated[str, Field(min_length=1)]
    owner_app: Annotated[str, Field(min_length=1)]
    account_id: UUID | None = None
    expired: bool = False


class AuthTokenParams(StrictModel):
    token: Annotated[str, Field(min_length=1)]
    owner_app: Annotated[str, Field(min_length=1)]
    user_id: UUID
    expired: bool = False


class MintedTokenParams(StrictModel):
    symbol: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    subunit_to_unit: Annotated[int, Field(gt=0)]
    account_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class MintParams(StrictModel):
    idempotency_token: Annotated[str, Field(min_length=1)]
    token_id: UUID
    amount: Annotated[int, Field(gt=0)]
    description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class TransferParams(StrictModel):
    idempotency_token: Annotated[str, Field(min_length=1)]
    from_address: Annotated[str, Field(min_length=1)]
    to_address: Annotated[str, Field(min_length=1)]
    token_id: UUID
    amount: Annotated[int, Field(gt=0)]
    metadata: dict[str, Any] = Field(default_factory=dict)


# Request bodies.


class UserGetRequest(StrictModel):
    provider_user_id: Annotated[str, Field(min_length=1)]


class TransferRequest(StrictModel):
    from_address: Annotated[str, Field(min_length=1)]
    to_address: Annotated[str, Field(min_length=1)]
    token_id: UUID
    amount: Annotated[int, Field(gt=0)]
    metadata: dict[str, Any] = Field(default_factory=dict)


class MeTransferRequest(StrictModel):
    to_address: Annotated[str, Field(min_length=1)]
    token_id: UUID
    amount: Annotated[int, Field(gt=0)]
    metadata: dict[str, Any] = Field(default_factory=dict)
