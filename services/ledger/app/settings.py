from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    ledger_database_url: str


SETTINGS = LedgerSettings()
