from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EWalletSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    database_url: str
    log_level: str = "info"
    host: str = "0.0.0.0"
    port: int = 8000

    # Version negotiated through the accept header (application/vnd.omisego.v<N>+json).
    api_version: str = "1"


SETTINGS = EWalletSettings()
