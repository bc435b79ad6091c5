"""Core configuration for dispatchscan."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (``DISPATCHSCAN_*``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DISPATCHSCAN_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # ── Blockchain / JSON-RPC ────────────────────────────────────────────
    default_chain: str = "ethereum"
    rpc_url: str = ""  # overrides the chain registry when set
    rpc_timeout_seconds: float = 30.0
    block_tag: str = "latest"
    alchemy_api_key: str = ""
    infura_api_key: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
