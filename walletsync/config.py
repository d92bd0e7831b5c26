import os

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_NODE_API_URL = "http://localhost:37221"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy FULLNODE_API_URL variable when no URL was configured."""

        super().model_post_init(__context)

        url = self.node_api_url or os.getenv("FULLNODE_API_URL") or DEFAULT_NODE_API_URL
        object.__setattr__(self, "node_api_url", url.rstrip("/"))

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Node API
    node_api_url: str = Field(
        default="",
        description="Base URL of the full node REST API",
        validation_alias=AliasChoices("node_api_url", "NODE_API_URL"),
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout applied by the HTTP transport",
    )

    # Wallet
    wallet_name: str = Field(default="", description="Default wallet name used by the CLI")
    account_name: str = Field(default="account 0", description="Account queried for balance and history")
    coin_unit: str = Field(default="STRAT", description="Coin ticker shown next to amounts")
    coin_decimals: int = Field(default=8, ge=0, description="Decimal places of one coin in base units")

    # CLI
    watch_interval_seconds: float = Field(
        default=15.0,
        ge=1.0,
        description="Refresh interval for `walletsync watch`",
    )

    @property
    def has_wallet_name(self) -> bool:
        return bool(self.wallet_name)


# Global settings instance
settings = Settings()
