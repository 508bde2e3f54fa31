"""Environment-driven configuration for the stock ledger service.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment first and then from ``.env``/``.env.local`` so local
development needs no extra setup.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StockGuard(str, Enum):
    """How sale decrements protect against concurrent oversell."""

    NONE = "none"
    CONDITIONAL = "conditional"


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Stock Ledger"
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")

    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    HOST: str = "0.0.0.0"
    PORT: int = 8089

    # Empty key leaves the API open; every write is then attributed to ``anonymous``.
    API_KEY: str = Field(default="", validation_alias=AliasChoices("API_KEY", "API_TOKEN"))

    LOG_LEVEL: str = "INFO"

    ID_PAD_WIDTH: int = 4
    PURCHASE_ID_PREFIX: str = "PUR"
    SALE_ID_PREFIX: str = "SALE"

    DASHBOARD_WINDOW: int = 5
    STOCK_GUARD: StockGuard = StockGuard.NONE

    @field_validator("ID_PAD_WIDTH", "DASHBOARD_WINDOW")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DATA_DIR}/ledger.db"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if not settings.DB_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
