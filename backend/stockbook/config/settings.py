"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_LONG_TERM_HOLDING_DAYS = 365


class StockbookSettings(BaseSettings):
    """Configuration options for the stockbook engine and its callers."""

    app_name: str = Field(default="Stockbook Portfolio Ledger")
    log_level: str = Field(default="INFO")

    long_term_holding_days: int = Field(
        default=DEFAULT_LONG_TERM_HOLDING_DAYS,
        ge=1,
        description="Holding period in days from which a matched lot counts as long term.",
    )
    intraday_lifo: bool = Field(
        default=True,
        description="Match sells against same-day buys, newest first, before older lots.",
    )
    default_scope: Literal["active", "all"] = Field(
        default="active",
        description="Account scope used when a request does not name one.",
    )

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="stockbook")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"telemetry_otlp_endpoint"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> StockbookSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return StockbookSettings(**overrides)
    return StockbookSettings()


__all__ = [
    "DEFAULT_LONG_TERM_HOLDING_DAYS",
    "StockbookSettings",
    "get_settings",
]
