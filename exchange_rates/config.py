"""Settings for the exchange rates client."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.exchangeratesapi.io"


class ExchangeRatesSettings(BaseSettings):
    """Configuration read from ``EXCHANGE_RATES_*`` environment variables."""

    api_url: str = Field(default=DEFAULT_API_URL, description="Base URL of the rates API")
    access_key: str | None = Field(default=None, description="API access key, sent as access_key")
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="HTTP timeout; httpx defaults apply when unset",
    )
    log_level: str = Field(default="INFO")

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="exchange-rates")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="EXCHANGE_RATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"access_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> ExchangeRatesSettings:
    """Return cached settings with optional overrides."""

    if overrides:
        return ExchangeRatesSettings(**overrides)
    return ExchangeRatesSettings()


__all__ = ["DEFAULT_API_URL", "ExchangeRatesSettings", "get_settings"]
