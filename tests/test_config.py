from __future__ import annotations

import pytest

from exchange_rates.client import get_client
from exchange_rates.config import DEFAULT_API_URL, ExchangeRatesSettings, get_settings


def test_defaults(clean_settings):
    settings = get_settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.access_key is None
    assert settings.http_timeout_seconds is None
    assert settings.telemetry_enabled is False


def test_reads_prefixed_environment(clean_settings, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXCHANGE_RATES_API_URL", "https://rates.internal/")
    monkeypatch.setenv("EXCHANGE_RATES_ACCESS_KEY", "abc123")
    monkeypatch.setenv("EXCHANGE_RATES_HTTP_TIMEOUT_SECONDS", "2.5")
    settings = get_settings()
    assert settings.api_url == "https://rates.internal/"
    assert settings.access_key == "abc123"
    assert settings.http_timeout_seconds == 2.5


def test_settings_are_cached(clean_settings):
    assert get_settings() is get_settings()


def test_access_key_is_masked_for_logging(clean_settings):
    settings = ExchangeRatesSettings(access_key="abc123")
    assert settings.dict_for_logging()["access_key"] == "***"
    assert ExchangeRatesSettings().dict_for_logging()["access_key"] is None


def test_get_client_uses_settings(clean_settings):
    settings = ExchangeRatesSettings(api_url="https://rates.internal/", access_key="k", http_timeout_seconds=3)
    client = get_client(settings)
    assert client.api_url == "https://rates.internal"
    assert client.access_key == "k"
    assert client.timeout_seconds == 3
