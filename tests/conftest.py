import asyncio
import inspect
import os
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from exchange_rates.config import get_settings  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**pyfuncitem.funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture()
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from EXCHANGE_RATES_* variables and the settings cache."""

    for name in list(os.environ):
        if name.startswith("EXCHANGE_RATES_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(ROOT / "tests")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
