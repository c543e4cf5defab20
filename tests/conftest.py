"""Pytest configuration and shared fixtures"""

import os

import pytest

from echo_sdk.config import Settings, get_settings
from tests.helpers import TEST_ECHO_URL, TEST_ROUTER_URL

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears ECHO_* environment variables.

    This ensures Settings tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    echo_vars = {
        key: value for key, value in os.environ.items() if key.startswith("ECHO_")
    }

    for key in echo_vars:
        os.environ.pop(key, None)
    get_settings.cache_clear()

    try:
        yield
    finally:
        get_settings.cache_clear()
        for key in [k for k in os.environ if k.startswith("ECHO_")]:
            os.environ.pop(key)
        for key, value in echo_vars.items():
            os.environ[key] = value


@pytest.fixture
def clean_settings(clean_env):
    """Settings instance with clean environment."""
    return Settings()


@pytest.fixture
def test_settings():
    """Settings pointing at test hosts."""
    return Settings(
        base_echo_url=TEST_ECHO_URL,
        base_router_url=TEST_ROUTER_URL,
        api_key="echo_test_api_key_12345",
        log_level="DEBUG",
    )
