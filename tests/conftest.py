"""Shared fixtures for chat proxy tests."""

import pytest

from chat_proxy.app.config import Settings
from chat_proxy.app.session_store import SessionStore


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openrouter_api_key="test-key",
        openrouter_base_url="https://openrouter.test/api/v1",
        openrouter_model="test/model",
        app_url="http://localhost:3000",
        app_title="Beacon Light AI",
        environment="production",
    )


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(max_sessions=100)
