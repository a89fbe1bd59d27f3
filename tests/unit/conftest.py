"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator
from typing import Any

import pytest

from src.core.config import Settings, get_settings
from src.core.context import OperationContext


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object with test values.

    Returns:
        Settings: Settings built from test environment variables.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")

    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Backup and restore environment variables to prevent test interference.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    original_env = os.environ.copy()

    # Cloud variables are left alone; detection tests set them explicitly
    env_prefixes = [
        "APP_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "FISCAL_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_cloud_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Mock managed-platform environment detection (GCP/AWS).

    Returns:
        dict[str, Any]: Helpers that set or clear the platform variables.
    """

    def set_gcp() -> None:
        monkeypatch.setenv("K_SERVICE", "test-service")

    def set_aws() -> None:
        monkeypatch.setenv("AWS_EXECUTION_ENV", "AWS_Lambda_python3.13")

    def clear_all() -> None:
        for key in ["K_SERVICE", "AWS_EXECUTION_ENV"]:
            monkeypatch.delenv(key, raising=False)

    return {"set_gcp": set_gcp, "set_aws": set_aws, "clear_all": clear_all}


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Clear the operation context before and after each test."""
    OperationContext.clear()
    yield
    OperationContext.clear()
