"""Shared fixtures for integration tests."""

from collections.abc import Generator

import pytest
from loguru import logger

from src.core.config import get_settings
from src.core.context import OperationContext
from src.core.logging import _state


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Give each test a fresh settings instance built from pytest-env."""
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None]:
    """Keep integration tests from adding stdout handlers.

    Logging stays marked as configured so the composition root does not
    call ``setup_logging`` and leak output between tests.
    """
    logger.remove()
    _state.configured = True

    yield

    _state.configured = True
    logger.remove()


@pytest.fixture(autouse=True)
def clean_operation_context() -> Generator[None]:
    OperationContext.clear()
    yield
    OperationContext.clear()
