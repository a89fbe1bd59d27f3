"""Operation context management for correlation IDs and tenant tracking."""

import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar

from loguru import logger

from src.core.types import StoreId

# Context variables survive across await points within one task
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_store_id_var: ContextVar[StoreId | None] = ContextVar("store_id", default=None)


class OperationContext:
    """Manages operation context using contextvars for async-safe storage.

    Holds the correlation ID and the store (tenant) the current use case
    is acting on, so log records and error envelopes can carry them
    without threading them through every call.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.
        """
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def set_store_id(store_id: StoreId) -> None:
        """Set the store the current operation belongs to."""
        _store_id_var.set(store_id)

    @staticmethod
    def get_store_id() -> StoreId | None:
        """Get the store the current operation belongs to."""
        return _store_id_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)
        _store_id_var.set(None)


@contextmanager
def operation_scope(
    operation: str,
    store_id: StoreId | None = None,
    correlation_id: str | None = None,
) -> Generator[str]:
    """Run a use case inside a correlated, tenant-scoped context.

    An existing correlation ID is reused so nested operations share it.
    Log records emitted inside the scope carry the operation name, the
    store ID and the correlation ID.

    Args:
        operation: Name of the use case being executed.
        store_id: Store the operation acts on, if any.
        correlation_id: Explicit correlation ID; generated when omitted.

    Yields:
        str: The correlation ID in effect for the scope.
    """
    correlation_id = (
        correlation_id
        or OperationContext.get_correlation_id()
        or generate_correlation_id()
    )
    correlation_token = _correlation_id_var.set(correlation_id)
    store_token = _store_id_var.set(store_id)
    try:
        with logger.contextualize(
            operation=operation,
            store_id=store_id,
            correlation_id=correlation_id,
        ):
            yield correlation_id
    finally:
        _store_id_var.reset(store_token)
        _correlation_id_var.reset(correlation_token)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for operation tracking.

    Returns:
        str: A string representation of a UUID4.

    Examples:
        >>> correlation_id = generate_correlation_id()
        >>> len(correlation_id)
        36
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual use-case invocations.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.

    Examples:
        >>> request_id = generate_request_id()
        >>> request_id.startswith('req-')
        True
    """
    return f"req-{uuid.uuid4()}"
