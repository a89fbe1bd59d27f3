"""Typed violations raised by the fiscal configuration aggregate.

Every invariant violation derives from ``InvalidConfigurationError`` so
callers can catch the whole family or one specific kind. Missing records
and duplicate configurations reuse the core not-found and conflict errors.
"""

from src.core.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from src.core.types import ErrorContext, NaturalKey


class InvalidConfigurationError(ValidationError):
    """A proposed fiscal configuration state breaks an invariant.

    Args:
        message: Description of the violated rule
        field: Name of the configuration field that triggered it
        key: Natural key or value of the offending record, if any
        context: Additional context information about the error
    """

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        field: str | None = None,
        key: NaturalKey | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        self.field = field
        self.key = key
        details: ErrorContext = dict(context or {})
        if field is not None:
            details["field"] = field
        if key is not None:
            details["key"] = list(key) if isinstance(key, tuple) else key
        super().__init__(message, error_code=self.code, context=details)


class InvalidEnumValueError(InvalidConfigurationError):
    """Fiscal service, tax type or tariff type outside its enumeration."""

    code = ErrorCode.INVALID_ENUM_VALUE


class EmptyRegionListError(InvalidConfigurationError):
    """No fiscal region is configured."""

    code = ErrorCode.EMPTY_REGION_LIST


class DuplicateKeyError(InvalidConfigurationError):
    """Two records of one collection share a natural key or percentage."""

    code = ErrorCode.DUPLICATE_KEY


class OutOfRangeRateError(InvalidConfigurationError):
    """A percentage is outside its bounds or not below the standard rate."""

    code = ErrorCode.OUT_OF_RANGE_RATE


class MalformedCustomsCodeError(InvalidConfigurationError):
    """A harmonized code does not match the HS pattern."""

    code = ErrorCode.MALFORMED_CUSTOMS_CODE


class InconsistentTariffFeeError(InvalidConfigurationError):
    """A tariff fee breaks the amount/condition rule of its type."""

    code = ErrorCode.INCONSISTENT_TARIFF_FEE


class PriceInclusionConflictError(InvalidConfigurationError):
    """Tax-inclusive pricing without regions or alongside reduced rates."""

    code = ErrorCode.PRICE_INCLUSION_CONFLICT


class MissingFieldError(InvalidConfigurationError):
    """A required text field of a record is missing or blank."""

    code = ErrorCode.MISSING_FIELD


class RecordNotFoundError(NotFoundError):
    """An update or removal targets a key absent from its collection."""

    def __init__(self, collection: str, key: NaturalKey) -> None:
        self.collection = collection
        self.key = key
        super().__init__(
            f"No {collection} record found for key {key!r}",
            context={
                "collection": collection,
                "key": list(key) if isinstance(key, tuple) else key,
            },
        )


class ConfigurationNotFoundError(NotFoundError):
    """The store has no fiscal configuration."""

    def __init__(self, store_id: str) -> None:
        self.store_id = store_id
        super().__init__(
            f"No fiscal configuration found for store {store_id!r}",
            context={"store_id": store_id},
        )


class ConfigurationAlreadyExistsError(ConflictError):
    """The store already has a fiscal configuration."""

    def __init__(self, store_id: str) -> None:
        self.store_id = store_id
        super().__init__(
            f"Store {store_id!r} already has a fiscal configuration",
            context={"store_id": store_id},
        )
