"""Error model shared by every layer of StoreConfig.

Exceptions carry a machine-readable code, a severity used to pick the log
level, free-form context for the envelope ``details`` and the stack at the
point they were built. A short fingerprint groups occurrences raised from
the same place.

- **ErrorCode**: Codes that end up in ``ErrorResponse.error_code``
- **Severity**: LOW/MEDIUM are expected outcomes, CRITICAL is not
- **StoreConfigError**: Root of the hierarchy
- **ValidationError, NotFoundError, ConflictError**:
  Generic families that the use-case layer maps to status codes

Domain packages subclass the generic families with their own codes; only
the application layer turns them into response envelopes.
"""

import hashlib
import traceback
from enum import Enum

from src.core.types import ErrorContext


class ErrorCode(Enum):
    """Error codes exposed to callers of the use cases."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Unexpected failure; the message never leaks internals."""

    # Invariant violations
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Generic invalid input or state."""

    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    """A value is outside its declared enumeration."""

    EMPTY_REGION_LIST = "EMPTY_REGION_LIST"
    """A fiscal configuration has no fiscal regions."""

    DUPLICATE_KEY = "DUPLICATE_KEY"
    """Two records of one collection share the same natural key."""

    OUT_OF_RANGE_RATE = "OUT_OF_RANGE_RATE"
    """A percentage is outside its declared bounds."""

    MALFORMED_CUSTOMS_CODE = "MALFORMED_CUSTOMS_CODE"
    """A harmonized-system code does not match the expected pattern."""

    INCONSISTENT_TARIFF_FEE = "INCONSISTENT_TARIFF_FEE"
    """A tariff fee breaks the amount/condition rule of its type."""

    PRICE_INCLUSION_CONFLICT = "PRICE_INCLUSION_CONFLICT"
    """Tax-inclusive pricing is combined with an incompatible setup."""

    MISSING_FIELD = "MISSING_FIELD"
    """A required text field is missing or blank."""

    # Lookups
    NOT_FOUND = "NOT_FOUND"
    """No configuration or record exists for the given key."""

    ALREADY_EXISTS = "ALREADY_EXISTS"
    """The store already owns the configuration being created."""


class Severity(Enum):
    """How loudly an error should be reported."""

    LOW = "LOW"
    """Caller mistakes such as invalid input or unknown keys."""

    MEDIUM = "MEDIUM"
    """Refused operations that still leave the system consistent."""

    CRITICAL = "CRITICAL"
    """Unexpected failures that need someone to look at them."""


class StoreConfigError(Exception):
    """Root of every exception raised on purpose by StoreConfig.

    Args:
        error_code: ``ErrorCode`` member or a custom code string
        message: Human-readable description
        severity: Reporting level, MEDIUM unless given
        context: Structured details copied into the error envelope
        cause: Exception being wrapped, chained as ``__cause__``
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Drop the frame of this constructor
        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Hash the class, the code and the innermost project frames.

        Returns:
            str: 16 hex characters
        """
        innermost = self.stack_trace[-5:]
        parts = [type(self).__name__, self.error_code]
        parts.extend(
            frame.strip().split("\n")[0]
            for frame in innermost
            if "src/" in frame and "site-packages" not in frame
        )
        return hashlib.sha256(":".join(parts).encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """True for LOW and MEDIUM errors, which are logged as warnings."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        context = f", context={self.context}" if self.context else ""
        return (
            f"{type(self).__name__}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context})"
        )


class ValidationError(StoreConfigError):
    """Invalid input, or a state that breaks an invariant (400)."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class NotFoundError(StoreConfigError):
    """A configuration or record is missing (404)."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class ConflictError(StoreConfigError):
    """The resource being created already exists (409)."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.ALREADY_EXISTS,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)
