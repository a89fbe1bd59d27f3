"""Unit tests for the exceptions module.

This module tests the structured exception hierarchy including:
- ErrorCode and Severity enums
- Base StoreConfigError exception with rich context and fingerprinting
- Specialized exception classes
- Exception chaining and stack trace capture
"""

import pytest
import pytest_check

from src.core.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    Severity,
    StoreConfigError,
    ValidationError,
)


@pytest.mark.unit
class TestErrorCode:
    """Test the ErrorCode enum functionality."""

    @pytest.mark.parametrize(
        ("enum_value", "expected_string"),
        [
            (ErrorCode.INTERNAL_ERROR, "INTERNAL_ERROR"),
            (ErrorCode.VALIDATION_ERROR, "VALIDATION_ERROR"),
            (ErrorCode.DUPLICATE_KEY, "DUPLICATE_KEY"),
            (ErrorCode.MALFORMED_CUSTOMS_CODE, "MALFORMED_CUSTOMS_CODE"),
            (ErrorCode.NOT_FOUND, "NOT_FOUND"),
            (ErrorCode.ALREADY_EXISTS, "ALREADY_EXISTS"),
        ],
    )
    def test_error_code_enum_values(
        self,
        enum_value: ErrorCode,
        expected_string: str,
    ) -> None:
        """Verify ErrorCode enum values are correctly defined."""
        assert enum_value.value == expected_string

    def test_invalid_member(self) -> None:
        with pytest.raises(ValueError, match="'UNAUTHORIZED' is not a valid"):
            ErrorCode("UNAUTHORIZED")


@pytest.mark.unit
class TestStoreConfigError:
    """Test the base exception."""

    def test_basic_attributes(self) -> None:
        error = StoreConfigError(ErrorCode.INTERNAL_ERROR, "Something broke")

        with pytest_check.check:
            assert error.error_code == "INTERNAL_ERROR"
        with pytest_check.check:
            assert error.message == "Something broke"
        with pytest_check.check:
            assert error.severity == Severity.MEDIUM
        with pytest_check.check:
            assert error.context == {}
        with pytest_check.check:
            assert error.cause is None

    def test_string_error_code(self) -> None:
        error = StoreConfigError("CUSTOM_CODE", "Custom")

        assert error.error_code == "CUSTOM_CODE"

    def test_str_and_repr(self) -> None:
        error = StoreConfigError(
            ErrorCode.INTERNAL_ERROR, "Boom", context={"store_id": "s1"}
        )

        assert str(error) == "[INTERNAL_ERROR] Boom"
        assert repr(error) == (
            "StoreConfigError(error_code='INTERNAL_ERROR', message='Boom', "
            "severity=MEDIUM, context={'store_id': 's1'})"
        )

    def test_cause_is_chained(self) -> None:
        cause = KeyError("missing")
        error = StoreConfigError(ErrorCode.INTERNAL_ERROR, "Wrapped", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_stack_trace_is_captured(self) -> None:
        error = StoreConfigError(ErrorCode.INTERNAL_ERROR, "Trace")

        assert error.stack_trace
        frames = error.stack_trace
        assert any("test_stack_trace_is_captured" in frame for frame in frames)

    def test_fingerprint_is_stable_for_same_site(self) -> None:
        errors = [
            StoreConfigError(ErrorCode.INTERNAL_ERROR, f"#{i}") for i in range(2)
        ]

        assert errors[0].fingerprint == errors[1].fingerprint
        assert len(errors[0].fingerprint) == 16

    def test_fingerprint_differs_by_code(self) -> None:
        first = StoreConfigError(ErrorCode.INTERNAL_ERROR, "a")
        second = StoreConfigError(ErrorCode.NOT_FOUND, "a")

        assert first.fingerprint != second.fingerprint

    @pytest.mark.parametrize(
        ("severity", "expected"),
        [
            (Severity.LOW, True),
            (Severity.MEDIUM, True),
            (Severity.CRITICAL, False),
        ],
    )
    def test_is_expected(self, severity: Severity, expected: bool) -> None:
        error = StoreConfigError(ErrorCode.INTERNAL_ERROR, "x", severity=severity)

        assert error.is_expected is expected

    def test_severity_levels(self) -> None:
        assert [level.value for level in Severity] == ["LOW", "MEDIUM", "CRITICAL"]


@pytest.mark.unit
class TestSpecializedExceptions:
    """Test the generic subclasses."""

    @pytest.mark.parametrize(
        ("error_class", "code", "severity"),
        [
            (ValidationError, "VALIDATION_ERROR", Severity.LOW),
            (NotFoundError, "NOT_FOUND", Severity.LOW),
            (ConflictError, "ALREADY_EXISTS", Severity.LOW),
        ],
    )
    def test_defaults(
        self, error_class: type[StoreConfigError], code: str, severity: Severity
    ) -> None:
        error = error_class("message")  # type: ignore[call-arg]

        with pytest_check.check:
            assert isinstance(error, StoreConfigError)
        with pytest_check.check:
            assert error.error_code == code
        with pytest_check.check:
            assert error.severity == severity

    def test_validation_error_with_custom_code(self) -> None:
        error = ValidationError(
            "Bad rate", ErrorCode.OUT_OF_RANGE_RATE, context={"field": "rate"}
        )

        assert error.error_code == "OUT_OF_RANGE_RATE"
        assert error.context == {"field": "rate"}
