"""Unit tests for the response envelopes."""

from http import HTTPStatus

import pytest
import pytest_check

from src.application.responses import (
    ServiceResponse,
    error_response,
    get_service_info,
    status_for_error,
    success_response,
)
from src.core.config import Settings
from src.core.context import OperationContext
from src.core.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    Severity,
    StoreConfigError,
    ValidationError,
)
from src.domain.fiscal.errors import DuplicateKeyError


@pytest.mark.unit
class TestStatusForError:
    """Exception families map to fixed status codes."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (ValidationError("bad"), HTTPStatus.BAD_REQUEST),
            (DuplicateKeyError("dup", "regions"), HTTPStatus.BAD_REQUEST),
            (NotFoundError("missing"), HTTPStatus.NOT_FOUND),
            (ConflictError("exists"), HTTPStatus.CONFLICT),
            (StoreConfigError(ErrorCode.INTERNAL_ERROR, "x"), 500),
            (RuntimeError("boom"), HTTPStatus.INTERNAL_SERVER_ERROR),
        ],
    )
    def test_mapping(self, exc: Exception, expected: int) -> None:
        assert status_for_error(exc) == expected


@pytest.mark.unit
class TestSuccessResponse:
    def test_defaults_to_ok(self) -> None:
        response = success_response({"a": 1}, "Thing.Done", "Done")

        assert response == ServiceResponse(
            success=True,
            status_code=200,
            message="Done",
            code="Thing.Done",
            data={"a": 1},
        )

    def test_explicit_status(self) -> None:
        response = success_response(
            None, "Thing.Created", "Created", HTTPStatus.CREATED
        )

        assert response.status_code == 201
        assert response.error is None


@pytest.mark.unit
class TestErrorResponse:
    """Failed envelopes carry structured error details."""

    def test_domain_error_in_development(self, mock_settings: Settings) -> None:
        OperationContext.set_correlation_id("corr-1")
        exc = DuplicateKeyError("Duplicate region", "regions", ("MX", "CDMX"))

        response = error_response(exc, "FiscalConfiguration.Invalid", mock_settings)

        error = response.error
        assert error is not None
        with pytest_check.check:
            assert response.success is False
        with pytest_check.check:
            assert response.status_code == 400
        with pytest_check.check:
            assert response.message == "Duplicate region"
        with pytest_check.check:
            assert error.error_code == "DUPLICATE_KEY"
        with pytest_check.check:
            assert error.details == {"field": "regions", "key": ["MX", "CDMX"]}
        with pytest_check.check:
            assert error.correlation_id == "corr-1"
        with pytest_check.check:
            assert error.request_id is not None
            assert error.request_id.startswith("req-")
        with pytest_check.check:
            assert error.severity == "LOW"
        with pytest_check.check:
            assert error.debug_info is not None
            assert error.debug_info["exception_type"] == "DuplicateKeyError"

    def test_cause_is_reported_in_development(self, mock_settings: Settings) -> None:
        exc = NotFoundError("missing", cause=KeyError("k"))

        response = error_response(exc, "X.NotFound", mock_settings)

        assert response.error is not None
        assert response.error.debug_info is not None
        assert response.error.debug_info["cause"] == {
            "type": "KeyError",
            "message": "'k'",
        }

    def test_no_debug_info_in_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = Settings()

        response = error_response(NotFoundError("missing"), "X.NotFound", settings)

        assert response.error is not None
        assert response.error.debug_info is None
        assert response.error.service_info is not None
        assert response.error.service_info.environment == "production"

    def test_unexpected_exception_hides_message(self, mock_settings: Settings) -> None:
        response = error_response(
            RuntimeError("secret connection string"), "X.InternalError", mock_settings
        )

        error = response.error
        assert error is not None
        with pytest_check.check:
            assert response.status_code == 500
        with pytest_check.check:
            assert error.error_code == "INTERNAL_ERROR"
        with pytest_check.check:
            assert error.message == "Internal server error: RuntimeError"
        with pytest_check.check:
            assert error.severity == Severity.CRITICAL.value
        with pytest_check.check:
            assert error.details is None

    def test_service_info(self, mock_settings: Settings) -> None:
        info = get_service_info(mock_settings)

        assert info.name == "TestApp"
        assert info.version == "1.0.0"
        assert info.environment == "development"
