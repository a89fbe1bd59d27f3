"""Unit tests for the configuration module."""

from typing import Any

import pytest
import pytest_check
from pydantic import ValidationError

from src.core.config import FiscalConfig, LogConfig, Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test cases for Settings class."""

    def test_default_application_settings(self) -> None:
        settings = Settings()

        with pytest_check.check:
            assert settings.app_name == "StoreConfig"
        with pytest_check.check:
            assert settings.app_version == "0.1.0"
        with pytest_check.check:
            assert settings.environment == "development"
        with pytest_check.check:
            assert settings.debug is True

    def test_default_log_config(self, mock_cloud_env: dict[str, Any]) -> None:
        mock_cloud_env["clear_all"]()

        settings = Settings()

        with pytest_check.check:
            assert isinstance(settings.log_config, LogConfig)
        with pytest_check.check:
            assert settings.log_config.log_level == "INFO"
        with pytest_check.check:
            assert settings.log_config.log_formatter_type == "console"
        with pytest_check.check:
            assert "password" in settings.log_config.sensitive_fields

    def test_default_fiscal_config(self) -> None:
        settings = Settings()

        assert settings.fiscal_config == FiscalConfig(
            tax_decimal_places=2, default_fiscal_service="Manual"
        )

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "Override")
        monkeypatch.setenv("ENVIRONMENT", "staging")
        monkeypatch.setenv("DEBUG", "false")
        monkeypatch.setenv("LOG_CONFIG__LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("FISCAL_CONFIG__TAX_DECIMAL_PLACES", "4")
        monkeypatch.setenv("FISCAL_CONFIG__DEFAULT_FISCAL_SERVICE", "Basic Tax")

        settings = Settings()

        with pytest_check.check:
            assert settings.app_name == "Override"
        with pytest_check.check:
            assert settings.environment == "staging"
        with pytest_check.check:
            assert settings.debug is False
        with pytest_check.check:
            assert settings.log_config.log_level == "DEBUG"
        with pytest_check.check:
            assert settings.fiscal_config.tax_decimal_places == 4
        with pytest_check.check:
            assert settings.fiscal_config.default_fiscal_service == "Basic Tax"

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("ENVIRONMENT", "qa"),
            ("LOG_CONFIG__LOG_LEVEL", "TRACE"),
            ("FISCAL_CONFIG__TAX_DECIMAL_PLACES", "7"),
            ("FISCAL_CONFIG__DEFAULT_FISCAL_SERVICE", "Avalara"),
        ],
    )
    def test_invalid_values(
        self, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings()


@pytest.mark.unit
class TestFormatterDetection:
    """The log formatter follows the runtime environment when unset."""

    @pytest.mark.parametrize("platform", ["set_gcp", "set_aws"])
    def test_managed_platform_uses_json(
        self, mock_cloud_env: dict[str, Any], platform: str
    ) -> None:
        mock_cloud_env[platform]()

        assert Settings().log_config.log_formatter_type == "json"

    @pytest.mark.parametrize(
        ("environment", "expected"),
        [("development", "console"), ("staging", "json"), ("production", "json")],
    )
    def test_by_environment(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_cloud_env: dict[str, Any],
        environment: str,
        expected: str,
    ) -> None:
        mock_cloud_env["clear_all"]()
        monkeypatch.setenv("ENVIRONMENT", environment)

        assert Settings().log_config.log_formatter_type == expected

    def test_explicit_formatter_wins(
        self, monkeypatch: pytest.MonkeyPatch, mock_cloud_env: dict[str, Any]
    ) -> None:
        mock_cloud_env["set_gcp"]()
        monkeypatch.setenv("LOG_CONFIG__LOG_FORMATTER_TYPE", "console")

        assert Settings().log_config.log_formatter_type == "console"


@pytest.mark.unit
class TestGetSettings:
    """Test cases for the cached accessor."""

    def test_returns_cached_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("APP_NAME", "Reloaded")
        get_settings.cache_clear()

        second = get_settings()

        assert first is not second
        assert second.app_name == "Reloaded"
