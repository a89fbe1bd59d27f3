"""Use cases for a store's fiscal configuration.

Every public method runs inside an ``operation_scope`` so its log records
carry the operation, store and correlation ID, and every method returns a
``ServiceResponse``: domain errors become 4xx envelopes, anything
unexpected is logged with its traceback and becomes a 500 envelope.
"""

from http import HTTPStatus
from typing import Any

from loguru import logger

from src.application.responses import (
    ServiceResponse,
    error_response,
    success_response,
)
from src.application.schemas import (
    ApplicableRatesView,
    CreateFiscalConfigurationCommand,
    FiscalConfigurationView,
    IntegrityReportView,
    TaxCalculationView,
    UpdateFiscalConfigurationCommand,
)
from src.core.config import Settings, get_settings
from src.core.context import operation_scope
from src.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreConfigError,
    ValidationError,
)
from src.core.types import StoreId
from src.domain.fiscal.configuration import FiscalConfiguration
from src.domain.fiscal.errors import (
    ConfigurationAlreadyExistsError,
    ConfigurationNotFoundError,
)
from src.domain.fiscal.repository import FiscalConfigurationRepository, SearchCriteria

CODE_PREFIX = "FiscalConfiguration"


def _code(outcome: str) -> str:
    return f"{CODE_PREFIX}.{outcome}"


class FiscalConfigurationService:
    """Create, read, change and query store fiscal configurations.

    Args:
        repository: Storage port for configurations
        settings: Application settings; the cached settings when omitted

    Example:
        service = FiscalConfigurationService(InMemoryFiscalConfigurationRepository())
        response = await service.get_by_store("store-1")
    """

    def __init__(
        self,
        repository: FiscalConfigurationRepository,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or get_settings()

    async def create(
        self, command: CreateFiscalConfigurationCommand
    ) -> ServiceResponse:
        """Create the store's configuration (201), or 409 if it has one."""
        with operation_scope("create_fiscal_configuration", command.store_id):
            try:
                if await self.repository.exists_by_store_id(command.store_id):
                    raise ConfigurationAlreadyExistsError(command.store_id)

                configuration = FiscalConfiguration.create(
                    store_id=command.store_id,
                    fiscal_service=(
                        self.settings.fiscal_config.default_fiscal_service
                        if command.fiscal_service is None
                        else command.fiscal_service
                    ),
                    regions=[region.to_record() for region in command.regions],
                    standard_rate=command.standard_rate,
                    reduced_rates=[rate.to_record() for rate in command.reduced_rates],
                    price_includes_tax=command.price_includes_tax,
                    duty_at_checkout=command.duty_at_checkout,
                    tariff_fees=[fee.to_record() for fee in command.tariff_fees],
                    ddp_available=command.ddp_available,
                    customs_codes=[code.to_record() for code in command.customs_codes],
                    shipping_taxed=command.shipping_taxed,
                    digital_goods_vat=command.digital_goods_vat,
                )
                await self.repository.save(configuration)
            except Exception as exc:
                return self._failure(exc, "create_fiscal_configuration")

            logger.info(
                "Created fiscal configuration {} with {} regions",
                configuration.id,
                len(configuration.regions),
            )
            return success_response(
                FiscalConfigurationView.from_aggregate(configuration),
                _code("Created"),
                "Fiscal configuration created",
                HTTPStatus.CREATED,
            )

    async def get_by_store(self, store_id: StoreId) -> ServiceResponse:
        with operation_scope("get_fiscal_configuration", store_id):
            try:
                configuration = await self._load(store_id)
            except Exception as exc:
                return self._failure(exc, "get_fiscal_configuration")

            return success_response(
                FiscalConfigurationView.from_aggregate(configuration),
                _code("Retrieved"),
                "Fiscal configuration retrieved",
            )

    async def update(
        self, store_id: StoreId, command: UpdateFiscalConfigurationCommand
    ) -> ServiceResponse:
        """Replace the fields present in ``command`` in one validated step.

        The stored configuration is left untouched when the result would
        break an invariant.
        """
        with operation_scope("update_fiscal_configuration", store_id):
            try:
                configuration = await self._load(store_id)
                changes = command.changes()
                if changes:
                    configuration.replace_fields(**changes)
                    await self.repository.update(configuration)
                else:
                    logger.debug("Update without changes, nothing to persist")
            except Exception as exc:
                return self._failure(exc, "update_fiscal_configuration")

            if changes:
                logger.info("Updated fiscal configuration fields: {}", sorted(changes))
            return success_response(
                FiscalConfigurationView.from_aggregate(configuration),
                _code("Updated"),
                "Fiscal configuration updated",
            )

    async def delete(self, store_id: StoreId) -> ServiceResponse:
        with operation_scope("delete_fiscal_configuration", store_id):
            try:
                if not await self.repository.delete_by_store_id(store_id):
                    raise ConfigurationNotFoundError(store_id)
            except Exception as exc:
                return self._failure(exc, "delete_fiscal_configuration")

            return success_response(
                None, _code("Deleted"), "Fiscal configuration deleted"
            )

    async def calculate_tax(
        self, store_id: StoreId, amount: float, country: str, state_region: str
    ) -> ServiceResponse:
        """Tax owed on ``amount`` for a sale to (country, state_region).

        The amount is rounded to the configured number of decimal places;
        the aggregate itself never rounds.
        """
        with operation_scope("calculate_tax", store_id):
            try:
                configuration = await self._load(store_id)
                tax = configuration.calculate_tax(amount, country, state_region)
            except Exception as exc:
                return self._failure(exc, "calculate_tax")

            logger.debug(
                "Calculated tax {} on {} for {}/{}", tax, amount, country, state_region
            )
            return success_response(
                TaxCalculationView(
                    store_id=store_id,
                    amount=amount,
                    country=country,
                    state_region=state_region,
                    tax=round(tax, self.settings.fiscal_config.tax_decimal_places),
                ),
                _code("TaxCalculated"),
                "Tax calculated",
            )

    async def validate_integrity(self, store_id: StoreId) -> ServiceResponse:
        """Audit the stored configuration without changing it."""
        with operation_scope("validate_integrity", store_id):
            try:
                configuration = await self._load(store_id)
                valid = configuration.is_valid()
            except Exception as exc:
                return self._failure(exc, "validate_integrity")

            if not valid:
                logger.warning("Stored fiscal configuration breaks its invariants")
            return success_response(
                IntegrityReportView(store_id=store_id, valid=valid),
                _code("IntegrityValid" if valid else "IntegrityInvalid"),
                "Configuration is valid"
                if valid
                else "Configuration has integrity problems",
            )

    async def applicable_rates(
        self, store_id: StoreId, country: str, state_region: str
    ) -> ServiceResponse:
        with operation_scope("applicable_rates", store_id):
            try:
                rates = await self.repository.applicable_rates(
                    store_id, country, state_region
                )
                if rates is None:
                    raise ConfigurationNotFoundError(store_id)
            except Exception as exc:
                return self._failure(exc, "applicable_rates")

            return success_response(
                ApplicableRatesView.from_rates(rates, country, state_region),
                _code("RatesRetrieved"),
                "Applicable rates retrieved",
            )

    async def search(self, criteria: SearchCriteria) -> ServiceResponse:
        with operation_scope("search_fiscal_configurations"):
            try:
                configurations = await self.repository.find_by_criteria(criteria)
            except Exception as exc:
                return self._failure(exc, "search_fiscal_configurations")

            logger.debug("Search matched {} configurations", len(configurations))
            return success_response(
                [FiscalConfigurationView.from_aggregate(c) for c in configurations],
                _code("SearchCompleted"),
                "Search completed",
            )

    async def list_invalid(self) -> ServiceResponse:
        """List stored configurations that no longer satisfy the invariants."""
        with operation_scope("list_invalid_fiscal_configurations"):
            try:
                configurations = await self.repository.find_by_criteria(
                    SearchCriteria()
                )
                invalid = [c for c in configurations if not c.is_valid()]
            except Exception as exc:
                return self._failure(exc, "list_invalid_fiscal_configurations")

            if invalid:
                logger.warning(
                    "{} of {} fiscal configurations break their invariants",
                    len(invalid),
                    len(configurations),
                )
            return success_response(
                [
                    IntegrityReportView(store_id=c.store_id, valid=False)
                    for c in invalid
                ],
                _code("InvalidConfigurationsRetrieved"),
                "Invalid configurations retrieved",
            )

    async def _load(self, store_id: StoreId) -> FiscalConfiguration:
        configuration = await self.repository.find_by_store_id(store_id)
        if configuration is None:
            raise ConfigurationNotFoundError(store_id)
        return configuration

    def _failure(self, exc: Exception, operation: str) -> ServiceResponse:
        if isinstance(exc, StoreConfigError):
            log_context: dict[str, Any] = {
                "error_code": exc.error_code,
                "fingerprint": exc.fingerprint,
            }
            if exc.is_expected:
                logger.warning(
                    "{} rejected: {}", operation, exc.message, **log_context
                )
            else:
                logger.error("{} failed: {}", operation, exc.message, **log_context)
        else:
            logger.opt(exception=exc).error(
                "Unhandled exception in {}: {}", operation, type(exc).__name__
            )
        return error_response(exc, _code(_outcome_for(exc)), self.settings)


def _outcome_for(exc: Exception) -> str:
    if isinstance(exc, NotFoundError):
        return "NotFound"
    if isinstance(exc, ConflictError):
        return "AlreadyExists"
    if isinstance(exc, ValidationError):
        return "Invalid"
    return "InternalError"
