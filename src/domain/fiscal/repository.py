"""Persistence port for fiscal configurations.

The domain only depends on this protocol. Adapters (the in-memory one in
``src.infrastructure.memory`` or a database-backed one) implement it and
are handed to the use-case layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from src.core.types import StoreId
from src.domain.fiscal.configuration import ApplicableRates, FiscalConfiguration
from src.domain.fiscal.records import FiscalService, TaxType


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Optional filters for ``find_by_criteria``; set filters are AND-ed.

    ``country`` and ``tax_type`` match when any region of the configuration
    matches them (both must hold for the same region when both are set).
    """

    fiscal_service: FiscalService | str | None = None
    country: str | None = None
    tax_type: TaxType | str | None = None
    duty_at_checkout: bool | None = None
    ddp_available: bool | None = None
    digital_goods_vat: bool | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.fiscal_service,
                self.country,
                self.tax_type,
                self.duty_at_checkout,
                self.ddp_available,
                self.digital_goods_vat,
            )
        )

    def matches(self, configuration: FiscalConfiguration) -> bool:
        """Check whether ``configuration`` satisfies every set filter."""
        if (
            self.fiscal_service is not None
            and configuration.fiscal_service != self.fiscal_service
        ):
            return False
        flags = (
            (self.duty_at_checkout, configuration.duty_at_checkout),
            (self.ddp_available, configuration.ddp_available),
            (self.digital_goods_vat, configuration.digital_goods_vat),
        )
        if any(wanted is not None and actual != wanted for wanted, actual in flags):
            return False
        if self.country is None and self.tax_type is None:
            return True
        return any(
            (self.country is None or region.country == self.country)
            and (self.tax_type is None or region.tax_type == self.tax_type)
            for region in configuration.regions
        )


class FiscalConfigurationRepository(Protocol):
    """Storage for fiscal configurations, one per store."""

    async def find_by_store_id(self, store_id: StoreId) -> FiscalConfiguration | None:
        """Load the store's configuration, or ``None`` if it has none."""
        ...

    async def save(self, configuration: FiscalConfiguration) -> FiscalConfiguration:
        """Persist a new configuration.

        Raises:
            ConfigurationAlreadyExistsError: If the store already has one.
        """
        ...

    async def update(self, configuration: FiscalConfiguration) -> FiscalConfiguration:
        """Overwrite the stored configuration of the same store.

        Raises:
            ConfigurationNotFoundError: If the store has none.
        """
        ...

    async def delete_by_store_id(self, store_id: StoreId) -> bool:
        """Remove the store's configuration; ``False`` if there was none."""
        ...

    async def exists_by_store_id(self, store_id: StoreId) -> bool: ...

    async def find_by_criteria(
        self, criteria: SearchCriteria
    ) -> list[FiscalConfiguration]: ...

    async def applicable_rates(
        self, store_id: StoreId, country: str, state_region: str
    ) -> ApplicableRates | None:
        """Rates for a destination, or ``None`` if the store has no config."""
        ...
