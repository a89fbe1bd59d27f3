"""In-memory adapter for ``FiscalConfigurationRepository``."""

from loguru import logger

from src.core.types import StoreId
from src.domain.fiscal.configuration import ApplicableRates, FiscalConfiguration
from src.domain.fiscal.errors import (
    ConfigurationAlreadyExistsError,
    ConfigurationNotFoundError,
)
from src.domain.fiscal.repository import SearchCriteria
from src.domain.fiscal.state import FiscalState
from src.infrastructure.memory.repository import InMemoryRepository


class InMemoryFiscalConfigurationRepository(InMemoryRepository[FiscalState]):
    """Keeps one ``FiscalState`` snapshot per store id.

    Aggregates are rebuilt with ``FiscalConfiguration.reconstruct`` on every
    read, so each caller works on its own instance. Writes are last writer
    wins.
    """

    def __init__(self) -> None:
        super().__init__("FiscalConfiguration")

    async def find_by_store_id(self, store_id: StoreId) -> FiscalConfiguration | None:
        state = await self.get(store_id)
        return FiscalConfiguration.reconstruct(state) if state is not None else None

    async def save(self, configuration: FiscalConfiguration) -> FiscalConfiguration:
        if not await self.add(configuration.store_id, configuration.snapshot()):
            raise ConfigurationAlreadyExistsError(configuration.store_id)
        return configuration

    async def update(self, configuration: FiscalConfiguration) -> FiscalConfiguration:
        if not await self.replace(configuration.store_id, configuration.snapshot()):
            raise ConfigurationNotFoundError(configuration.store_id)
        return configuration

    async def delete_by_store_id(self, store_id: StoreId) -> bool:
        return await self.delete(store_id)

    async def exists_by_store_id(self, store_id: StoreId) -> bool:
        return await self.exists(store_id)

    async def find_by_criteria(
        self, criteria: SearchCriteria
    ) -> list[FiscalConfiguration]:
        logger.debug("Searching fiscal configurations with criteria: {}", criteria)

        configurations = [
            FiscalConfiguration.reconstruct(state)
            for state in await self.filter_by(lambda _: True)
        ]
        if criteria.is_empty():
            return configurations
        return [config for config in configurations if criteria.matches(config)]

    async def applicable_rates(
        self, store_id: StoreId, country: str, state_region: str
    ) -> ApplicableRates | None:
        configuration = await self.find_by_store_id(store_id)
        if configuration is None:
            return None
        return configuration.applicable_rates(country, state_region)
