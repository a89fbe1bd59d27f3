"""Wiring of the use-case layer.

``create_fiscal_configuration_service`` is the composition root: it
configures logging from settings and binds the service to a repository,
the in-memory adapter unless another one is given.
"""

from loguru import logger

from src.application.fiscal_configuration import FiscalConfigurationService
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.domain.fiscal.repository import FiscalConfigurationRepository
from src.infrastructure.memory import InMemoryFiscalConfigurationRepository


def create_fiscal_configuration_service(
    repository: FiscalConfigurationRepository | None = None,
    settings: Settings | None = None,
) -> FiscalConfigurationService:
    """Create a ready-to-use fiscal configuration service.

    Args:
        repository: Storage adapter. Defaults to a new in-memory repository.
        settings: Optional settings instance. If not provided, uses get_settings().

    Returns:
        FiscalConfigurationService: Service bound to the repository.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    if repository is None:
        repository = InMemoryFiscalConfigurationRepository()

    logger.info(
        "Starting {} v{} ({}) with {}",
        settings.app_name,
        settings.app_version,
        settings.environment,
        type(repository).__name__,
    )
    return FiscalConfigurationService(repository, settings)
