"""Fiscal configuration aggregate of a store.

- **records**: Fiscal regions, reduced rates, tariff fees, customs codes
- **state**: Frozen snapshot of a whole configuration
- **validator**: Ordered invariant checks over a snapshot
- **configuration**: The aggregate root and its mutation API
- **repository**: Persistence port and search criteria
"""

from src.domain.fiscal.configuration import ApplicableRates, FiscalConfiguration
from src.domain.fiscal.errors import (
    ConfigurationAlreadyExistsError,
    ConfigurationNotFoundError,
    DuplicateKeyError,
    EmptyRegionListError,
    InconsistentTariffFeeError,
    InvalidConfigurationError,
    InvalidEnumValueError,
    MalformedCustomsCodeError,
    MissingFieldError,
    OutOfRangeRateError,
    PriceInclusionConflictError,
    RecordNotFoundError,
)
from src.domain.fiscal.records import (
    CustomsCode,
    FiscalRegion,
    FiscalService,
    ReducedRate,
    TariffRate,
    TariffType,
    TaxType,
)
from src.domain.fiscal.repository import FiscalConfigurationRepository, SearchCriteria
from src.domain.fiscal.state import FiscalState

__all__ = [
    "ApplicableRates",
    "ConfigurationAlreadyExistsError",
    "ConfigurationNotFoundError",
    "CustomsCode",
    "DuplicateKeyError",
    "EmptyRegionListError",
    "FiscalConfiguration",
    "FiscalConfigurationRepository",
    "FiscalRegion",
    "FiscalService",
    "FiscalState",
    "InconsistentTariffFeeError",
    "InvalidConfigurationError",
    "InvalidEnumValueError",
    "MalformedCustomsCodeError",
    "MissingFieldError",
    "OutOfRangeRateError",
    "PriceInclusionConflictError",
    "RecordNotFoundError",
    "ReducedRate",
    "SearchCriteria",
    "TariffRate",
    "TariffType",
    "TaxType",
]
