"""Fixtures for fiscal configuration domain tests."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from src.domain.fiscal.configuration import FiscalConfiguration
from src.domain.fiscal.records import (
    CustomsCode,
    FiscalRegion,
    FiscalService,
    ReducedRate,
    TariffRate,
    TariffType,
    TaxType,
)
from src.domain.fiscal.state import FiscalState


@pytest.fixture
def lima_region() -> FiscalRegion:
    """Region collecting an 18% IVA."""
    return FiscalRegion(
        country="Peru",
        state_region="Lima",
        tax_type=TaxType.IVA,
        collects_tax=True,
        standard_rate=18.0,
    )


@pytest.fixture
def cusco_region() -> FiscalRegion:
    """Region where the store does not collect tax."""
    return FiscalRegion(
        country="Peru",
        state_region="Cusco",
        tax_type=TaxType.IVA,
        collects_tax=False,
        standard_rate=18.0,
    )


@pytest.fixture
def food_rate() -> ReducedRate:
    return ReducedRate(description="Food", percentage=8.0, categories=("groceries",))


@pytest.fixture
def fixed_fee() -> TariffRate:
    return TariffRate(type=TariffType.FIXED, amount=25.0, destination_countries=("US",))


@pytest.fixture
def laptop_code() -> CustomsCode:
    return CustomsCode(
        origin_country="CN",
        harmonized_code="8471.30",
        description="Portable computers",
    )


@pytest.fixture
def configuration(
    lima_region: FiscalRegion,
    cusco_region: FiscalRegion,
    food_rate: ReducedRate,
    fixed_fee: TariffRate,
    laptop_code: CustomsCode,
) -> FiscalConfiguration:
    """A valid configuration with one record in every collection."""
    return FiscalConfiguration.create(
        store_id="store-1",
        fiscal_service=FiscalService.MANUAL,
        regions=[lima_region, cusco_region],
        standard_rate=18.0,
        reduced_rates=[food_rate],
        duty_at_checkout=True,
        tariff_fees=[fixed_fee],
        customs_codes=[laptop_code],
    )


@pytest.fixture
def make_state(lima_region: FiscalRegion) -> Callable[..., FiscalState]:
    """Build a valid ``FiscalState``; keyword arguments override fields."""

    def _make(**overrides: Any) -> FiscalState:
        now = datetime(2025, 1, 1, tzinfo=UTC)
        fields: dict[str, Any] = {
            "id": "config-1",
            "store_id": "store-1",
            "fiscal_service": FiscalService.MANUAL,
            "standard_rate": 18.0,
            "created_at": now,
            "updated_at": now,
            "regions": (lima_region,),
        }
        fields.update(overrides)
        return FiscalState(**fields)

    return _make
