"""Unit tests for SearchCriteria."""

import pytest

from src.domain.fiscal.configuration import FiscalConfiguration
from src.domain.fiscal.records import FiscalRegion, TaxType
from src.domain.fiscal.repository import SearchCriteria


@pytest.mark.unit
class TestSearchCriteria:
    """Matching a configuration against optional filters."""

    def test_empty(self) -> None:
        assert SearchCriteria().is_empty()
        assert not SearchCriteria(ddp_available=False).is_empty()

    def test_empty_criteria_match_anything(
        self, configuration: FiscalConfiguration
    ) -> None:
        assert SearchCriteria().matches(configuration)

    def test_country_and_tax_type_must_hold_for_one_region(
        self, configuration: FiscalConfiguration
    ) -> None:
        configuration.add_region(FiscalRegion("Chile", "Santiago", "VAT", True, 19.0))

        assert SearchCriteria(country="Chile", tax_type=TaxType.VAT).matches(
            configuration
        )
        assert not SearchCriteria(country="Peru", tax_type=TaxType.VAT).matches(
            configuration
        )

    def test_false_flag_is_a_filter(self, configuration: FiscalConfiguration) -> None:
        assert configuration.duty_at_checkout is True

        assert not SearchCriteria(duty_at_checkout=False).matches(configuration)
        assert SearchCriteria(duty_at_checkout=True).matches(configuration)
