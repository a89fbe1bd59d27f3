"""Invariant checks for a proposed fiscal configuration state.

``find_violation`` inspects a whole ``FiscalState`` and returns the first
rule it breaks as a ``Violation``, or ``None`` when the state is valid.
It never raises and never mutates, so it backs both the throwing
``validate_state`` used by mutators and the boolean ``is_valid`` audit.

Rules are checked in a fixed order and the first failure wins:

1. fiscal service is a declared ``FiscalService``
2. at least one region
3. no two regions share (country, state_region)
4. each region: country and state_region present, declared tax type,
   rate in [0, 100]
5. standard rate in [0, 100]
6. each reduced rate: description present, percentage in [0, 100) and
   strictly below the standard rate
7. reduced rates unique by percentage, then by description
8. tariff fees: declared type, amount >= 0, FIXED amount > 0, COMPUTED
   condition present
9. customs codes: origin present, well-formed HS code, description
   present, unique HS code
10. tax-inclusive pricing needs regions and no reduced rates
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from src.core.exceptions import ErrorCode
from src.core.types import NaturalKey
from src.domain.fiscal.constants import HARMONIZED_CODE_PATTERN, MAX_RATE, MIN_RATE
from src.domain.fiscal.errors import (
    DuplicateKeyError,
    EmptyRegionListError,
    InconsistentTariffFeeError,
    InvalidConfigurationError,
    InvalidEnumValueError,
    MalformedCustomsCodeError,
    MissingFieldError,
    OutOfRangeRateError,
    PriceInclusionConflictError,
)
from src.domain.fiscal.records import FiscalService, TariffType, TaxType
from src.domain.fiscal.state import FiscalState

_ERRORS_BY_CODE: dict[ErrorCode, type[InvalidConfigurationError]] = {
    error.code: error
    for error in (
        InvalidEnumValueError,
        EmptyRegionListError,
        DuplicateKeyError,
        OutOfRangeRateError,
        MalformedCustomsCodeError,
        InconsistentTariffFeeError,
        PriceInclusionConflictError,
        MissingFieldError,
    )
}


@dataclass(frozen=True, slots=True)
class Violation:
    """The first broken invariant found in a state."""

    kind: ErrorCode
    message: str
    field: str
    key: NaturalKey | None = None

    def to_error(self) -> InvalidConfigurationError:
        """Build the typed exception matching this violation's kind."""
        error_class = _ERRORS_BY_CODE.get(self.kind, InvalidConfigurationError)
        return error_class(self.message, field=self.field, key=self.key)


def _is_member(enum_class: type[Enum], value: object) -> bool:
    return any(value == member.value for member in enum_class)


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
        return False
    if isinstance(value, Decimal):
        return not value.is_nan()
    return not (isinstance(value, float) and math.isnan(value))


def _in_rate_range(value: object) -> bool:
    return _is_number(value) and MIN_RATE <= value <= MAX_RATE  # type: ignore[operator]


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_well_formed_harmonized_code(code: object) -> bool:
    """Check a Harmonized System code such as ``8471.30`` or ``847130``."""
    return isinstance(code, str) and HARMONIZED_CODE_PATTERN.fullmatch(code) is not None


def _check_fiscal_service(state: FiscalState) -> Iterator[Violation]:
    if not _is_member(FiscalService, state.fiscal_service):
        yield Violation(
            ErrorCode.INVALID_ENUM_VALUE,
            f"Invalid fiscal service: {state.fiscal_service!r}",
            "fiscal_service",
            str(state.fiscal_service),
        )


def _check_region_list(state: FiscalState) -> Iterator[Violation]:
    if not state.regions:
        yield Violation(
            ErrorCode.EMPTY_REGION_LIST,
            "At least one fiscal region must be configured",
            "regions",
        )


def _check_region_uniqueness(state: FiscalState) -> Iterator[Violation]:
    seen: list[tuple[str, str]] = []
    for region in state.regions:
        if region.key in seen:
            yield Violation(
                ErrorCode.DUPLICATE_KEY,
                f"Duplicate fiscal region: {region.country}, {region.state_region}",
                "regions",
                region.key,
            )
        seen.append(region.key)


def _check_regions(state: FiscalState) -> Iterator[Violation]:
    for region in state.regions:
        if _is_blank(region.country):
            yield Violation(
                ErrorCode.MISSING_FIELD,
                "Fiscal region country is required",
                "regions",
                region.key,
            )
        if _is_blank(region.state_region):
            yield Violation(
                ErrorCode.MISSING_FIELD,
                "Fiscal region state/region is required",
                "regions",
                region.key,
            )
        if not _is_member(TaxType, region.tax_type):
            yield Violation(
                ErrorCode.INVALID_ENUM_VALUE,
                f"Invalid tax type: {region.tax_type!r}",
                "regions",
                region.key,
            )
        if not _in_rate_range(region.standard_rate):
            yield Violation(
                ErrorCode.OUT_OF_RANGE_RATE,
                f"Region standard rate must be between {MIN_RATE:g} and "
                f"{MAX_RATE:g}, got {region.standard_rate!r}",
                "regions",
                region.key,
            )


def _check_standard_rate(state: FiscalState) -> Iterator[Violation]:
    if not _in_rate_range(state.standard_rate):
        yield Violation(
            ErrorCode.OUT_OF_RANGE_RATE,
            f"Standard rate must be between {MIN_RATE:g} and {MAX_RATE:g}, "
            f"got {state.standard_rate!r}",
            "standard_rate",
            str(state.standard_rate),
        )


def _check_reduced_rates(state: FiscalState) -> Iterator[Violation]:
    for rate in state.reduced_rates:
        if _is_blank(rate.description):
            yield Violation(
                ErrorCode.MISSING_FIELD,
                "Reduced rate description is required",
                "reduced_rates",
                rate.key,
            )
        if not _is_number(rate.percentage) or not (
            MIN_RATE <= rate.percentage < MAX_RATE
        ):
            yield Violation(
                ErrorCode.OUT_OF_RANGE_RATE,
                f"Reduced rate percentage must be at least {MIN_RATE:g} and below "
                f"{MAX_RATE:g}, got {rate.percentage!r}",
                "reduced_rates",
                rate.key,
            )
        # standard_rate is already known to be a number here
        elif rate.percentage >= state.standard_rate:
            yield Violation(
                ErrorCode.OUT_OF_RANGE_RATE,
                f"Reduced rate {rate.percentage!r} must be below the standard "
                f"rate {state.standard_rate!r}",
                "reduced_rates",
                rate.key,
            )


def _check_reduced_rate_uniqueness(state: FiscalState) -> Iterator[Violation]:
    percentages: list[float] = []
    descriptions: list[str] = []
    for rate in state.reduced_rates:
        if rate.percentage in percentages:
            yield Violation(
                ErrorCode.DUPLICATE_KEY,
                f"Duplicate reduced rate percentage: {rate.percentage!r}",
                "reduced_rates",
                rate.key,
            )
        if rate.description in descriptions:
            yield Violation(
                ErrorCode.DUPLICATE_KEY,
                f"Duplicate reduced rate description: {rate.description!r}",
                "reduced_rates",
                rate.key,
            )
        percentages.append(rate.percentage)
        descriptions.append(rate.description)


def _check_tariff_fees(state: FiscalState) -> Iterator[Violation]:
    for index, fee in enumerate(state.tariff_fees):
        if not _is_member(TariffType, fee.type):
            yield Violation(
                ErrorCode.INVALID_ENUM_VALUE,
                f"Invalid tariff type: {fee.type!r}",
                "tariff_fees",
                index,
            )
        elif not _is_number(fee.amount) or fee.amount < 0:
            yield Violation(
                ErrorCode.INCONSISTENT_TARIFF_FEE,
                f"Tariff fee amount cannot be negative, got {fee.amount!r}",
                "tariff_fees",
                index,
            )
        elif fee.type == TariffType.FIXED and fee.amount <= 0:
            yield Violation(
                ErrorCode.INCONSISTENT_TARIFF_FEE,
                "A fixed tariff fee needs an amount greater than zero",
                "tariff_fees",
                index,
            )
        elif fee.type == TariffType.COMPUTED and _is_blank(fee.condition):
            yield Violation(
                ErrorCode.INCONSISTENT_TARIFF_FEE,
                "A computed tariff fee needs a condition",
                "tariff_fees",
                index,
            )


def _check_customs_codes(state: FiscalState) -> Iterator[Violation]:
    seen: list[str] = []
    for code in state.customs_codes:
        if _is_blank(code.origin_country):
            yield Violation(
                ErrorCode.MISSING_FIELD,
                "Customs code origin country is required",
                "customs_codes",
                code.key,
            )
        if not is_well_formed_harmonized_code(code.harmonized_code):
            yield Violation(
                ErrorCode.MALFORMED_CUSTOMS_CODE,
                f"Invalid harmonized code format: {code.harmonized_code!r}",
                "customs_codes",
                code.key,
            )
        if _is_blank(code.description):
            yield Violation(
                ErrorCode.MISSING_FIELD,
                "Customs code description is required",
                "customs_codes",
                code.key,
            )
        if code.harmonized_code in seen:
            yield Violation(
                ErrorCode.DUPLICATE_KEY,
                f"Duplicate harmonized code: {code.harmonized_code!r}",
                "customs_codes",
                code.key,
            )
        seen.append(code.harmonized_code)


def _check_price_inclusion(state: FiscalState) -> Iterator[Violation]:
    if not state.price_includes_tax:
        return
    if not state.regions:
        yield Violation(
            ErrorCode.PRICE_INCLUSION_CONFLICT,
            "Tax cannot be included in prices without fiscal regions",
            "price_includes_tax",
        )
    if state.reduced_rates:
        yield Violation(
            ErrorCode.PRICE_INCLUSION_CONFLICT,
            "Tax cannot be included in prices while reduced rates are configured",
            "price_includes_tax",
        )


_CHECKS: tuple[Callable[[FiscalState], Iterator[Violation]], ...] = (
    _check_fiscal_service,
    _check_region_list,
    _check_region_uniqueness,
    _check_regions,
    _check_standard_rate,
    _check_reduced_rates,
    _check_reduced_rate_uniqueness,
    _check_tariff_fees,
    _check_customs_codes,
    _check_price_inclusion,
)


def find_violation(state: FiscalState) -> Violation | None:
    """Return the first invariant ``state`` breaks, or ``None`` if valid."""
    for check in _CHECKS:
        violation = next(check(state), None)
        if violation is not None:
            return violation
    return None


def validate_state(state: FiscalState) -> None:
    """Raise the typed error for the first invariant ``state`` breaks.

    Raises:
        InvalidConfigurationError: The subclass matching the violation kind.
    """
    violation = find_violation(state)
    if violation is not None:
        raise violation.to_error()
