"""Fiscal configuration aggregate: a store's tax and tariff setup.

The aggregate keeps its whole state in one frozen ``FiscalState``. Every
mutator builds a candidate state, runs the full validator against it and
commits only when the candidate is valid, so a failed call leaves the
aggregate exactly as it was. Accessors hand out copies; the only way to
change a configuration is through the named operations below.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from src.core.types import NaturalKey, StoreId
from src.domain.fiscal.constants import PERCENT_DIVISOR
from src.domain.fiscal.errors import (
    DuplicateKeyError,
    InvalidConfigurationError,
    RecordNotFoundError,
)
from src.domain.fiscal.records import (
    CustomsCode,
    FiscalRegion,
    FiscalService,
    ReducedRate,
    TariffRate,
)
from src.domain.fiscal.state import MUTABLE_FIELDS, FiscalState
from src.domain.fiscal.validator import find_violation, validate_state


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class ApplicableRates:
    """Rates that apply to sales shipped to one fiscal region."""

    standard_rate: float
    reduced_rates: tuple[ReducedRate, ...]


class FiscalConfiguration:
    """Aggregate root for one store's fiscal configuration.

    Use ``create`` for new configurations and ``reconstruct`` to rebuild
    one from storage. Instances are not safe to share between concurrent
    writers; each use case loads its own copy.
    """

    __slots__ = ("_state",)

    def __init__(self, state: FiscalState) -> None:
        self._state = state

    @classmethod
    def create(
        cls,
        store_id: StoreId,
        fiscal_service: FiscalService | str,
        regions: Iterable[FiscalRegion],
        standard_rate: float,
        reduced_rates: Iterable[ReducedRate] = (),
        price_includes_tax: bool = False,
        duty_at_checkout: bool = False,
        tariff_fees: Iterable[TariffRate] = (),
        ddp_available: bool = False,
        customs_codes: Iterable[CustomsCode] = (),
        shipping_taxed: bool = False,
        digital_goods_vat: bool = False,
    ) -> FiscalConfiguration:
        """Build a new, validated configuration for ``store_id``.

        Raises:
            InvalidConfigurationError: If any invariant is violated.
        """
        now = _utcnow()
        state = FiscalState(
            id=str(uuid.uuid4()),
            store_id=store_id,
            fiscal_service=fiscal_service,
            standard_rate=standard_rate,
            created_at=now,
            updated_at=now,
            regions=tuple(regions),
            reduced_rates=tuple(reduced_rates),
            price_includes_tax=price_includes_tax,
            duty_at_checkout=duty_at_checkout,
            tariff_fees=tuple(tariff_fees),
            ddp_available=ddp_available,
            customs_codes=tuple(customs_codes),
            shipping_taxed=shipping_taxed,
            digital_goods_vat=digital_goods_vat,
        )
        validate_state(state)
        return cls(state)

    @classmethod
    def reconstruct(cls, state: FiscalState) -> FiscalConfiguration:
        """Rebuild a persisted configuration without re-validating it.

        Stored data is trusted; call ``is_valid`` to audit it.
        """
        return cls(state)

    # Accessors

    @property
    def id(self) -> str:
        return self._state.id

    @property
    def store_id(self) -> StoreId:
        return self._state.store_id

    @property
    def fiscal_service(self) -> FiscalService | str:
        return self._state.fiscal_service

    @property
    def standard_rate(self) -> float:
        return self._state.standard_rate

    @property
    def regions(self) -> list[FiscalRegion]:
        return list(self._state.regions)

    @property
    def reduced_rates(self) -> list[ReducedRate]:
        return list(self._state.reduced_rates)

    @property
    def tariff_fees(self) -> list[TariffRate]:
        return list(self._state.tariff_fees)

    @property
    def customs_codes(self) -> list[CustomsCode]:
        return list(self._state.customs_codes)

    @property
    def price_includes_tax(self) -> bool:
        return self._state.price_includes_tax

    @property
    def duty_at_checkout(self) -> bool:
        return self._state.duty_at_checkout

    @property
    def ddp_available(self) -> bool:
        return self._state.ddp_available

    @property
    def shipping_taxed(self) -> bool:
        return self._state.shipping_taxed

    @property
    def digital_goods_vat(self) -> bool:
        return self._state.digital_goods_vat

    @property
    def created_at(self) -> datetime:
        return self._state.created_at

    @property
    def updated_at(self) -> datetime:
        return self._state.updated_at

    def snapshot(self) -> FiscalState:
        """Return the current state; it is frozen and safe to keep."""
        return self._state

    # Commit protocol

    def _commit(self, **changes: Any) -> None:
        candidate = replace(self._state, **changes)
        validate_state(candidate)
        self._state = replace(candidate, updated_at=_utcnow())

    def replace_fields(self, **changes: Any) -> None:
        """Replace any subset of the mutable fields in one validated step.

        Collections given here replace the existing ones wholesale. The
        candidate is validated once, so intermediate combinations (for
        example swapping every region) are never checked on their own.

        Raises:
            InvalidConfigurationError: If the resulting state is invalid or
                a field name is unknown or immutable.
        """
        unknown = sorted(set(changes) - MUTABLE_FIELDS)
        if unknown:
            msg = f"Fields cannot be replaced: {', '.join(unknown)}"
            raise InvalidConfigurationError(msg, field=unknown[0])
        for name in ("regions", "reduced_rates", "tariff_fees", "customs_codes"):
            if name in changes:
                changes[name] = tuple(changes[name])
        self._commit(**changes)

    # Scalar mutators

    def change_fiscal_service(self, fiscal_service: FiscalService | str) -> None:
        self._commit(fiscal_service=fiscal_service)

    def change_standard_rate(self, standard_rate: float) -> None:
        """Change the default tax percentage.

        Existing reduced rates are re-checked against the new value.
        """
        self._commit(standard_rate=standard_rate)

    def change_price_includes_tax(self, price_includes_tax: bool) -> None:
        self._commit(price_includes_tax=price_includes_tax)

    def change_duty_at_checkout(self, duty_at_checkout: bool) -> None:
        self._commit(duty_at_checkout=duty_at_checkout)

    def change_ddp_available(self, ddp_available: bool) -> None:
        self._commit(ddp_available=ddp_available)

    def change_shipping_taxed(self, shipping_taxed: bool) -> None:
        self._commit(shipping_taxed=shipping_taxed)

    def change_digital_goods_vat(self, digital_goods_vat: bool) -> None:
        self._commit(digital_goods_vat=digital_goods_vat)

    # Fiscal regions, keyed by (country, state_region)

    def find_region(self, country: str, state_region: str) -> FiscalRegion | None:
        return _find(self._state.regions, lambda r: r.key == (country, state_region))

    def add_region(self, region: FiscalRegion) -> None:
        """Append a region.

        Raises:
            DuplicateKeyError: If the (country, state_region) pair exists.
        """
        if self.find_region(region.country, region.state_region) is not None:
            raise _duplicate("regions", region.key)
        self._commit(regions=(*self._state.regions, region))

    def update_region(
        self, country: str, state_region: str, region: FiscalRegion
    ) -> None:
        """Replace the region keyed by (country, state_region) in place.

        Raises:
            RecordNotFoundError: If no such region exists.
        """
        index = _index_of(
            self._state.regions, lambda r: r.key == (country, state_region)
        )
        if index is None:
            raise RecordNotFoundError("regions", (country, state_region))
        self._commit(regions=_replaced(self._state.regions, index, region))

    def remove_region(self, country: str, state_region: str) -> None:
        """Remove the region keyed by (country, state_region).

        Raises:
            RecordNotFoundError: If no such region exists.
            EmptyRegionListError: If it is the last region.
        """
        index = _index_of(
            self._state.regions, lambda r: r.key == (country, state_region)
        )
        if index is None:
            raise RecordNotFoundError("regions", (country, state_region))
        self._commit(regions=_removed(self._state.regions, index))

    # Reduced rates, keyed by description

    def find_reduced_rate(self, description: str) -> ReducedRate | None:
        return _find(self._state.reduced_rates, lambda r: r.description == description)

    def add_reduced_rate(self, rate: ReducedRate) -> None:
        if self.find_reduced_rate(rate.description) is not None:
            raise _duplicate("reduced_rates", rate.key)
        self._commit(reduced_rates=(*self._state.reduced_rates, rate))

    def update_reduced_rate(self, description: str, rate: ReducedRate) -> None:
        index = _index_of(
            self._state.reduced_rates, lambda r: r.description == description
        )
        if index is None:
            raise RecordNotFoundError("reduced_rates", description)
        self._commit(reduced_rates=_replaced(self._state.reduced_rates, index, rate))

    def remove_reduced_rate(self, description: str) -> None:
        index = _index_of(
            self._state.reduced_rates, lambda r: r.description == description
        )
        if index is None:
            raise RecordNotFoundError("reduced_rates", description)
        self._commit(reduced_rates=_removed(self._state.reduced_rates, index))

    # Tariff fees, addressed by position

    def add_tariff_fee(self, fee: TariffRate) -> None:
        self._commit(tariff_fees=(*self._state.tariff_fees, fee))

    def update_tariff_fee(self, index: int, fee: TariffRate) -> None:
        self._check_tariff_index(index)
        self._commit(tariff_fees=_replaced(self._state.tariff_fees, index, fee))

    def remove_tariff_fee(self, index: int) -> None:
        self._check_tariff_index(index)
        self._commit(tariff_fees=_removed(self._state.tariff_fees, index))

    def _check_tariff_index(self, index: int) -> None:
        # Negative indexes are rejected rather than counted from the end
        if not 0 <= index < len(self._state.tariff_fees):
            raise RecordNotFoundError("tariff_fees", index)

    # Customs codes, keyed by harmonized code

    def find_customs_code(self, harmonized_code: str) -> CustomsCode | None:
        return _find(
            self._state.customs_codes, lambda c: c.harmonized_code == harmonized_code
        )

    def add_customs_code(self, code: CustomsCode) -> None:
        if self.find_customs_code(code.harmonized_code) is not None:
            raise _duplicate("customs_codes", code.key)
        self._commit(customs_codes=(*self._state.customs_codes, code))

    def update_customs_code(self, harmonized_code: str, code: CustomsCode) -> None:
        index = _index_of(
            self._state.customs_codes, lambda c: c.harmonized_code == harmonized_code
        )
        if index is None:
            raise RecordNotFoundError("customs_codes", harmonized_code)
        self._commit(customs_codes=_replaced(self._state.customs_codes, index, code))

    def remove_customs_code(self, harmonized_code: str) -> None:
        index = _index_of(
            self._state.customs_codes, lambda c: c.harmonized_code == harmonized_code
        )
        if index is None:
            raise RecordNotFoundError("customs_codes", harmonized_code)
        self._commit(customs_codes=_removed(self._state.customs_codes, index))

    # Queries

    def calculate_tax(self, amount: float, country: str, state_region: str) -> float:
        """Tax owed on ``amount`` for a sale in (country, state_region).

        Returns 0 when the store has no matching region or does not
        collect tax there.
        """
        region = self.find_region(country, state_region)
        if region is None or not region.collects_tax:
            return 0
        # Rates may be stored as Decimal
        return float(amount) * float(region.standard_rate) / PERCENT_DIVISOR

    def applicable_rates(self, country: str, state_region: str) -> ApplicableRates:
        """Standard rate of the matching region (0 if none) and reduced rates."""
        region = self.find_region(country, state_region)
        return ApplicableRates(
            standard_rate=float(region.standard_rate) if region is not None else 0,
            reduced_rates=self._state.reduced_rates,
        )

    def is_valid(self) -> bool:
        """Audit the current state; never raises."""
        return find_violation(self._state) is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FiscalConfiguration):
            return NotImplemented
        return self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"<FiscalConfiguration(id={self.id!r}, store_id={self.store_id!r}, "
            f"regions={len(self._state.regions)})>"
        )


def _find[T](records: Sequence[T], predicate: Any) -> T | None:
    return next((record for record in records if predicate(record)), None)


def _index_of[T](records: Sequence[T], predicate: Any) -> int | None:
    return next(
        (index for index, record in enumerate(records) if predicate(record)), None
    )


def _replaced[T](records: tuple[T, ...], index: int, record: T) -> tuple[T, ...]:
    return (*records[:index], record, *records[index + 1 :])


def _removed[T](records: tuple[T, ...], index: int) -> tuple[T, ...]:
    return (*records[:index], *records[index + 1 :])


def _duplicate(collection: str, key: NaturalKey) -> DuplicateKeyError:
    return DuplicateKeyError(
        f"A {collection} record with key {key!r} already exists",
        field=collection,
        key=key,
    )
