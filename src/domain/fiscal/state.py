"""Immutable snapshot of a fiscal configuration's full state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from src.domain.fiscal.records import (
    CustomsCode,
    FiscalRegion,
    FiscalService,
    ReducedRate,
    TariffRate,
)

# Fields a caller may replace; identity and timestamps are managed internally
MUTABLE_FIELDS: frozenset[str] = frozenset(
    {
        "fiscal_service",
        "standard_rate",
        "regions",
        "reduced_rates",
        "price_includes_tax",
        "duty_at_checkout",
        "tariff_fees",
        "ddp_available",
        "customs_codes",
        "shipping_taxed",
        "digital_goods_vat",
    }
)

_COLLECTION_FIELDS = ("regions", "reduced_rates", "tariff_fees", "customs_codes")


@dataclass(frozen=True, slots=True)
class FiscalState:
    """Every field of a fiscal configuration, frozen.

    This is what the validator inspects and what persistence adapters
    store. Collections are tuples so a snapshot can be shared freely.
    """

    id: str
    store_id: str
    fiscal_service: FiscalService | str
    standard_rate: float
    created_at: datetime
    updated_at: datetime
    regions: tuple[FiscalRegion, ...] = field(default=())
    reduced_rates: tuple[ReducedRate, ...] = field(default=())
    price_includes_tax: bool = False
    duty_at_checkout: bool = False
    tariff_fees: tuple[TariffRate, ...] = field(default=())
    ddp_available: bool = False
    customs_codes: tuple[CustomsCode, ...] = field(default=())
    shipping_taxed: bool = False
    digital_goods_vat: bool = False

    def __post_init__(self) -> None:
        for name in _COLLECTION_FIELDS:
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary (datetimes kept as-is)."""
        data: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name in _COLLECTION_FIELDS:
                value = [record.to_dict() for record in value]
            elif item.name == "fiscal_service" and isinstance(value, FiscalService):
                value = value.value
            data[item.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FiscalState:
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            id=data["id"],
            store_id=data["store_id"],
            fiscal_service=data["fiscal_service"],
            standard_rate=data["standard_rate"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            regions=tuple(FiscalRegion.from_dict(r) for r in data.get("regions", ())),
            reduced_rates=tuple(
                ReducedRate.from_dict(r) for r in data.get("reduced_rates", ())
            ),
            price_includes_tax=data.get("price_includes_tax", False),
            duty_at_checkout=data.get("duty_at_checkout", False),
            tariff_fees=tuple(
                TariffRate.from_dict(t) for t in data.get("tariff_fees", ())
            ),
            ddp_available=data.get("ddp_available", False),
            customs_codes=tuple(
                CustomsCode.from_dict(c) for c in data.get("customs_codes", ())
            ),
            shipping_taxed=data.get("shipping_taxed", False),
            digital_goods_vat=data.get("digital_goods_vat", False),
        )
