"""Value records owned by a store's fiscal configuration.

Records are immutable and compare by content. They never validate
themselves: shape rules are enforced by the validator against the whole
configuration, so a record can hold out-of-range data (for example when
it was read back from storage) and still be reported on.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FiscalService(str, Enum):
    """Service that computes taxes for the store."""

    SHOPIFY_TAX = "Shopify Tax"
    MANUAL = "Manual"
    BASIC_TAX = "Basic Tax"


class TaxType(str, Enum):
    """Kind of tax levied in a fiscal region."""

    IVA = "IVA"
    GST = "GST"
    PST = "PST"
    HST = "HST"
    SALES_TAX = "Sales Tax"
    VAT = "VAT"
    IGST = "IGST"
    CGST = "CGST"
    SGST = "SGST"


class TariffType(str, Enum):
    """How a tariff fee amount is interpreted."""

    FIXED = "fixed"
    PERCENTAGE = "percentage"
    COMPUTED = "computed"


def _as_tuple(values: Iterable[str] | None) -> tuple[str, ...]:
    return tuple(values) if values else ()


@dataclass(frozen=True, slots=True)
class FiscalRegion:
    """A country/state pair with the tax the store collects there."""

    country: str
    state_region: str
    tax_type: TaxType | str
    collects_tax: bool
    standard_rate: float

    @property
    def key(self) -> tuple[str, str]:
        """Natural key: (country, state_region)."""
        return (self.country, self.state_region)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "country": self.country,
            "state_region": self.state_region,
            "tax_type": _enum_value(self.tax_type),
            "collects_tax": self.collects_tax,
            "standard_rate": self.standard_rate,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FiscalRegion:
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            country=data["country"],
            state_region=data["state_region"],
            tax_type=data["tax_type"],
            collects_tax=data["collects_tax"],
            standard_rate=data["standard_rate"],
        )


@dataclass(frozen=True, slots=True)
class ReducedRate:
    """A tax percentage below the standard rate for some categories."""

    description: str
    percentage: float
    categories: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", _as_tuple(self.categories))

    @property
    def key(self) -> str:
        """Natural key: the description."""
        return self.description

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "description": self.description,
            "percentage": self.percentage,
            "categories": list(self.categories),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReducedRate:
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            description=data["description"],
            percentage=data["percentage"],
            categories=_as_tuple(data.get("categories")),
        )


@dataclass(frozen=True, slots=True)
class TariffRate:
    """An import duty charged at checkout.

    Tariff fees have no natural key; the aggregate addresses them by
    position.
    """

    type: TariffType | str
    amount: float
    condition: str | None = None
    destination_countries: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "destination_countries", _as_tuple(self.destination_countries)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "type": _enum_value(self.type),
            "amount": self.amount,
            "condition": self.condition,
            "destination_countries": list(self.destination_countries),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TariffRate:
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            type=data["type"],
            amount=data["amount"],
            condition=data.get("condition"),
            destination_countries=_as_tuple(data.get("destination_countries")),
        )


@dataclass(frozen=True, slots=True)
class CustomsCode:
    """Harmonized System classification of a product for customs."""

    origin_country: str
    harmonized_code: str
    description: str
    variant_id: str | None = None

    @property
    def key(self) -> str:
        """Natural key: the harmonized code."""
        return self.harmonized_code

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "origin_country": self.origin_country,
            "harmonized_code": self.harmonized_code,
            "description": self.description,
            "variant_id": self.variant_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CustomsCode:
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            origin_country=data["origin_country"],
            harmonized_code=data["harmonized_code"],
            description=data["description"],
            variant_id=data.get("variant_id"),
        )


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value
