"""Pydantic commands and views exchanged with the fiscal use cases.

Commands carry enum fields as plain strings: the aggregate is the single
authority on which values are accepted, so an unknown tax type surfaces
as an ``INVALID_ENUM_VALUE`` violation rather than a schema error.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.domain.fiscal.configuration import ApplicableRates, FiscalConfiguration
from src.domain.fiscal.records import (
    CustomsCode,
    FiscalRegion,
    ReducedRate,
    TariffRate,
)


class FiscalRegionModel(BaseModel):
    country: str = Field(..., examples=["MX"])
    state_region: str = Field(..., examples=["CDMX"])
    tax_type: str = Field(..., examples=["IVA"])
    collects_tax: bool = True
    standard_rate: float = Field(..., examples=[16.0])

    def to_record(self) -> FiscalRegion:
        return FiscalRegion(**self.model_dump())

    @classmethod
    def from_record(cls, region: FiscalRegion) -> "FiscalRegionModel":
        return cls(**region.to_dict())


class ReducedRateModel(BaseModel):
    description: str = Field(..., examples=["Food"])
    percentage: float = Field(..., examples=[5.0])
    categories: list[str] = Field(default_factory=list)

    def to_record(self) -> ReducedRate:
        return ReducedRate(**self.model_dump())

    @classmethod
    def from_record(cls, rate: ReducedRate) -> "ReducedRateModel":
        return cls(**rate.to_dict())


class TariffRateModel(BaseModel):
    type: str = Field(..., examples=["fixed", "percentage", "computed"])
    amount: float = Field(..., examples=[25.0])
    condition: str | None = None
    destination_countries: list[str] = Field(default_factory=list)

    def to_record(self) -> TariffRate:
        return TariffRate(**self.model_dump())

    @classmethod
    def from_record(cls, fee: TariffRate) -> "TariffRateModel":
        return cls(**fee.to_dict())


class CustomsCodeModel(BaseModel):
    origin_country: str = Field(..., examples=["CN"])
    harmonized_code: str = Field(..., examples=["8471.30"])
    description: str = Field(..., examples=["Portable computers"])
    variant_id: str | None = None

    def to_record(self) -> CustomsCode:
        return CustomsCode(**self.model_dump())

    @classmethod
    def from_record(cls, code: CustomsCode) -> "CustomsCodeModel":
        return cls(**code.to_dict())


class CreateFiscalConfigurationCommand(BaseModel):
    """Input of the create use case.

    ``fiscal_service`` falls back to the configured default when omitted.
    """

    store_id: str = Field(..., min_length=1, examples=["store-1"])
    fiscal_service: str | None = Field(default=None, examples=["Manual"])
    regions: list[FiscalRegionModel] = Field(default_factory=list)
    standard_rate: float = Field(..., examples=[16.0])
    reduced_rates: list[ReducedRateModel] = Field(default_factory=list)
    price_includes_tax: bool = False
    duty_at_checkout: bool = False
    tariff_fees: list[TariffRateModel] = Field(default_factory=list)
    ddp_available: bool = False
    customs_codes: list[CustomsCodeModel] = Field(default_factory=list)
    shipping_taxed: bool = False
    digital_goods_vat: bool = False


class UpdateFiscalConfigurationCommand(BaseModel):
    """Partial update: only the fields explicitly set are replaced.

    Collections given here replace the stored ones as a whole.
    """

    model_config = ConfigDict(extra="forbid")

    fiscal_service: str | None = None
    regions: list[FiscalRegionModel] | None = None
    standard_rate: float | None = None
    reduced_rates: list[ReducedRateModel] | None = None
    price_includes_tax: bool | None = None
    duty_at_checkout: bool | None = None
    tariff_fees: list[TariffRateModel] | None = None
    ddp_available: bool | None = None
    customs_codes: list[CustomsCodeModel] | None = None
    shipping_taxed: bool | None = None
    digital_goods_vat: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Return the set fields as aggregate values, records included.

        A field explicitly set to ``None`` is ignored, like an absent one.
        """
        changes: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, list):
                value = [item.to_record() for item in value]
            changes[name] = value
        return changes


class FiscalConfigurationView(BaseModel):
    """Read model of a fiscal configuration."""

    id: str
    store_id: str
    fiscal_service: str
    standard_rate: float
    regions: list[FiscalRegionModel]
    reduced_rates: list[ReducedRateModel]
    price_includes_tax: bool
    duty_at_checkout: bool
    tariff_fees: list[TariffRateModel]
    ddp_available: bool
    customs_codes: list[CustomsCodeModel]
    shipping_taxed: bool
    digital_goods_vat: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_aggregate(
        cls, configuration: FiscalConfiguration
    ) -> "FiscalConfigurationView":
        state = configuration.snapshot()
        return cls(
            id=state.id,
            store_id=state.store_id,
            fiscal_service=state.to_dict()["fiscal_service"],
            standard_rate=state.standard_rate,
            regions=[FiscalRegionModel.from_record(r) for r in state.regions],
            reduced_rates=[
                ReducedRateModel.from_record(r) for r in state.reduced_rates
            ],
            price_includes_tax=state.price_includes_tax,
            duty_at_checkout=state.duty_at_checkout,
            tariff_fees=[TariffRateModel.from_record(t) for t in state.tariff_fees],
            ddp_available=state.ddp_available,
            customs_codes=[
                CustomsCodeModel.from_record(c) for c in state.customs_codes
            ],
            shipping_taxed=state.shipping_taxed,
            digital_goods_vat=state.digital_goods_vat,
            created_at=state.created_at,
            updated_at=state.updated_at,
        )


class TaxCalculationView(BaseModel):
    store_id: str
    amount: float
    country: str
    state_region: str
    tax: float


class IntegrityReportView(BaseModel):
    store_id: str
    valid: bool


class ApplicableRatesView(BaseModel):
    country: str
    state_region: str
    standard_rate: float
    reduced_rates: list[ReducedRateModel]

    @classmethod
    def from_rates(
        cls, rates: ApplicableRates, country: str, state_region: str
    ) -> "ApplicableRatesView":
        return cls(
            country=country,
            state_region=state_region,
            standard_rate=rates.standard_rate,
            reduced_rates=[
                ReducedRateModel.from_record(r) for r in rates.reduced_rates
            ],
        )
