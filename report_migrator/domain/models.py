"""Domain models for the report migration pipeline.

Raw* dataclasses mirror one extract row as read from disk; Normalized* are
the shapes handed to the CRM and the relational store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Division(str, Enum):
    DIV_40 = "40"
    DIV_43 = "43"

    @property
    def label(self) -> str:
        return f"div-{self.value}"


REPORT_SOURCE_FIELDS = {
    "id": "ID",
    "reference": "Reference",
    "construction_completion": "ConstructionCompletion",
    "settlement": "Settlement",
    "available_first_use_formula": "AvailableFirstUseFormula",
    "common_entitlement_formula": "CommonEntitlementFormula",
    "purchase_price": "PurchasePrice",
    "land_value": "LandValue",
    "number_of_levels": "NumberOfLevels",
    "number_of_units": "NumberOfUnits",
    "strata_plan_provider": "StrataPlanProvider",
    "verbal_information_provided_by": "VerbalInformationProvidedBy",
    "written_information_provided_by": "WrittenInformationProvidedBy",
    "council_name": "CouncilName",
    "report_date": "ReportDate",
    "years_in_schedule": "YearsInSchedule",
    "pre_notional_write_down_years": "PreNotionalWriteDownYears",
    "notional_write_down_rate": "NotionalWriteDownRate",
    "notional_write_down_governor": "NotionalWriteDownGovernor",
    "preliminary_fees": "PreliminaryFees",
    "expenditure_governor": "ExpenditureGovernor",
    "consultancy_fees": "ConsultancyFees",
    "number_of_years_to_back_claim": "NumberOfYearsToBackClaim",
}

ASSET_SOURCE_FIELDS = {
    "report_id": "ReportID",
    "name": "Name",
    "area": "Area",
    "installation_date_formula": "InstallationDateFormula",
    "rate_formula": "RateFormula",
    "quantity_formula": "QuantityFormula",
    "scrapped_date_formula": "ScrappedDateFormula",
    "is_given_cost": "IsGivenCost",
    "is_division_43_deduction": "IsDivision43Deduction",
    "hundred_percent_option": "HundredPercentOption",
    "number_of_items": "NumberOfItems",
    "exclude_fees": "ExcludeFees",
    "exclude_expenditure": "ExcludeExpenditure",
}


DEAL_PASSTHROUGH_FIELDS = (
    "purchase_price",
    "land_value",
    "number_of_levels",
    "number_of_units",
    "strata_plan_provider",
    "verbal_information_provided_by",
    "written_information_provided_by",
    "council_name",
)


@dataclass(frozen=True)
class RawReport:
    """One row of the report extract, every value kept as text."""

    id: str
    reference: str
    construction_completion: str = ""
    settlement: str = ""
    available_first_use_formula: str = ""
    common_entitlement_formula: str = ""
    purchase_price: str = ""
    land_value: str = ""
    number_of_levels: str = ""
    number_of_units: str = ""
    strata_plan_provider: str = ""
    verbal_information_provided_by: str = ""
    written_information_provided_by: str = ""
    council_name: str = ""
    report_date: str = ""
    years_in_schedule: str = ""
    pre_notional_write_down_years: str = ""
    notional_write_down_rate: str = ""
    notional_write_down_governor: str = ""
    preliminary_fees: str = ""
    expenditure_governor: str = ""
    consultancy_fees: str = ""
    number_of_years_to_back_claim: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "RawReport":
        return cls(**{attr: _text(row.get(key)) for attr, key in REPORT_SOURCE_FIELDS.items()})


@dataclass(frozen=True)
class RawAsset:
    """One row of a Division 40 or Division 43 asset extract."""

    report_id: str
    name: str = ""
    area: str = ""
    installation_date_formula: str = ""
    rate_formula: str = ""
    quantity_formula: str = ""
    scrapped_date_formula: str = ""
    is_given_cost: str = ""
    is_division_43_deduction: str = ""
    hundred_percent_option: str = ""
    number_of_items: str = ""
    exclude_fees: str = ""
    exclude_expenditure: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "RawAsset":
        return cls(**{attr: _text(row.get(key)) for attr, key in ASSET_SOURCE_FIELDS.items()})

    def to_mapping(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key in ASSET_SOURCE_FIELDS.items()}


@dataclass(frozen=True)
class NormalizedDeal:
    """CRM projection of a report."""

    name: str
    ccd: date
    settlement_date: date
    first_use_date: date
    common_entitlement: float
    purchase_price: str | None = None
    land_value: str | None = None
    number_of_levels: str | None = None
    number_of_units: str | None = None
    strata_plan_provider: str | None = None
    verbal_information_provided_by: str | None = None
    written_information_provided_by: str | None = None
    council_name: str | None = None

    def to_properties(self) -> dict[str, object]:
        properties: dict[str, object] = {
            "dealname": self.name,
            "ccd": self.ccd.isoformat(),
            "settlement_date": self.settlement_date.isoformat(),
            "first_use_date": self.first_use_date.isoformat(),
            "common_entitlement": self.common_entitlement,
        }
        for name in DEAL_PASSTHROUGH_FIELDS:
            value = getattr(self, name)
            if value is not None:
                properties[name] = value
        return properties


@dataclass(frozen=True)
class NormalizedAsset:
    division: Division
    name: str
    area: str | None
    area_type: str
    installation_date_formula: str | None
    rate_formula: str | None
    quantity_formula: str | None
    scrapped_date_formula: str | None
    is_given_cost: bool
    # Division 40 only
    hundred_percent_option: str | None = None
    is_division_43_deduction: bool | None = None
    number_of_items: str | None = None
    exclude_fees: bool | None = None
    exclude_expenditure: bool | None = None

    def to_row(self) -> dict[str, object]:
        row: dict[str, object] = {
            "name": self.name,
            "area": self.area,
            "area_type": self.area_type,
            "installation_date_formula": self.installation_date_formula,
            "rate_formula": self.rate_formula,
            "quantity_formula": self.quantity_formula,
            "scrapped_date_formula": self.scrapped_date_formula,
            "is_given_cost": self.is_given_cost,
        }
        if self.division is Division.DIV_40:
            row.update(
                hundred_percent_option=self.hundred_percent_option,
                is_division_43_deduction=self.is_division_43_deduction,
                number_of_items=self.number_of_items,
                exclude_fees=self.exclude_fees,
                exclude_expenditure=self.exclude_expenditure,
            )
        return row


@dataclass(frozen=True)
class NormalizedReport:
    """Relational projection of a report with its two asset schedules."""

    reference: str
    source_id: str
    report_date: date
    years_in_schedule: str | None = None
    pre_notional_write_down_years: str | None = None
    notional_write_down_rate: str | None = None
    notional_write_down_governor: str | None = None
    preliminary_fees: str | None = None
    expenditure_governor: str | None = None
    consultancy_fees: str | None = None
    number_of_years_to_back_claim: str | None = None
    division_40_assets: Sequence[NormalizedAsset] = field(default_factory=tuple)
    division_43_assets: Sequence[NormalizedAsset] = field(default_factory=tuple)

    def assets_for(self, division: Division) -> Sequence[NormalizedAsset]:
        if division is Division.DIV_40:
            return self.division_40_assets
        return self.division_43_assets

    def to_row(self, crm_deal_id: str) -> dict[str, object]:
        return {
            "reference": self.reference,
            "source_id": self.source_id,
            "crm_deal_id": crm_deal_id,
            "report_date": self.report_date,
            "years_in_schedule": self.years_in_schedule,
            "pre_notional_write_down_years": self.pre_notional_write_down_years,
            "notional_write_down_rate": self.notional_write_down_rate,
            "notional_write_down_governor": self.notional_write_down_governor,
            "preliminary_fees": self.preliminary_fees,
            "expenditure_governor": self.expenditure_governor,
            "consultancy_fees": self.consultancy_fees,
            "number_of_years_to_back_claim": self.number_of_years_to_back_claim,
        }
