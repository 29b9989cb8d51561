"""Domain services: asset partitioning and record transformation."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from .models import (
    Division,
    NormalizedAsset,
    NormalizedDeal,
    NormalizedReport,
    RawAsset,
    RawReport,
)
from .normalization import (
    classify_area,
    classify_scalar,
    hundred_percent_option,
    optional_text,
    parse_date,
    parse_finite_number,
    parse_flag,
    resolve_first_use_date,
    resolve_installation_date,
)

logger = logging.getLogger(__name__)


def partition_assets(assets: Iterable[RawAsset], report_ids: Iterable[str]) -> dict[str, list[RawAsset]]:
    """Group assets by ``ReportID``, keeping only reports present in the extract.

    Insertion order is preserved both across reports and within each group.
    """
    known = set(report_ids)
    grouped: dict[str, list[RawAsset]] = {}
    for asset in assets:
        if asset.report_id not in known:
            continue
        grouped.setdefault(asset.report_id, []).append(asset)
    return grouped


def normalize_asset(raw: RawAsset, division: Division) -> NormalizedAsset:
    common = dict(
        division=division,
        name=raw.name.strip(),
        area=optional_text(raw.area),
        area_type=classify_area(raw.area),
        installation_date_formula=resolve_installation_date(raw.installation_date_formula),
        rate_formula=classify_scalar(raw.rate_formula),
        quantity_formula=classify_scalar(raw.quantity_formula),
        scrapped_date_formula=resolve_installation_date(raw.scrapped_date_formula),
        is_given_cost=parse_flag(raw.is_given_cost),
    )
    if division is Division.DIV_43:
        return NormalizedAsset(**common)
    return NormalizedAsset(
        **common,
        hundred_percent_option=hundred_percent_option(raw.hundred_percent_option),
        is_division_43_deduction=parse_flag(raw.is_division_43_deduction),
        number_of_items=optional_text(raw.number_of_items),
        exclude_fees=parse_flag(raw.exclude_fees),
        exclude_expenditure=parse_flag(raw.exclude_expenditure),
    )


def build_deal(raw: RawReport) -> NormalizedDeal | None:
    if not raw.reference.strip():
        return None
    ccd = parse_date(raw.construction_completion)
    settlement = parse_date(raw.settlement)
    first_use = resolve_first_use_date(raw.available_first_use_formula, settlement)
    common_entitlement = parse_finite_number(raw.common_entitlement_formula)
    if ccd is None or settlement is None or first_use is None or common_entitlement is None:
        return None
    return NormalizedDeal(
        name=raw.reference.strip(),
        ccd=ccd,
        settlement_date=settlement,
        first_use_date=first_use,
        common_entitlement=common_entitlement,
        purchase_price=optional_text(raw.purchase_price),
        land_value=optional_text(raw.land_value),
        number_of_levels=optional_text(raw.number_of_levels),
        number_of_units=optional_text(raw.number_of_units),
        strata_plan_provider=optional_text(raw.strata_plan_provider),
        verbal_information_provided_by=optional_text(raw.verbal_information_provided_by),
        written_information_provided_by=optional_text(raw.written_information_provided_by),
        council_name=optional_text(raw.council_name),
    )


def build_report(
    raw: RawReport,
    division_40: Sequence[RawAsset] = (),
    division_43: Sequence[RawAsset] = (),
) -> NormalizedReport | None:
    report_date = parse_date(raw.report_date)
    if report_date is None or not raw.reference.strip():
        return None
    return NormalizedReport(
        reference=raw.reference.strip(),
        source_id=raw.id,
        report_date=report_date,
        years_in_schedule=optional_text(raw.years_in_schedule),
        pre_notional_write_down_years=optional_text(raw.pre_notional_write_down_years),
        notional_write_down_rate=optional_text(raw.notional_write_down_rate),
        notional_write_down_governor=optional_text(raw.notional_write_down_governor),
        preliminary_fees=optional_text(raw.preliminary_fees),
        expenditure_governor=optional_text(raw.expenditure_governor),
        consultancy_fees=optional_text(raw.consultancy_fees),
        number_of_years_to_back_claim=optional_text(raw.number_of_years_to_back_claim),
        division_40_assets=tuple(normalize_asset(asset, Division.DIV_40) for asset in division_40),
        division_43_assets=tuple(normalize_asset(asset, Division.DIV_43) for asset in division_43),
    )


class RecordTransformer:
    """Builds the deal and report projections for one report, logging rejects."""

    def transform(
        self,
        raw: RawReport,
        assets: Mapping[Division, Sequence[RawAsset]],
    ) -> tuple[NormalizedDeal, NormalizedReport] | None:
        if not raw.reference.strip():
            logger.warning("Skipping report %s: blank reference", raw.id)
            return None
        deal = build_deal(raw)
        if deal is None:
            logger.warning(
                "Skipping %s: invalid deal (completion=%r, settlement=%r, first use=%r, common entitlement=%r)",
                raw.reference,
                raw.construction_completion,
                raw.settlement,
                raw.available_first_use_formula,
                raw.common_entitlement_formula,
            )
            return None
        report = build_report(
            raw,
            assets.get(Division.DIV_40, ()),
            assets.get(Division.DIV_43, ()),
        )
        if report is None:
            logger.warning("Skipping %s: invalid report date %r", raw.reference, raw.report_date)
            return None
        return deal, report
