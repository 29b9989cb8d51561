from datetime import date

from report_migrator.domain.models import Division, RawAsset, RawReport
from report_migrator.domain.services import (
    RecordTransformer,
    build_deal,
    build_report,
    normalize_asset,
)


def make_report(**overrides: str) -> RawReport:
    fields = dict(
        id="7",
        reference="R-001",
        construction_completion="3/4/05",
        settlement="01/05/2005",
        available_first_use_formula="settlement",
        common_entitlement_formula="12.5",
        report_date="10/06/2005",
        council_name="Sydney",
        years_in_schedule="40",
    )
    fields.update(overrides)
    return RawReport(**fields)


def make_asset(**overrides: str) -> RawAsset:
    fields = dict(
        report_id="7",
        name="Carpet",
        area="0",
        installation_date_formula="cc",
        rate_formula="45.5",
        quantity_formula="area*2",
        is_given_cost="1",
        hundred_percent_option="0",
        is_division_43_deduction="0",
        number_of_items="3",
        exclude_fees="1",
        exclude_expenditure="0",
    )
    fields.update(overrides)
    return RawAsset(**fields)


def test_deal_from_scenario_report():
    deal = build_deal(make_report())

    assert deal is not None
    assert deal.name == "R-001"
    assert deal.ccd == date(2005, 4, 3)
    assert deal.settlement_date == date(2005, 5, 1)
    assert deal.first_use_date == date(2005, 5, 1)
    assert deal.common_entitlement == 12.5

    properties = deal.to_properties()
    assert properties["dealname"] == "R-001"
    assert properties["ccd"] == "2005-04-03"
    assert properties["first_use_date"] == "2005-05-01"
    assert properties["council_name"] == "Sydney"
    assert "land_value" not in properties


def test_deal_invalid_when_any_required_value_is_bad():
    assert build_deal(make_report(construction_completion="")) is None
    assert build_deal(make_report(settlement="31/02/2005")) is None
    assert build_deal(make_report(available_first_use_formula="soon")) is None
    assert build_deal(make_report(common_entitlement_formula="=B2")) is None
    assert build_deal(make_report(common_entitlement_formula="12,5")) is None


def test_first_use_sentinel_fails_with_invalid_settlement():
    assert build_deal(make_report(settlement="bad")) is None


def test_report_requires_valid_report_date():
    assert build_report(make_report(report_date="")) is None
    report = build_report(make_report(), [make_asset()], [make_asset(name="Walls")])
    assert report.report_date == date(2005, 6, 10)
    assert report.years_in_schedule == "40"
    assert [a.name for a in report.division_40_assets] == ["Carpet"]
    assert [a.name for a in report.division_43_assets] == ["Walls"]


def test_division_40_asset_mapping():
    asset = normalize_asset(make_asset(), Division.DIV_40)

    assert asset.installation_date_formula == "=cc"
    assert asset.rate_formula == "45.5"
    assert asset.quantity_formula == "=area*2"
    assert asset.area_type == "Unit Specific"
    assert asset.is_given_cost is True
    assert asset.hundred_percent_option == "Yes"
    assert asset.is_division_43_deduction is False
    assert asset.number_of_items == "3"
    assert asset.exclude_fees is True
    assert asset.exclude_expenditure is False


def test_division_43_asset_has_no_election_flags():
    asset = normalize_asset(make_asset(area="14.2", hundred_percent_option="1"), Division.DIV_43)

    assert asset.area_type == "Common Property"
    assert asset.hundred_percent_option is None
    assert "hundred_percent_option" not in asset.to_row()


def test_asset_mapping_never_fails_on_garbage():
    asset = normalize_asset(RawAsset(report_id="7", installation_date_formula="32/13/x"), Division.DIV_40)

    assert asset.installation_date_formula == "=32/13/x"
    assert asset.rate_formula is None
    assert asset.hundred_percent_option == "Force"


def test_transformer_rejects_and_accepts():
    transformer = RecordTransformer()

    assert transformer.transform(make_report(report_date=""), {}) is None
    assert transformer.transform(make_report(settlement=""), {}) is None

    deal, report = transformer.transform(make_report(), {Division.DIV_43: [make_asset()]})
    assert deal.name == report.reference == "R-001"
    assert len(report.division_43_assets) == 1
    assert report.division_40_assets == ()


def test_blank_reference_is_invalid():
    assert build_deal(make_report(reference="   ")) is None
    assert build_report(make_report(reference="")) is None
    assert RecordTransformer().transform(make_report(reference=" "), {}) is None
