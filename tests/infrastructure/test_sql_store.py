from datetime import date

import pytest

from report_migrator.domain.errors import PersistenceError
from report_migrator.domain.models import Division
from report_migrator.infrastructure.storage.sql_store import SqlReportStore, init_db, make_engine


@pytest.fixture
def store() -> SqlReportStore:
    engine = make_engine("sqlite://")
    init_db(engine)
    return SqlReportStore(engine)


def report_fields(reference: str = "R-001") -> dict[str, object]:
    return {"reference": reference, "source_id": "7", "crm_deal_id": "501", "report_date": date(2005, 6, 10)}


def asset_row(report_id: int, name: str) -> dict[str, object]:
    return {"report_id": report_id, "name": name, "area_type": "Common Property", "rate_formula": "=a*b"}


def test_insert_find_delete(store: SqlReportStore) -> None:
    assert store.find_report_by_reference("R-001") is None

    report_id = store.insert_report(report_fields())
    assert store.find_report_by_reference("R-001") == report_id
    assert store.bulk_insert_assets(Division.DIV_43, [asset_row(report_id, "Walls")]) == 1

    store.delete_report(report_id)
    assert store.find_report_by_reference("R-001") is None


def test_division_40_rows_accept_election_flags(store: SqlReportStore) -> None:
    report_id = store.insert_report(report_fields())
    row = dict(asset_row(report_id, "Carpet"), hundred_percent_option="Force", exclude_fees=True)

    assert store.bulk_insert_assets(Division.DIV_40, [row, asset_row(report_id, "Blinds")]) == 2


def test_constraint_violation_is_wrapped(store: SqlReportStore) -> None:
    with pytest.raises(PersistenceError):
        store.insert_report({"reference": "R-001", "crm_deal_id": "1"})
