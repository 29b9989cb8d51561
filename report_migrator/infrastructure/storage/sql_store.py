"""SQLAlchemy-backed relational store for migrated reports."""
from __future__ import annotations

from typing import Mapping, Sequence

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from report_migrator.domain.errors import PersistenceError
from report_migrator.domain.models import Division
from report_migrator.infrastructure.storage.models import ASSET_TABLES, Base, ReportRow


def make_engine(database_url: str) -> Engine:
    if database_url in {"sqlite://", "sqlite:///:memory:"}:
        # One shared connection, otherwise every session sees an empty database.
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=False)


def init_db(engine: Engine) -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=engine)


class SqlReportStore:
    def __init__(self, engine: Engine) -> None:
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def find_report_by_reference(self, reference: str) -> int | None:
        try:
            with self._session_factory() as session:
                return session.execute(
                    select(ReportRow.id).where(ReportRow.reference == reference).order_by(ReportRow.id).limit(1)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Lookup of report {reference!r} failed: {exc}") from exc

    def delete_report(self, report_id: int) -> None:
        try:
            with self._session_factory() as session, session.begin():
                # Backends without enforced foreign keys (SQLite) need the
                # asset rows removed explicitly.
                for table in ASSET_TABLES.values():
                    session.execute(delete(table).where(table.report_id == report_id))
                session.execute(delete(ReportRow).where(ReportRow.id == report_id))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Delete of report {report_id} failed: {exc}") from exc

    def insert_report(self, fields: Mapping[str, object]) -> int:
        try:
            with self._session_factory() as session, session.begin():
                row = ReportRow(**fields)
                session.add(row)
                session.flush()
                return row.id
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Insert of report {fields.get('reference')!r} failed: {exc}") from exc

    def bulk_insert_assets(self, division: Division, rows: Sequence[Mapping[str, object]]) -> int:
        table = ASSET_TABLES[division]
        try:
            with self._session_factory() as session, session.begin():
                session.add_all([table(**row) for row in rows])
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Insert of {len(rows)} {division.label} assets failed: {exc}") from exc
        return len(rows)
