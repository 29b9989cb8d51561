"""ORM tables for migrated reports and their asset schedules."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

from report_migrator.domain.models import Division

Base = declarative_base()


class ReportRow(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference = Column(String(255), nullable=False, index=True)
    source_id = Column(String(64))
    crm_deal_id = Column(String(64), nullable=False)
    report_date = Column(Date, nullable=False)
    years_in_schedule = Column(String(64))
    pre_notional_write_down_years = Column(String(64))
    notional_write_down_rate = Column(String(255))
    notional_write_down_governor = Column(String(255))
    preliminary_fees = Column(String(255))
    expenditure_governor = Column(String(255))
    consultancy_fees = Column(String(255))
    number_of_years_to_back_claim = Column(String(64))
    migrated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    division_40_assets = relationship(
        "Division40AssetRow", back_populates="report", cascade="all, delete-orphan", passive_deletes=True
    )
    division_43_assets = relationship(
        "Division43AssetRow", back_populates="report", cascade="all, delete-orphan", passive_deletes=True
    )


class _AssetColumns:
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(500))
    area = Column(String(64))
    area_type = Column(String(32), nullable=False)
    installation_date_formula = Column(String(255))
    rate_formula = Column(String(500))
    quantity_formula = Column(String(500))
    scrapped_date_formula = Column(String(255))
    is_given_cost = Column(Boolean, default=False)


class Division40AssetRow(_AssetColumns, Base):
    __tablename__ = "division_40_assets"

    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    hundred_percent_option = Column(String(8))
    is_division_43_deduction = Column(Boolean, default=False)
    number_of_items = Column(String(64))
    exclude_fees = Column(Boolean, default=False)
    exclude_expenditure = Column(Boolean, default=False)

    report = relationship("ReportRow", back_populates="division_40_assets")


class Division43AssetRow(_AssetColumns, Base):
    __tablename__ = "division_43_assets"

    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)

    report = relationship("ReportRow", back_populates="division_43_assets")


ASSET_TABLES = {
    Division.DIV_40: Division40AssetRow,
    Division.DIV_43: Division43AssetRow,
}
