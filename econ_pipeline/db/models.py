import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

from econ_pipeline.config.indicators import IndicatorType

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


def _uuid():
    return str(uuid.uuid4())


_INDICATOR_TYPES = ", ".join(f"'{t.value}'" for t in IndicatorType)


class Country(Base):
    __tablename__ = "countries"

    country_code = Column(String(2), primary_key=True)
    name = Column(Text, nullable=False)
    region = Column(Text)
    income_level = Column(Text)
    currency_code = Column(String(3))
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Indicator(Base):
    __tablename__ = "indicators"
    __table_args__ = (
        CheckConstraint(
            f"indicator_type IN ({_INDICATOR_TYPES})",
            name="indicators_indicator_type_check",
        ),
        Index("ix_indicators_indicator_type", "indicator_type"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    indicator_type = Column(String, nullable=False)
    source = Column(String, nullable=False)
    source_indicator_code = Column(String)
    name = Column(Text, nullable=False)
    unit = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class IndicatorValue(Base):
    """
    Versioned fact. Rows are never updated or deleted; a correction is a new
    row with data_version = previous + 1. Readers take the max version per key.
    """

    __tablename__ = "indicator_values"
    __table_args__ = (
        UniqueConstraint(
            "country_code",
            "indicator_id",
            "effective_date",
            "data_version",
            name="indicator_values_unique_version",
        ),
        CheckConstraint("data_version >= 1", name="indicator_values_version_positive"),
        Index(
            "idx_indicator_values_country_history",
            "country_code",
            "indicator_id",
            "effective_date",
        ),
        Index("idx_indicator_values_indicator", "indicator_id"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    country_code = Column(
        String(2),
        ForeignKey("countries.country_code", ondelete="CASCADE"),
        nullable=False,
    )
    indicator_id = Column(
        String(36),
        ForeignKey("indicators.id", ondelete="CASCADE"),
        nullable=False,
    )
    effective_date = Column(Date, nullable=False)
    value = Column(Float, nullable=False)
    fetched_at = Column(DateTime(timezone=True), nullable=False)
    data_version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class IngestionLog(Base):
    __tablename__ = "ingestion_logs"
    __table_args__ = (
        CheckConstraint(
            "status IN ('success', 'failure', 'partial')",
            name="ingestion_logs_status_check",
        ),
        Index("idx_ingestion_logs_latest", "job_name", "finished_at"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    job_name = Column(String, nullable=False)
    status = Column(String, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False)
    finished_at = Column(DateTime(timezone=True))
    items_inserted = Column(Integer, nullable=False, default=0)
    items_updated = Column(Integer, nullable=False, default=0)
    error_message = Column(Text)
