"""
Versioned upsert of indicator values.

A batch is one transaction: every row commits or none do. Per record:
validate -> country exists -> compare with the latest stored version ->
insert version 1 / skip unchanged / insert version + 1. Stored rows are
never updated or deleted.

Records are applied in input order and each one sees the rows written
earlier in the same transaction, so for a key repeated inside a batch the
last record wins.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection, Engine

from econ_pipeline.db.models import IndicatorValue
from econ_pipeline.ingestion.core.validation import validate_record
from econ_pipeline.ingestion.country_registry import country_exists
from econ_pipeline.ingestion.types import CandidateObservation, IngestionResult
from econ_pipeline.utils.logger import logger

# |stored - candidate| <= VALUE_TOLERANCE counts as unchanged
VALUE_TOLERANCE = 1e-4


def latest_version(
    conn: Connection,
    country_code: str,
    indicator_id: str,
    effective_date: date,
) -> Optional[Tuple[float, int]]:
    """(value, data_version) of the highest version for the key, or None."""
    row = conn.execute(
        select(IndicatorValue.value, IndicatorValue.data_version)
        .where(
            IndicatorValue.country_code == country_code,
            IndicatorValue.indicator_id == indicator_id,
            IndicatorValue.effective_date == effective_date,
        )
        .order_by(IndicatorValue.data_version.desc())
        .limit(1)
    ).first()
    if row is None:
        return None
    return row.value, row.data_version


def is_unchanged(stored: float, candidate: float, tolerance: float = VALUE_TOLERANCE) -> bool:
    return abs(stored - candidate) <= tolerance


def _insert_version(
    conn: Connection,
    indicator_id: str,
    record: CandidateObservation,
    effective_date: date,
    fetched_at: datetime,
    data_version: int,
) -> None:
    conn.execute(
        insert(IndicatorValue).values(
            country_code=record.country_code,
            indicator_id=indicator_id,
            effective_date=effective_date,
            value=float(record.value),
            fetched_at=fetched_at,
            data_version=data_version,
        )
    )


def upsert_indicator_values(
    engine: Engine,
    indicator_id: str,
    records: Iterable[CandidateObservation],
    fetched_at: datetime,
    tolerance: float = VALUE_TOLERANCE,
) -> IngestionResult:
    result = IngestionResult()

    # engine.begin() rolls back on any exception, interrupts included
    with engine.begin() as conn:
        for record in records:
            error = validate_record(record)
            if error is not None:
                result.errors.append(str(error))
                continue

            if not country_exists(conn, record.country_code):
                result.skipped += 1
                continue

            effective_date = date.fromisoformat(record.effective_date)
            existing = latest_version(conn, record.country_code, indicator_id, effective_date)

            if existing is None:
                _insert_version(conn, indicator_id, record, effective_date, fetched_at, 1)
                result.inserted += 1
                continue

            stored_value, stored_version = existing
            if is_unchanged(stored_value, record.value, tolerance):
                result.skipped += 1
                continue

            _insert_version(
                conn, indicator_id, record, effective_date, fetched_at, stored_version + 1
            )
            result.updated += 1

    logger.info(
        f"Upserted indicator {indicator_id}: inserted={result.inserted}, "
        f"updated={result.updated}, skipped={result.skipped}, errors={len(result.errors)}"
    )
    return result
