"""
Ingestion run ledger. Append-only: one row per run, never read back for
update. The caller derives the status and writes exactly one entry per run.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Engine

from econ_pipeline.config.settings import settings
from econ_pipeline.db.models import Indicator, IndicatorValue, IngestionLog
from econ_pipeline.ingestion.types import IngestionResult


class RunStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


def derive_status(result: IngestionResult) -> RunStatus:
    """A batch that produced a result is success or partial; failure is the caller's call."""
    return RunStatus.PARTIAL if result.errors else RunStatus.SUCCESS


def summarize_errors(
    errors: Iterable[str],
    limit: int | None = None,
    max_chars: int | None = None,
) -> Optional[str]:
    limit = settings.LEDGER_ERROR_LIMIT if limit is None else limit
    max_chars = settings.LEDGER_ERROR_MAX_CHARS if max_chars is None else max_chars
    errors = list(errors)
    if not errors:
        return None
    summary = "; ".join(errors[:limit])
    if len(errors) > limit:
        summary += f" (+{len(errors) - limit} more)"
    if len(summary) > max_chars:
        summary = summary[: max_chars - 3] + "..."
    return summary


def record_run(
    engine: Engine,
    job_name: str,
    status: RunStatus,
    started_at: datetime,
    finished_at: datetime,
    result: IngestionResult,
    error_summary: Optional[str] = None,
) -> None:
    with engine.begin() as conn:
        conn.execute(
            insert(IngestionLog).values(
                job_name=job_name,
                status=RunStatus(status).value,
                started_at=started_at,
                finished_at=finished_at,
                items_inserted=result.inserted,
                items_updated=result.updated,
                error_message=error_summary,
            )
        )


def last_updated(engine: Engine) -> Dict[str, dict]:
    """Latest successful run per job name."""
    latest = (
        select(
            IngestionLog.job_name,
            func.max(IngestionLog.finished_at).label("finished_at"),
        )
        .where(IngestionLog.status == RunStatus.SUCCESS.value)
        .group_by(IngestionLog.job_name)
        .subquery()
    )
    stmt = (
        select(
            IngestionLog.job_name,
            IngestionLog.finished_at,
            IngestionLog.items_inserted,
            IngestionLog.items_updated,
        )
        .join(
            latest,
            (IngestionLog.job_name == latest.c.job_name)
            & (IngestionLog.finished_at == latest.c.finished_at),
        )
        .where(IngestionLog.status == RunStatus.SUCCESS.value)
    )
    out: Dict[str, dict] = {}
    with engine.connect() as conn:
        for row in conn.execute(stmt):
            out[row.job_name] = {
                "finished_at": row.finished_at,
                "items_inserted": row.items_inserted,
                "items_updated": row.items_updated,
            }
    return out


def record_counts(engine: Engine) -> Dict[str, int]:
    """Stored rows (all versions) per indicator type."""
    stmt = (
        select(Indicator.indicator_type, func.count(IndicatorValue.id))
        .select_from(Indicator)
        .outerjoin(IndicatorValue, IndicatorValue.indicator_id == Indicator.id)
        .group_by(Indicator.indicator_type)
        .order_by(Indicator.indicator_type)
    )
    with engine.connect() as conn:
        return {indicator_type: count for indicator_type, count in conn.execute(stmt)}
