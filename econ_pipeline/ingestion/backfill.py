"""
Bulk historical loader.

Fills gaps only: any stored row for a (country, indicator, date) key makes
the candidate a skip, so backfill never creates a second version. Pages are
all fetched before the first write. Writes go in fixed-size batches, each
committed on its own; a failing batch does not undo earlier ones, and each
indicator can simply be re-run.
"""

import threading
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Optional

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine

from econ_pipeline.config.indicators import IndicatorSpec
from econ_pipeline.config.settings import settings
from econ_pipeline.db.models import IndicatorValue
from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.core.validation import validate_record
from econ_pipeline.ingestion.country_registry import country_exists
from econ_pipeline.ingestion.errors import BackfillCancelled
from econ_pipeline.ingestion.ledger import RunStatus, record_run, summarize_errors
from econ_pipeline.ingestion.types import BackfillResult, CandidateObservation, IngestionResult
from econ_pipeline.utils.logger import logger

_KEY_COLUMNS = ["country_code", "indicator_id", "effective_date", "data_version"]


def _key_exists(conn: Connection, indicator_id: str, record: CandidateObservation, effective_date: date) -> bool:
    row = conn.execute(
        select(IndicatorValue.id)
        .where(
            IndicatorValue.country_code == record.country_code,
            IndicatorValue.indicator_id == indicator_id,
            IndicatorValue.effective_date == effective_date,
        )
        .limit(1)
    ).first()
    return row is not None


def _insert_first_version(conn: Connection, values: dict) -> int:
    """Insert version 1, ignoring a concurrent writer that got there first. Returns rows written."""
    dialect = conn.dialect.name
    if dialect == "postgresql":
        stmt = pg_insert(IndicatorValue).values(values).on_conflict_do_nothing(index_elements=_KEY_COLUMNS)
    elif dialect == "sqlite":
        stmt = sqlite_insert(IndicatorValue).values(values).on_conflict_do_nothing(index_elements=_KEY_COLUMNS)
    else:
        stmt = insert(IndicatorValue).values(values)
    result = conn.execute(stmt)
    return result.rowcount if result.rowcount is not None and result.rowcount >= 0 else 1


class HistoricalBackfill:
    def __init__(
        self,
        engine: Engine,
        adapter: BaseAdapter,
        page_size: int | None = None,
        batch_size: int | None = None,
        page_delay: float | None = None,
        cancel_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._engine = engine
        self._adapter = adapter
        self.page_size = page_size or settings.BACKFILL_PAGE_SIZE
        self.batch_size = batch_size or settings.BACKFILL_BATCH_SIZE
        self.page_delay = settings.BACKFILL_PAGE_DELAY if page_delay is None else page_delay
        self._cancel_event = cancel_event
        self._sleep = sleep

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def fetch_history(self, source_code: str) -> List[CandidateObservation]:
        records: List[CandidateObservation] = []
        page = 1
        pages = 1
        while page <= pages:
            parsed = self._adapter.fetch_history_page(source_code, page, self.page_size)
            pages = parsed.pages
            if page == 1:
                logger.info(f"Backfill {source_code}: total records {parsed.total}, pages {pages}")
            records.extend(parsed.records)
            logger.info(f"Backfill {source_code}: page {page}/{pages}, collected {len(records)} records")
            page += 1
            if page <= pages:
                self._sleep(self.page_delay)
        return records

    def write(
        self,
        indicator_id: str,
        records: List[CandidateObservation],
        fetched_at: datetime,
    ) -> BackfillResult:
        result = BackfillResult()
        for start in range(0, len(records), self.batch_size):
            if self.cancelled:
                logger.warning(f"Backfill cancelled before batch {result.batches + 1}")
                raise BackfillCancelled(result)
            batch = records[start:start + self.batch_size]
            inserted, skipped = self._write_batch(indicator_id, batch, fetched_at)
            result.inserted += inserted
            result.skipped += skipped
            result.batches += 1
            logger.info(
                f"Backfill batch {result.batches}: inserted={result.inserted}, skipped={result.skipped}"
            )
        return result

    def _write_batch(
        self,
        indicator_id: str,
        batch: Iterable[CandidateObservation],
        fetched_at: datetime,
    ) -> tuple[int, int]:
        inserted = 0
        skipped = 0
        with self._engine.begin() as conn:
            for record in batch:
                if validate_record(record) is not None:
                    skipped += 1
                    continue
                if not country_exists(conn, record.country_code):
                    skipped += 1
                    continue
                effective_date = date.fromisoformat(record.effective_date)
                if _key_exists(conn, indicator_id, record, effective_date):
                    skipped += 1
                    continue
                written = _insert_first_version(conn, {
                    "country_code": record.country_code,
                    "indicator_id": indicator_id,
                    "effective_date": effective_date,
                    "value": float(record.value),
                    "fetched_at": fetched_at,
                    "data_version": 1,
                })
                if written:
                    inserted += 1
                else:
                    skipped += 1
        return inserted, skipped

    def backfill(self, indicator_type: str, indicator_id: str, source_code: str) -> BackfillResult:
        """Fetch every page, then write. Writes one backfill:<type> ledger entry."""
        job_name = f"backfill:{indicator_type}"
        started_at = datetime.now(timezone.utc)
        logger.info(f"Backfill starting: {indicator_type} ({source_code})")
        try:
            records = self.fetch_history(source_code)
            result = self.write(indicator_id, records, started_at)
        except BackfillCancelled as e:
            self._record(job_name, RunStatus.PARTIAL, started_at, e.result, str(e))
            raise
        except Exception as e:
            logger.exception(f"Backfill failed {indicator_type}: {e}")
            self._record(job_name, RunStatus.FAILURE, started_at, BackfillResult(), str(e) or type(e).__name__)
            raise
        self._record(job_name, RunStatus.SUCCESS, started_at, result, None)
        logger.info(
            f"Backfill completed {indicator_type}: inserted={result.inserted}, skipped={result.skipped}"
        )
        return result

    def _record(
        self,
        job_name: str,
        status: RunStatus,
        started_at: datetime,
        result: BackfillResult,
        message: Optional[str],
    ) -> None:
        try:
            record_run(
                self._engine,
                job_name,
                status,
                started_at,
                datetime.now(timezone.utc),
                IngestionResult(inserted=result.inserted, skipped=result.skipped),
                summarize_errors([message]) if message else None,
            )
        except Exception as ledger_error:
            logger.error(f"Could not write ledger entry for {job_name}: {ledger_error}")


@dataclass
class BackfillProgress:
    """Status of a multi-indicator backfill, shared with whoever started it."""

    running: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    current: Optional[str] = None
    completed: List[str] = field(default_factory=list)
    failed: List[dict] = field(default_factory=list)
    total: int = 0
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def start(self, total: int) -> None:
        self.running = True
        self.started_at = datetime.now(timezone.utc)
        self.completed_at = None
        self.current = None
        self.completed = []
        self.failed = []
        self.total = total
        self.cancel_event.clear()

    def finish(self) -> None:
        self.running = False
        self.current = None
        self.completed_at = datetime.now(timezone.utc)

    def cancel(self) -> None:
        self.cancel_event.set()

    def as_dict(self) -> dict:
        return {
            "running": self.running,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "current": self.current,
            "completed": list(self.completed),
            "failed": list(self.failed),
            "total": self.total,
            "cancel_requested": self.cancel_event.is_set(),
        }


def run_backfill(
    engine: Engine,
    adapter: BaseAdapter,
    indicators: List[IndicatorSpec],
    progress: Optional[BackfillProgress] = None,
    indicator_delay: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
    **loader_kwargs,
) -> BackfillProgress:
    """
    Backfill indicators one after another. A failing indicator is recorded and
    skipped; cancellation stops at the next batch or indicator boundary.
    """
    progress = progress if progress is not None else BackfillProgress()
    indicator_delay = settings.BACKFILL_INDICATOR_DELAY if indicator_delay is None else indicator_delay
    # already started by the caller: keep any cancel requested since then
    if not progress.running:
        progress.start(len(indicators))
    started = time.monotonic()
    logger.info(f"Backfill starting for {len(indicators)} indicators")

    try:
        loader = HistoricalBackfill(
            engine,
            adapter,
            cancel_event=progress.cancel_event,
            sleep=sleep,
            **loader_kwargs,
        )
        for i, spec in enumerate(indicators):
            if progress.cancel_event.is_set():
                logger.warning("Backfill cancelled")
                break
            progress.current = spec.job_name
            try:
                loader.backfill(spec.job_name, spec.id, spec.source_code)
                progress.completed.append(spec.job_name)
            except BackfillCancelled:
                logger.warning(f"Backfill cancelled during {spec.job_name}")
                break
            except Exception as e:
                progress.failed.append({"type": spec.job_name, "error": str(e)})
            if i < len(indicators) - 1:
                sleep(indicator_delay)
    finally:
        progress.finish()

    logger.info(
        f"Backfill finished in {round(time.monotonic() - started)}s: "
        f"completed={progress.completed}, failed={[f['type'] for f in progress.failed]}"
    )
    return progress
