"""Shared constants, builders and fake adapters for the test suite."""
from typing import List, Optional

from sqlalchemy import select

from econ_pipeline.db.models import IndicatorValue, IngestionLog
from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.types import CandidateObservation, ParsedPage

GDP_ID = "44444444-4444-4444-4444-444444444444"
GINI_ID = "77777777-7777-7777-7777-777777777777"
EXCHANGE_ID = "33333333-3333-3333-3333-333333333333"


def obs(country_code, value, effective_date="2023-12-31") -> CandidateObservation:
    return CandidateObservation(country_code=country_code, value=value, effective_date=effective_date)


def stored_values(engine, indicator_id: str = GDP_ID) -> List[tuple]:
    """(country_code, effective_date iso, value, data_version) ordered by key and version"""
    stmt = (
        select(
            IndicatorValue.country_code,
            IndicatorValue.effective_date,
            IndicatorValue.value,
            IndicatorValue.data_version,
        )
        .where(IndicatorValue.indicator_id == indicator_id)
        .order_by(
            IndicatorValue.country_code,
            IndicatorValue.effective_date,
            IndicatorValue.data_version,
        )
    )
    with engine.connect() as conn:
        return [(r[0], r[1].isoformat(), r[2], r[3]) for r in conn.execute(stmt)]


def ledger_rows(engine, job_name: Optional[str] = None) -> list:
    stmt = select(IngestionLog).order_by(IngestionLog.started_at)
    if job_name is not None:
        stmt = stmt.where(IngestionLog.job_name == job_name)
    with engine.connect() as conn:
        return list(conn.execute(stmt))


class StaticAdapter(BaseAdapter):
    """Adapter serving canned candidates. Subclass and set `payload` per test."""

    source = "worldbank"
    payload: List[CandidateObservation] = []
    error: Optional[BaseException] = None

    def fetch(self, source_code, **kwargs):
        if self.error is not None:
            raise self.error
        return {"records": list(self.payload)}

    def parse(self, raw):
        return ParsedPage(records=raw["records"], total=len(raw["records"]))

    def normalize(self, record):
        return [record]


class PagedAdapter(BaseAdapter):
    """History adapter serving `pages` (list of candidate lists), one per page"""

    source = "worldbank"

    def __init__(self, pages, countries=None, session=None):
        super().__init__(countries=countries, session=session)
        self.pages = pages
        self.requested = []

    def fetch(self, source_code, page=1, per_page=None, **kwargs):
        self.requested.append((source_code, page, per_page))
        return {"page": page, "pages": len(self.pages), "records": self.pages[page - 1]}

    def parse(self, raw):
        total = sum(len(p) for p in self.pages)
        return ParsedPage(records=raw["records"], page=raw["page"], pages=raw["pages"], total=total)

    def normalize(self, record):
        return [record]
