"""
Base adapter contract for indicator sources.

Adapters MUST NOT: write to DB, retry unrecognized payloads, log ingestion
runs, or control lifecycle.

Adapters ONLY: fetch, parse, normalize. The reduction to one observation per
country and the history paging are shared here.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from econ_pipeline.ingestion.types import CandidateObservation, FetchMode, ParsedPage


def reduce_latest(records: Iterable[CandidateObservation]) -> List[CandidateObservation]:
    """
    Keep the most recent observation per country. On an equal effective date
    the first one seen is kept. Output preserves first-seen country order.
    """
    best: Dict[str, CandidateObservation] = {}
    for record in records:
        existing = best.get(record.country_code)
        if existing is None or existing.effective_date < record.effective_date:
            best[record.country_code] = record
    return list(best.values())


class BaseAdapter(ABC):
    """Contract for all indicator source adapters."""

    source: str = ""

    def __init__(self, countries: Any = None, session: Any = None) -> None:
        # countries: CountryRegistry, read-only; session: requests.Session override
        self._countries = countries
        self._session = session

    @abstractmethod
    def fetch(self, source_code: Optional[str], **kwargs) -> Any:
        """Fetch raw payload from the provider. Network only."""
        pass

    @abstractmethod
    def parse(self, raw: Any) -> ParsedPage:
        """Decode the raw payload. Raises ProviderResponseError on an unknown shape."""
        pass

    @abstractmethod
    def normalize(self, record: Any) -> List[CandidateObservation]:
        """Map one parsed record to zero or more candidates. Empty list drops it."""
        pass

    def normalize_all(self, records: Iterable[Any]) -> List[CandidateObservation]:
        normalized = []
        for r in records:
            normalized.extend(self.normalize(r))
        return normalized

    def collect(
        self,
        source_code: Optional[str],
        mode: FetchMode = FetchMode.LATEST,
        **kwargs: Any,
    ) -> List[CandidateObservation]:
        """Fetch, parse and normalize one request. LATEST reduces per country."""
        raw = self.fetch(source_code, **kwargs)
        parsed = self.parse(raw)
        normalized = self.normalize_all(parsed.records)
        if mode is FetchMode.LATEST:
            return reduce_latest(normalized)
        return normalized

    def fetch_history_page(
        self, source_code: Optional[str], page: int, per_page: int
    ) -> ParsedPage:
        """One page of the unreduced history, records already normalized."""
        raw = self.fetch(source_code, page=page, per_page=per_page, mode=FetchMode.HISTORY)
        parsed = self.parse(raw)
        return ParsedPage(
            records=self.normalize_all(parsed.records),
            page=parsed.page,
            pages=parsed.pages,
            total=parsed.total,
        )
