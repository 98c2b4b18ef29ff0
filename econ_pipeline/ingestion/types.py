from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class FetchMode(str, Enum):
    LATEST = "latest"
    HISTORY = "history"


@dataclass(frozen=True)
class CandidateObservation:
    """One (country, value, date) triple from a source adapter. Not yet validated."""

    country_code: str
    value: float
    effective_date: str  # YYYY-MM-DD


@dataclass
class ParsedPage:
    """Recognized provider response. Unrecognized payloads raise instead."""

    records: List[Any]
    page: int = 1
    pages: int = 1
    total: Optional[int] = None


@dataclass
class IngestionResult:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class BackfillResult:
    inserted: int = 0
    skipped: int = 0
    batches: int = 0
