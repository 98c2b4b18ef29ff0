"""
Structural validation of candidate observations.

The validator never raises and never touches the store: it returns a
ValidationError describing the first problem, or None. Referential checks
(country exists) need a registry lookup and are done by the loader.
"""

import math
import re
from datetime import date
from typing import Optional

from econ_pipeline.ingestion.types import CandidateObservation

COUNTRY_CODE_RE = re.compile(r"[A-Z]{2}")
EFFECTIVE_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ValidationError(Exception):
    """Malformed candidate record. Collected into the run's error list, never fatal."""

    pass


def _is_calendar_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_record(record: CandidateObservation) -> Optional[ValidationError]:
    code = record.country_code
    if not isinstance(code, str) or not COUNTRY_CODE_RE.fullmatch(code):
        return ValidationError(f"Invalid country_code: {code}")

    value = record.value
    # bool is an int subclass; True is not a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return ValidationError(f"Invalid value for {code}: {value}")

    effective_date = record.effective_date
    if (
        not isinstance(effective_date, str)
        or not EFFECTIVE_DATE_RE.fullmatch(effective_date)
        or not _is_calendar_date(effective_date)
    ):
        return ValidationError(f"Invalid effective_date for {code}: {effective_date}")

    return None
