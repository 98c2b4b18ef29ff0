"""
Typed views of World Bank API v2 payloads.

Every response is a two-element JSON array: [metadata, data]. data is null
when the indicator has no observations for the request. Error responses are a
one-element array holding a "message" list and are treated as unrecognized.
"""

import re
from typing import Any, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from econ_pipeline.ingestion.errors import ProviderResponseError
from econ_pipeline.ingestion.types import ParsedPage

_YEAR_RE = re.compile(r"^(\d{4})")


class WorldBankMeta(BaseModel):
    page: int
    pages: int
    per_page: int
    total: int


class WorldBankRef(BaseModel):
    id: str = ""
    value: str = ""


class WorldBankDataPoint(BaseModel):
    countryiso3code: str = ""
    date: str
    value: Optional[float] = None
    country: Optional[WorldBankRef] = None
    indicator: Optional[WorldBankRef] = None

    @property
    def year(self) -> Optional[int]:
        # "2023", "2023Q1" and "2023M04" all count toward 2023
        match = _YEAR_RE.match(self.date)
        return int(match.group(1)) if match else None


class WorldBankCountry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    iso2_code: str = Field("", alias="iso2Code")
    name: str = ""


_POINTS = TypeAdapter(List[WorldBankDataPoint])
_COUNTRIES = TypeAdapter(List[WorldBankCountry])


def _split(raw: Any, what: str):
    if not isinstance(raw, list) or len(raw) != 2:
        raise ProviderResponseError(
            f"Unrecognized World Bank {what} response: {str(raw)[:200]}"
        )
    return raw[0], raw[1]


def parse_indicator_page(raw: Any) -> ParsedPage:
    """[meta, points|null] -> ParsedPage of WorldBankDataPoint."""
    meta_raw, data_raw = _split(raw, "indicator")
    try:
        meta = WorldBankMeta.model_validate(meta_raw)
        points = [] if data_raw is None else _POINTS.validate_python(data_raw)
    except pydantic.ValidationError as e:
        raise ProviderResponseError(f"Malformed World Bank indicator response: {e}") from e
    return ParsedPage(records=points, page=meta.page, pages=meta.pages, total=meta.total)


def parse_country_list(raw: Any) -> List[WorldBankCountry]:
    _, data_raw = _split(raw, "country")
    if data_raw is None:
        return []
    try:
        return _COUNTRIES.validate_python(data_raw)
    except pydantic.ValidationError as e:
        raise ProviderResponseError(f"Malformed World Bank country response: {e}") from e
