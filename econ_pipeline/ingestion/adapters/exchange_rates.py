"""
Open ER API adapter: one flat USD rate map per call.

Rates are keyed by currency, so each rate fans out to every registered
country using that currency. The registry is read, never written.
"""

from typing import Any, Dict, List, Optional

import pandas as pd
import pydantic
from pydantic import BaseModel

from econ_pipeline.config.indicators import SOURCE_EXCHANGE
from econ_pipeline.config.settings import settings
from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.errors import ProviderResponseError
from econ_pipeline.ingestion.http import build_session
from econ_pipeline.ingestion.types import CandidateObservation, ParsedPage
from econ_pipeline.utils.logger import logger


class ExchangeRateResponse(BaseModel):
    result: str
    base_code: str = "USD"
    time_last_update_utc: str
    rates: Dict[str, float]


class RateRecord(BaseModel):
    currency: str
    rate: float
    effective_date: str


class ExchangeRateAdapter(BaseAdapter):
    source = SOURCE_EXCHANGE

    def __init__(self, countries: Any = None, session: Any = None) -> None:
        super().__init__(countries=countries, session=session or build_session())
        self._currency_map: Optional[Dict[str, List[str]]] = None

    def fetch(self, source_code: Optional[str] = None, **kwargs: Any) -> Any:
        # source_code is unused: the endpoint has a single rate table
        logger.info("Fetching exchange rates from Open ER API")
        response = self._session.get(settings.EXCHANGE_RATE_URL, timeout=settings.HTTP_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def parse(self, raw: Any) -> ParsedPage:
        if not isinstance(raw, dict) or raw.get("result") != "success":
            result = raw.get("result") if isinstance(raw, dict) else type(raw).__name__
            raise ProviderResponseError(f"Exchange rate API returned non-success result: {result}")
        try:
            payload = ExchangeRateResponse.model_validate(raw)
        except pydantic.ValidationError as e:
            raise ProviderResponseError(f"Malformed exchange rate response: {e}") from e

        try:
            updated = pd.to_datetime(payload.time_last_update_utc, utc=True)
        except (ValueError, TypeError) as e:
            raise ProviderResponseError(
                f"Unparseable time_last_update_utc: {payload.time_last_update_utc!r}"
            ) from e
        if pd.isna(updated):
            raise ProviderResponseError("Exchange rate response has an empty time_last_update_utc")
        effective_date = updated.date().isoformat()

        records = [
            RateRecord(currency=currency, rate=rate, effective_date=effective_date)
            for currency, rate in payload.rates.items()
        ]
        logger.info(f"Received {len(records)} currency rates dated {effective_date}")
        return ParsedPage(records=records, total=len(records))

    def _currencies(self) -> Dict[str, List[str]]:
        if self._currency_map is None:
            if self._countries is None:
                raise ValueError("ExchangeRateAdapter needs a country registry")
            self._currency_map = self._countries.currency_map()
        return self._currency_map

    def normalize(self, record: RateRecord) -> List[CandidateObservation]:
        countries = self._currencies().get(record.currency, [])
        return [
            CandidateObservation(
                country_code=code,
                value=record.rate,
                effective_date=record.effective_date,
            )
            for code in countries
        ]
