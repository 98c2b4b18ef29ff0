"""
World Bank indicator adapter.
No DB, no retries of bad payloads, no lifecycle.
"""

from typing import Any, List, Optional

from econ_pipeline.config.indicators import SOURCE_WORLD_BANK
from econ_pipeline.config.settings import settings
from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.types import CandidateObservation, FetchMode, ParsedPage
from econ_pipeline.ingestion.worldbank.client import WorldBankClient
from econ_pipeline.ingestion.worldbank.schemas import WorldBankDataPoint, parse_indicator_page
from econ_pipeline.utils.logger import logger


class WorldBankAdapter(BaseAdapter):
    """Annual indicators keyed by ISO3; emits ISO2 candidates dated Dec 31."""

    source = SOURCE_WORLD_BANK

    def __init__(self, countries: Any = None, session: Any = None, client: WorldBankClient | None = None) -> None:
        super().__init__(countries=countries, session=session)
        self.client = client or WorldBankClient(session=session)

    def fetch(
        self,
        source_code: Optional[str],
        page: int = 1,
        per_page: int | None = None,
        mode: FetchMode = FetchMode.LATEST,
        **kwargs: Any,
    ) -> Any:
        if not source_code:
            raise ValueError("World Bank adapter requires an indicator code")
        per_page = per_page or settings.WORLD_BANK_PAGE_SIZE
        logger.info(f"Fetching World Bank {source_code} page={page} per_page={per_page} mode={mode.value}")
        return self.client.indicator(
            source_code,
            page=page,
            per_page=per_page,
            most_recent=mode is FetchMode.LATEST,
        )

    def parse(self, raw: Any) -> ParsedPage:
        parsed = parse_indicator_page(raw)
        if not parsed.records:
            logger.info("World Bank returned no data points")
        else:
            logger.info(
                f"World Bank returned {len(parsed.records)} data points "
                f"(page {parsed.page}/{parsed.pages}, total {parsed.total})"
            )
        return parsed

    def normalize(self, record: WorldBankDataPoint) -> List[CandidateObservation]:
        if record.value is None:
            return []
        iso2 = self.client.country_map().get(record.countryiso3code)
        if not iso2:
            return []
        year = record.year
        if year is None:
            return []
        return [CandidateObservation(
            country_code=iso2,
            value=record.value,
            effective_date=f"{year:04d}-12-31",
        )]
