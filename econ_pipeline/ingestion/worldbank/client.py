from typing import Any, Dict, Optional

import requests

from econ_pipeline.config.settings import settings
from econ_pipeline.ingestion.http import build_session
from econ_pipeline.ingestion.worldbank.schemas import parse_country_list
from econ_pipeline.utils.logger import logger


class WorldBankClient:
    """
    Thin HTTP wrapper for the World Bank v2 API.

    The ISO3 -> ISO2 map is fetched on first use and kept for the lifetime of
    this client only.
    """

    def __init__(self, session: Optional[requests.Session] = None, base_url: Optional[str] = None):
        self.session = session or build_session()
        self.base_url = (base_url or settings.WORLD_BANK_BASE_URL).rstrip("/")
        self._iso3_to_iso2: Optional[Dict[str, str]] = None

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        response = self.session.get(
            f"{self.base_url}/{path}",
            params={"format": "json", **params},
            timeout=settings.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()

    def indicator(
        self,
        code: str,
        page: int = 1,
        per_page: int = 500,
        most_recent: bool = True,
    ) -> Any:
        params: Dict[str, Any] = {"per_page": per_page, "page": page}
        if most_recent:
            # most recent non-empty value per country
            params["mrnev"] = 1
        return self._get(f"country/all/indicator/{code}", params)

    def country_map(self) -> Dict[str, str]:
        if self._iso3_to_iso2 is None:
            raw = self._get("country", {"per_page": 300})
            mapping = {}
            for c in parse_country_list(raw):
                # aggregates such as "1W" (World) carry digit codes and are not countries
                if c.id and len(c.iso2_code) == 2 and c.iso2_code.isalpha():
                    mapping[c.id] = c.iso2_code
            logger.info(f"Loaded {len(mapping)} World Bank country codes")
            self._iso3_to_iso2 = mapping
        return self._iso3_to_iso2
