"""
Read-only view of the countries table. Seeding is an external bootstrap step.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from econ_pipeline.db.models import Country


@dataclass(frozen=True)
class CountryRecord:
    country_code: str
    name: str
    region: Optional[str]
    income_level: Optional[str]
    currency_code: Optional[str]


def country_exists(conn: Connection, country_code: str) -> bool:
    row = conn.execute(
        select(Country.country_code).where(Country.country_code == country_code)
    ).first()
    return row is not None


class CountryRegistry:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def lookup(self, country_code: str) -> Optional[CountryRecord]:
        stmt = select(
            Country.country_code,
            Country.name,
            Country.region,
            Country.income_level,
            Country.currency_code,
        ).where(Country.country_code == country_code)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            return None
        return CountryRecord(**row._mapping)

    def exists(self, country_code: str, conn: Optional[Connection] = None) -> bool:
        """Use the caller's connection when given so the check joins its transaction."""
        if conn is not None:
            return country_exists(conn, country_code)
        with self._engine.connect() as own:
            return country_exists(own, country_code)

    def currency_map(self) -> Dict[str, List[str]]:
        """currency_code -> country codes using it."""
        stmt = (
            select(Country.country_code, Country.currency_code)
            .where(Country.currency_code.is_not(None))
            .order_by(Country.country_code)
        )
        mapping: Dict[str, List[str]] = {}
        with self._engine.connect() as conn:
            for country_code, currency_code in conn.execute(stmt):
                mapping.setdefault(currency_code.strip(), []).append(country_code)
        return mapping
