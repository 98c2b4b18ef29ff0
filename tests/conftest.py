"""
Pytest configuration and fixtures for the indicator pipeline tests.

Storage tests run against a fresh SQLite file per test, with the indicator
catalog and a handful of countries seeded.
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine, insert

from econ_pipeline.db.init_db import seed_indicators
from econ_pipeline.db.models import Base, Country


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "unit: Tests with no database")
    config.addinivalue_line("markers", "integration: Tests against a SQLite database file")


COUNTRIES = [
    {"country_code": "US", "name": "United States", "region": "North America",
     "income_level": "High income", "currency_code": "USD"},
    {"country_code": "GB", "name": "United Kingdom", "region": "Europe & Central Asia",
     "income_level": "High income", "currency_code": "GBP"},
    {"country_code": "DE", "name": "Germany", "region": "Europe & Central Asia",
     "income_level": "High income", "currency_code": "EUR"},
    {"country_code": "FR", "name": "France", "region": "Europe & Central Asia",
     "income_level": "High income", "currency_code": "EUR"},
    {"country_code": "JP", "name": "Japan", "region": "East Asia & Pacific",
     "income_level": "High income", "currency_code": "JPY"},
    {"country_code": "AQ", "name": "Antarctica", "region": None,
     "income_level": None, "currency_code": None},
]


@pytest.fixture
def engine(tmp_path):
    """SQLite engine with schema, indicator catalog and seeded countries"""
    eng = create_engine(f"sqlite:///{tmp_path / 'econ.db'}")
    Base.metadata.create_all(eng)
    seed_indicators(eng)
    with eng.begin() as conn:
        conn.execute(insert(Country), COUNTRIES)
    yield eng
    eng.dispose()


@pytest.fixture
def fetched_at():
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
