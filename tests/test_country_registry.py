"""
Tests for the read-only country registry.
"""
import pytest

from econ_pipeline.ingestion.country_registry import CountryRecord, CountryRegistry

pytestmark = pytest.mark.integration


def test_lookup_known_country(engine):
    record = CountryRegistry(engine).lookup("DE")
    assert record == CountryRecord(
        country_code="DE",
        name="Germany",
        region="Europe & Central Asia",
        income_level="High income",
        currency_code="EUR",
    )


def test_lookup_unknown_country(engine):
    assert CountryRegistry(engine).lookup("ZZ") is None


def test_exists_inside_callers_transaction(engine):
    registry = CountryRegistry(engine)
    assert registry.exists("US") is True
    with engine.begin() as conn:
        assert registry.exists("GB", conn=conn) is True
        assert registry.exists("ZZ", conn=conn) is False


def test_currency_map_groups_countries(engine):
    mapping = CountryRegistry(engine).currency_map()
    assert mapping["EUR"] == ["DE", "FR"]
    assert mapping["USD"] == ["US"]
    # countries without a currency are left out
    assert all("AQ" not in codes for codes in mapping.values())
