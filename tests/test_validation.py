"""
Unit tests for candidate record validation.
"""
import math

import pytest

from econ_pipeline.ingestion.core.validation import ValidationError, validate_record
from econ_pipeline.ingestion.types import CandidateObservation

pytestmark = pytest.mark.unit


def record(country_code="US", value=1.5, effective_date="2023-12-31"):
    return CandidateObservation(country_code=country_code, value=value, effective_date=effective_date)


class TestValidRecords:
    @pytest.mark.parametrize("value", [0, -3, 1.5, 1e12, -0.0])
    def test_accepts_finite_numbers(self, value):
        assert validate_record(record(value=value)) is None

    def test_accepts_leap_day(self):
        assert validate_record(record(effective_date="2024-02-29")) is None


class TestCountryCode:
    @pytest.mark.parametrize("code", ["USA", "us", "U", "", "1W", "U1", "US\n", None])
    def test_rejects_malformed_code(self, code):
        error = validate_record(record(country_code=code))
        assert isinstance(error, ValidationError)
        assert str(error) == f"Invalid country_code: {code}"


class TestValue:
    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "1.5", None, True])
    def test_rejects_non_finite_or_non_numeric(self, value):
        error = validate_record(record(value=value))
        assert isinstance(error, ValidationError)
        assert str(error).startswith("Invalid value for US")


class TestEffectiveDate:
    @pytest.mark.parametrize(
        "effective_date",
        ["2023-13-01", "2023-02-30", "2023-1-01", "2023/12/31", "2023", "20231231", "2023-12-31T00:00", None],
    )
    def test_rejects_bad_dates(self, effective_date):
        error = validate_record(record(effective_date=effective_date))
        assert isinstance(error, ValidationError)
        assert str(error) == f"Invalid effective_date for US: {effective_date}"

    def test_code_checked_before_value(self):
        error = validate_record(record(country_code="XXX", value=math.nan))
        assert "country_code" in str(error)
