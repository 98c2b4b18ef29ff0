"""
Indicator catalog. Static reference data seeded into the indicators table.

Ids are fixed so jobs, the scheduler and the store agree without a lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class IndicatorType(str, Enum):
    INTEREST = "interest"
    INFLATION = "inflation"
    EXCHANGE = "exchange"
    GDP_PER_CAPITA = "gdp_per_capita"
    UNEMPLOYMENT = "unemployment"
    GOVERNMENT_DEBT = "government_debt"
    GINI = "gini"
    LIFE_EXPECTANCY = "life_expectancy"
    EXPORTS = "exports"
    IMPORTS = "imports"
    FDI_INFLOWS = "fdi_inflows"
    LABOR_FORCE = "labor_force"
    FEMALE_EMPLOYMENT = "female_employment"
    DOMESTIC_CREDIT = "domestic_credit"
    EDUCATION_SPENDING = "education_spending"
    POVERTY_HEADCOUNT = "poverty_headcount"
    CO2_EMISSIONS = "co2_emissions"
    RENEWABLE_ENERGY = "renewable_energy"
    MARKET_CAP = "market_cap"
    STOCKS_TRADED = "stocks_traded"
    STOCK_TURNOVER = "stock_turnover"


SOURCE_WORLD_BANK = "worldbank"
SOURCE_EXCHANGE = "open_er_api"


@dataclass(frozen=True)
class IndicatorSpec:
    indicator_type: IndicatorType
    id: str
    source: str
    source_code: Optional[str]
    name: str
    unit: str
    # crontab fields: minute hour day month day_of_week
    schedule: str

    @property
    def job_name(self) -> str:
        return self.indicator_type.value


def _wb(indicator_type, id_, code, name, unit, schedule):
    return IndicatorSpec(indicator_type, id_, SOURCE_WORLD_BANK, code, name, unit, schedule)


CATALOG: List[IndicatorSpec] = [
    IndicatorSpec(
        IndicatorType.EXCHANGE,
        "33333333-3333-3333-3333-333333333333",
        SOURCE_EXCHANGE,
        None,
        "Exchange Rate vs USD",
        "per USD",
        "0 2 * * *",
    ),
    _wb(IndicatorType.INTEREST, "11111111-1111-1111-1111-111111111111",
        "FR.INR.RINR", "Real Interest Rate", "%", "0 3 * * sun"),
    _wb(IndicatorType.INFLATION, "22222222-2222-2222-2222-222222222222",
        "FP.CPI.TOTL.ZG", "Inflation (Consumer Prices)", "%", "0 4 1 * *"),
    _wb(IndicatorType.GDP_PER_CAPITA, "44444444-4444-4444-4444-444444444444",
        "NY.GDP.PCAP.CD", "GDP per Capita", "USD", "10 4 1 * *"),
    _wb(IndicatorType.UNEMPLOYMENT, "55555555-5555-5555-5555-555555555555",
        "SL.UEM.TOTL.ZS", "Unemployment Rate", "%", "20 4 1 * *"),
    _wb(IndicatorType.GOVERNMENT_DEBT, "66666666-6666-6666-6666-666666666666",
        "GC.DOD.TOTL.GD.ZS", "Government Debt", "% of GDP", "30 4 1 * *"),
    _wb(IndicatorType.GINI, "77777777-7777-7777-7777-777777777777",
        "SI.POV.GINI", "GINI Index", "index", "40 4 1 * *"),
    _wb(IndicatorType.LIFE_EXPECTANCY, "88888888-8888-8888-8888-888888888888",
        "SP.DYN.LE00.IN", "Life Expectancy", "years", "50 4 1 * *"),
    # Trade
    _wb(IndicatorType.EXPORTS, "99999999-9999-9999-9999-999999999999",
        "NE.EXP.GNFS.ZS", "Exports (% of GDP)", "% of GDP", "0 5 1 * *"),
    _wb(IndicatorType.IMPORTS, "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
        "NE.IMP.GNFS.ZS", "Imports (% of GDP)", "% of GDP", "10 5 1 * *"),
    _wb(IndicatorType.FDI_INFLOWS, "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
        "BX.KLT.DINV.WD.GD.ZS", "FDI Inflows (% of GDP)", "% of GDP", "20 5 1 * *"),
    # Labor
    _wb(IndicatorType.LABOR_FORCE, "cccccccc-cccc-cccc-cccc-cccccccccccc",
        "SL.TLF.CACT.ZS", "Labor Force Participation", "%", "30 5 1 * *"),
    _wb(IndicatorType.FEMALE_EMPLOYMENT, "dddddddd-dddd-dddd-dddd-dddddddddddd",
        "SL.EMP.TOTL.SP.FE.ZS", "Female Employment Share", "%", "40 5 1 * *"),
    # Finance
    _wb(IndicatorType.DOMESTIC_CREDIT, "eeeeeeee-eeee-eeee-eeee-eeeeeeeeeeee",
        "FS.AST.DOMS.GD.ZS", "Domestic Credit (% of GDP)", "% of GDP", "50 5 1 * *"),
    # Development
    _wb(IndicatorType.EDUCATION_SPENDING, "ffffffff-ffff-ffff-ffff-ffffffffffff",
        "SE.XPD.TOTL.GD.ZS", "Education Spending (% of GDP)", "% of GDP", "0 6 1 * *"),
    _wb(IndicatorType.POVERTY_HEADCOUNT, "10101010-1010-1010-1010-101010101010",
        "SI.POV.DDAY", "Poverty Rate ($2.15/day)", "%", "10 6 1 * *"),
    # Energy
    _wb(IndicatorType.CO2_EMISSIONS, "20202020-2020-2020-2020-202020202020",
        "EN.ATM.CO2E.PC", "CO2 Emissions per Capita", "metric tons", "20 6 1 * *"),
    _wb(IndicatorType.RENEWABLE_ENERGY, "30303030-3030-3030-3030-303030303030",
        "EG.FEC.RNEW.ZS", "Renewable Energy Share", "%", "30 6 1 * *"),
    # Markets
    _wb(IndicatorType.MARKET_CAP, "40404040-4040-4040-4040-404040404040",
        "CM.MKT.LCAP.GD.ZS", "Market Capitalization", "% of GDP", "40 6 1 * *"),
    _wb(IndicatorType.STOCKS_TRADED, "50505050-5050-5050-5050-505050505050",
        "CM.MKT.TRAD.GD.ZS", "Stocks Traded", "% of GDP", "50 6 1 * *"),
    _wb(IndicatorType.STOCK_TURNOVER, "60606060-6060-6060-6060-606060606060",
        "CM.MKT.TRNR", "Stock Turnover Ratio", "%", "0 7 1 * *"),
]

_BY_JOB: Dict[str, IndicatorSpec] = {spec.job_name: spec for spec in CATALOG}


def get_indicator(job_name: str) -> Optional[IndicatorSpec]:
    """Catalog entry for a job name (the indicator type value), or None."""
    if isinstance(job_name, IndicatorType):
        job_name = job_name.value
    return _BY_JOB.get(job_name)


def list_job_names() -> List[str]:
    return list(_BY_JOB.keys())


def backfill_indicators() -> List[IndicatorSpec]:
    """World Bank entries only. Exchange rates are daily snapshots with no history."""
    return [spec for spec in CATALOG if spec.source == SOURCE_WORLD_BANK]
