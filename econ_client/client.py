from datetime import date

import pandas as pd
from sqlalchemy.engine import Engine

from econ_pipeline.db.queries import LATEST_VALUES_QUERY, VERSION_CHAIN_QUERY


class EconClient:
    """Read helper. Only the latest data_version of each key is ever returned by latest()/history()."""

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            from econ_pipeline.db.connection import engine
        self.engine = engine

    def latest(self, indicator_id: str, country_code: str | None = None) -> pd.DataFrame:
        with self.engine.connect() as conn:
            rows = conn.execute(
                LATEST_VALUES_QUERY,
                {"indicator_id": indicator_id, "country_code": country_code},
            ).fetchall()

        return pd.DataFrame(
            rows,
            columns=["country_code", "effective_date", "value", "data_version", "fetched_at"],
        )

    def history(self, country_code: str, indicator_id: str) -> pd.DataFrame:
        df = self.latest(indicator_id, country_code=country_code)
        df = df.drop(columns=["country_code"])
        df["effective_date"] = pd.to_datetime(df["effective_date"])
        df.set_index("effective_date", inplace=True)
        return df

    def versions(
        self,
        country_code: str,
        indicator_id: str,
        effective_date: str | date,
    ) -> pd.DataFrame:
        if isinstance(effective_date, str):
            effective_date = date.fromisoformat(effective_date)

        with self.engine.connect() as conn:
            rows = conn.execute(
                VERSION_CHAIN_QUERY,
                {
                    "country_code": country_code,
                    "indicator_id": indicator_id,
                    "effective_date": effective_date,
                },
            ).fetchall()

        return pd.DataFrame(rows, columns=["data_version", "value", "fetched_at"])
