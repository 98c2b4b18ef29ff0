from sqlalchemy import func, select, text

from econ_pipeline.db.connection import engine
from econ_pipeline.db.models import Country, Indicator
from econ_pipeline.utils.logger import logger

def test_db_connection():
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1"))
        logger.info(f"DB connection test result: {result.scalar()}")
        countries = conn.execute(select(func.count()).select_from(Country)).scalar()
        indicators = conn.execute(select(func.count()).select_from(Indicator)).scalar()
        logger.info(f"Reference data: {countries} countries, {indicators} indicators")

if __name__ == "__main__":
    test_db_connection()
