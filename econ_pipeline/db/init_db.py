from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from econ_pipeline.config.indicators import CATALOG
from econ_pipeline.db.models import Base, Indicator
from econ_pipeline.utils.logger import logger


def seed_indicators(engine: Engine) -> int:
    """Insert catalog entries that are not in the table yet. Returns rows added."""
    with engine.begin() as conn:
        existing = set(conn.execute(select(Indicator.id)).scalars())
        missing = [
            {
                "id": spec.id,
                "indicator_type": spec.indicator_type.value,
                "source": spec.source,
                "source_indicator_code": spec.source_code,
                "name": spec.name,
                "unit": spec.unit,
            }
            for spec in CATALOG
            if spec.id not in existing
        ]
        if missing:
            conn.execute(insert(Indicator), missing)
    logger.info(f"Indicator catalog seeded: {len(missing)} new entries")
    return len(missing)


def init_database(engine: Engine | None = None):
    if engine is None:
        from econ_pipeline.db.connection import engine
    logger.info("Creating database tables if not exist...")
    Base.metadata.create_all(bind=engine)
    seed_indicators(engine)
    logger.info("Database schema ready.")

if __name__ == "__main__":
    init_database()
