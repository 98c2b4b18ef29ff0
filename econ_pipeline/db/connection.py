from sqlalchemy import create_engine

from econ_pipeline.config.settings import settings

# one process-wide engine; components take it as an argument
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=10,
    pool_recycle=1800,
)
