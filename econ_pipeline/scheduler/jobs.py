from typing import Dict, List, Optional

from sqlalchemy.engine import Engine

import econ_pipeline.ingestion.adapters  # noqa: F401  (registers adapters)
from econ_pipeline.config.indicators import IndicatorSpec, backfill_indicators, list_job_names
from econ_pipeline.ingestion.adapters.world_bank import WorldBankAdapter
from econ_pipeline.ingestion.backfill import BackfillProgress, run_backfill
from econ_pipeline.ingestion.core.orchestrator import Orchestrator
from econ_pipeline.ingestion.core.registry import registry
from econ_pipeline.ingestion.country_registry import CountryRegistry
from econ_pipeline.ingestion.types import IngestionResult
from econ_pipeline.utils.logger import logger


def _default_engine(engine: Optional[Engine]) -> Engine:
    if engine is not None:
        return engine
    from econ_pipeline.db.connection import engine as default_engine
    return default_engine


def build_orchestrator(engine: Optional[Engine] = None, cache=None) -> Orchestrator:
    engine = _default_engine(engine)
    return Orchestrator(registry, engine, countries=CountryRegistry(engine), cache=cache)


# -----------------------------
# SCHEDULED / ON-DEMAND INGESTION
# -----------------------------
def run_ingestion_job(job_name: str, engine: Optional[Engine] = None, cache=None) -> Optional[IngestionResult]:
    """Scheduler entry point. Failures are already in the ledger; keep the scheduler alive."""
    logger.info(f"⏰ Running ingestion job {job_name}")
    try:
        return build_orchestrator(engine, cache).run(job_name)
    except Exception as e:
        logger.error(f"Ingestion job {job_name} failed: {e}")
        return None


def run_all_ingestion(engine: Optional[Engine] = None, cache=None) -> Dict[str, Optional[IngestionResult]]:
    logger.info("Starting all ingestion jobs...")
    return build_orchestrator(engine, cache).run_all(list_job_names())


# -----------------------------
# HISTORICAL BACKFILL
# -----------------------------
def run_full_backfill(
    engine: Optional[Engine] = None,
    progress: Optional[BackfillProgress] = None,
    indicators: Optional[List[IndicatorSpec]] = None,
) -> BackfillProgress:
    progress = progress if progress is not None else BackfillProgress()
    try:
        engine = _default_engine(engine)
        adapter = WorldBankAdapter()
    except Exception:
        # a route may have marked the progress running already
        progress.finish()
        raise
    return run_backfill(
        engine,
        adapter,
        indicators if indicators is not None else backfill_indicators(),
        progress=progress,
    )
