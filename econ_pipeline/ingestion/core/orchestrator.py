"""
Ingestion run lifecycle. Order must never change.
Adapters cannot alter it.

Every run that resolves to a catalog entry writes exactly one ledger row:
success, partial (validation errors), or failure (anything raised).
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.engine import Engine

from econ_pipeline.config.indicators import IndicatorSpec, get_indicator
from econ_pipeline.ingestion.core.base_adapter import BaseAdapter
from econ_pipeline.ingestion.core.registry import AdapterRegistry
from econ_pipeline.ingestion.errors import UnknownJobError
from econ_pipeline.ingestion.ledger import RunStatus, derive_status, record_run, summarize_errors
from econ_pipeline.ingestion.loader import upsert_indicator_values
from econ_pipeline.ingestion.types import FetchMode, IngestionResult
from econ_pipeline.utils.logger import logger


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Orchestrator:
    """
    Enforces the run lifecycle:
    resolve -> fetch -> upsert (one transaction) -> ledger -> cache invalidation.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        engine: Engine,
        countries: Any = None,
        cache: Any = None,
    ) -> None:
        self._registry = registry
        self._engine = engine
        self._countries = countries
        self._cache = cache

    def resolve(self, job_name: str) -> IndicatorSpec:
        spec = get_indicator(job_name)
        if spec is None:
            raise UnknownJobError(f"No indicator configured for job {job_name!r}")
        if self._registry.get(spec.source) is None:
            raise UnknownJobError(f"No adapter registered for source {spec.source!r}")
        return spec

    def build_adapter(self, spec: IndicatorSpec) -> BaseAdapter:
        adapter_cls = self._registry.get(spec.source)
        return adapter_cls(countries=self._countries)

    def run(self, job_name: str) -> IngestionResult:
        spec = self.resolve(job_name)
        started_at = _now()
        logger.info(f"Starting job: {spec.job_name}")

        try:
            # --- ORDER MUST NEVER CHANGE ---

            # 1. Fetch candidates (network only)
            adapter = self.build_adapter(spec)
            records = adapter.collect(spec.source_code, mode=FetchMode.LATEST)

            # 2. Versioned upsert, one transaction
            result = upsert_indicator_values(self._engine, spec.id, records, started_at)

        except Exception as e:
            logger.exception(f"Job {spec.job_name} failed: {e}")
            self._record_failure(spec.job_name, started_at, str(e) or type(e).__name__)
            raise
        except (KeyboardInterrupt, SystemExit):
            # transaction already rolled back by the context manager
            self._record_failure(spec.job_name, started_at, "Run interrupted before commit")
            raise

        # 3. Ledger
        status = derive_status(result)
        record_run(
            self._engine,
            spec.job_name,
            status,
            started_at,
            _now(),
            result,
            summarize_errors(result.errors),
        )

        # 4. Cache invalidation
        if self._cache is not None:
            self._cache.invalidate_indicators()

        logger.info(
            f"Job {spec.job_name} completed ({status.value}): inserted={result.inserted}, "
            f"updated={result.updated}, skipped={result.skipped}"
        )
        if result.errors:
            logger.warning(f"Job {spec.job_name} errors: {result.errors[:3]}")
        return result

    def _record_failure(self, job_name: str, started_at: datetime, message: str) -> None:
        try:
            record_run(
                self._engine,
                job_name,
                RunStatus.FAILURE,
                started_at,
                _now(),
                IngestionResult(),
                summarize_errors([message]),
            )
        except Exception as ledger_error:
            logger.error(f"Could not write failure ledger entry for {job_name}: {ledger_error}")

    def run_all(self, job_names: Iterable[str]) -> Dict[str, Optional[IngestionResult]]:
        """Run jobs in order. A failed job maps to None; the rest still run."""
        results: Dict[str, Optional[IngestionResult]] = {}
        for job_name in job_names:
            try:
                results[job_name] = self.run(job_name)
            except Exception:
                results[job_name] = None
        failed: List[str] = [name for name, r in results.items() if r is None]
        logger.info(f"Ran {len(results)} jobs, {len(failed)} failed {failed if failed else ''}".rstrip())
        return results
