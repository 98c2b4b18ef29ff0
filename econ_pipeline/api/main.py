from fastapi import FastAPI

from econ_pipeline.api.routes import admin, health, meta
from econ_pipeline.cache.response_cache import ResponseCache
from econ_pipeline.ingestion.backfill import BackfillProgress


def create_app(engine=None, cache=None, backfill=None) -> FastAPI:
    if engine is None:
        from econ_pipeline.db.connection import engine

    app = FastAPI(
        title="Economic Indicator Pipeline",
        version="0.1.0",
        description="Ingestion triggers and freshness metadata for indicator data",
    )
    app.state.engine = engine
    app.state.cache = cache if cache is not None else ResponseCache()
    app.state.backfill = backfill if backfill is not None else BackfillProgress()

    app.include_router(health.router)
    app.include_router(meta.router)
    app.include_router(admin.router)
    return app


app = create_app()
