from datetime import datetime, timezone

from fastapi import APIRouter, Request

from econ_pipeline.api.schemas import MetaResponse
from econ_pipeline.ingestion.ledger import last_updated, record_counts

router = APIRouter(prefix="/meta", tags=["meta"])

CACHE_KEY = "meta:last-updated"


@router.get("/last-updated", response_model=MetaResponse)
def get_last_updated(request: Request):
    cache = request.app.state.cache
    cached = cache.get(CACHE_KEY)
    if cached is not None:
        return cached

    engine = request.app.state.engine
    response = MetaResponse(
        last_ingestion=last_updated(engine),
        data_counts=record_counts(engine),
        server_time=datetime.now(timezone.utc),
    )
    cache.set(CACHE_KEY, response, kind="meta")
    return response
