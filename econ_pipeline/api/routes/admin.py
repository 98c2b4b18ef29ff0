import secrets
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request

from econ_pipeline.config.indicators import backfill_indicators, get_indicator
from econ_pipeline.config.settings import settings
from econ_pipeline.ingestion.ledger import record_counts
from econ_pipeline.scheduler.jobs import run_all_ingestion, run_full_backfill, run_ingestion_job
from econ_pipeline.utils.logger import logger

router = APIRouter(prefix="/admin", tags=["admin"])


def require_secret(secret: Optional[str] = Query(None)) -> None:
    expected = settings.ADMIN_SECRET
    if not expected:
        logger.warning("ADMIN_SECRET not set - admin endpoints disabled")
        raise HTTPException(status_code=401, detail="Invalid or missing ADMIN_SECRET")
    if secret is None or not secrets.compare_digest(secret, expected):
        raise HTTPException(status_code=401, detail="Invalid or missing ADMIN_SECRET")


@router.post("/ingest", status_code=202, dependencies=[Depends(require_secret)])
def ingest_all(request: Request, background_tasks: BackgroundTasks):
    background_tasks.add_task(
        run_all_ingestion,
        engine=request.app.state.engine,
        cache=request.app.state.cache,
    )
    return {"status": "accepted", "message": "Ingestion started for all indicators"}


@router.post("/ingest/{job_name}", status_code=202, dependencies=[Depends(require_secret)])
def ingest_one(job_name: str, request: Request, background_tasks: BackgroundTasks):
    if get_indicator(job_name) is None:
        raise HTTPException(status_code=404, detail=f"Unknown indicator job: {job_name}")

    background_tasks.add_task(
        run_ingestion_job,
        job_name,
        engine=request.app.state.engine,
        cache=request.app.state.cache,
    )
    return {"status": "accepted", "job": job_name}


@router.get("/backfill/status")
def backfill_status(request: Request):
    return {
        "status": request.app.state.backfill.as_dict(),
        "record_counts": record_counts(request.app.state.engine),
    }


@router.post("/backfill", status_code=202, dependencies=[Depends(require_secret)])
def start_backfill(
    request: Request,
    background_tasks: BackgroundTasks,
    indicators: Optional[List[str]] = Query(
        default=None,
        description="Indicator types to backfill. Omit for every World Bank indicator.",
    ),
):
    progress = request.app.state.backfill
    if progress.running:
        raise HTTPException(status_code=409, detail="Backfill already in progress")

    available = {spec.job_name: spec for spec in backfill_indicators()}
    if indicators:
        unknown = [i for i in indicators if i not in available]
        if unknown:
            raise HTTPException(status_code=400, detail=f"Cannot backfill: {unknown}")
        selected = [available[i] for i in indicators]
    else:
        selected = list(available.values())

    # started here so a second request gets 409 and a cancel is kept before the task runs
    progress.start(len(selected))
    background_tasks.add_task(
        run_full_backfill,
        engine=request.app.state.engine,
        progress=progress,
        indicators=selected,
    )
    return {
        "status": "accepted",
        "indicators": [spec.job_name for spec in selected],
        "check_status": "/admin/backfill/status",
    }


@router.post("/backfill/cancel", dependencies=[Depends(require_secret)])
def cancel_backfill(request: Request):
    progress = request.app.state.backfill
    if not progress.running:
        raise HTTPException(status_code=400, detail="No backfill currently running")
    progress.cancel()
    return {"message": "Backfill cancellation requested"}
