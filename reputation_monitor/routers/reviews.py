import asyncio
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from reputation_monitor.dependencies import BatchServiceDep, JobStoreDep, ReviewFetcherDep
from reputation_monitor.jobs import JobStore
from reputation_monitor.schemas.responses import (
    BatchFetchResponse,
    FetchReviewsResponse,
    JobStatusResponse,
    JobSubmittedResponse,
)
from reputation_monitor.services.batch import BatchFetchService

logger = logging.getLogger(__name__)

router = APIRouter()


class FetchReviewsRequest(BaseModel):
    hotel_id: str
    force: bool = False


class BatchFetchRequest(BaseModel):
    hotel_ids: list[str] | None = None
    force: bool = False


async def _run_batch(
    job_id: str,
    service: BatchFetchService,
    store: JobStore,
    hotel_ids: list[str],
    force: bool,
) -> None:
    store.mark_running(job_id)
    try:
        result = await service.run(hotel_ids=hotel_ids, force=force)
        store.mark_completed(job_id, result)
    except Exception as exc:
        logger.exception("Batch fetch job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/reviews", response_model=FetchReviewsResponse)
async def fetch_reviews(
    request: FetchReviewsRequest, fetcher: ReviewFetcherDep
) -> FetchReviewsResponse:
    return await fetcher.fetch(request.hotel_id, force=request.force)


@router.post("/reviews/batch", response_model=JobSubmittedResponse, status_code=202)
async def fetch_reviews_batch(
    service: BatchServiceDep,
    fetcher: ReviewFetcherDep,
    store: JobStoreDep,
    request: BatchFetchRequest | None = None,
) -> JobSubmittedResponse:
    request = request or BatchFetchRequest()
    fetcher.require_credentials()

    existing = store.has_active_job()
    if existing:
        return JSONResponse(content={
            "job_id": existing.job_id,
            "status": "already_running",
            "message": "A batch fetch is already running",
        })

    # Resolve ids now so hotels added mid-run are not picked up
    hotel_ids = service.resolve_hotel_ids(request.hotel_ids)
    job = store.create_job(hotel_count=len(hotel_ids))
    asyncio.create_task(_run_batch(job.job_id, service, store, hotel_ids, request.force))
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message=f"Batch fetch submitted for {len(hotel_ids)} hotels",
    )


@router.post("/reviews/batch/sync", response_model=BatchFetchResponse)
async def fetch_reviews_batch_sync(
    service: BatchServiceDep,
    request: BatchFetchRequest | None = None,
) -> BatchFetchResponse:
    request = request or BatchFetchRequest()
    return await service.run(hotel_ids=request.hotel_ids, force=request.force)


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump())
