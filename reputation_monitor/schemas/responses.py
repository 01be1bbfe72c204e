from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from reputation_monitor.schemas.channels import ChannelFetchResult


class FetchReviewsResponse(BaseModel):
    hotel_id: str
    hotel_name: str
    cached: bool = False
    message: str | None = None
    results: list[ChannelFetchResult] = []
    weighted_average: float | None = None


class HotelFetchSummary(BaseModel):
    hotel_id: str
    hotel_name: str | None = None
    status: str  # "success" | "cached" | "failed"
    channels_succeeded: int = 0
    errors: list[str] = []
    weighted_average: float | None = None


class BatchFetchResponse(BaseModel):
    total: int
    succeeded: int
    cached: int
    failed: int
    results: list[HotelFetchSummary]
    errors: list[str] = []
    message: str | None = None


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    created_at: datetime
    finished_at: datetime | None = None
    hotel_count: int = 0
    result: BatchFetchResponse | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    configured: bool
    keys: dict[str, bool]
    channels: dict[str, bool]
    missing_keys: list[str]
