from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from reputation_monitor.schemas.channels import Channel


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class HotelCreate(BaseModel):
    name: str = Field(min_length=1)
    city: str | None = None
    state: str | None = None
    num_keys: int | None = Field(default=None, ge=0)
    hotel_type: str | None = None
    website_url: str | None = None
    tripadvisor_url: str | None = None
    expedia_url: str | None = None
    booking_url: str | None = None
    airbnb_url: str | None = None


class Hotel(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    city: str | None = None
    state: str | None = None
    num_keys: int | None = None
    hotel_type: str | None = None
    website_url: str | None = None
    google_place_id: str | None = None
    google_url: str | None = None
    tripadvisor_url: str | None = None
    expedia_url: str | None = None
    booking_url: str | None = None
    airbnb_url: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


# Hotel field holding the public URL of each channel
URL_FIELDS: dict[Channel, str] = {
    Channel.google: "google_url",
    Channel.tripadvisor: "tripadvisor_url",
    Channel.expedia: "expedia_url",
    Channel.booking: "booking_url",
    Channel.airbnb: "airbnb_url",
}


class ReviewSnapshot(BaseModel):
    id: str = Field(default_factory=_new_id)
    hotel_id: str
    channel: Channel
    average_score: float | None = None
    normalized_score: float | None = None
    total_reviews: int | None = None
    fetched_at: datetime = Field(default_factory=_now)
    raw_response: dict[str, Any] | None = None


class ChannelScore(BaseModel):
    average_score: float | None = None
    normalized_score: float | None = None
    total_reviews: int | None = None
    fetched_at: datetime | None = None

    @classmethod
    def from_snapshot(cls, snapshot: ReviewSnapshot) -> ChannelScore:
        return cls(
            average_score=snapshot.average_score,
            normalized_score=snapshot.normalized_score,
            total_reviews=snapshot.total_reviews,
            fetched_at=snapshot.fetched_at,
        )


class HotelWithScores(BaseModel):
    hotel: Hotel
    scores: dict[Channel, ChannelScore | None]
    weighted_average: float | None = None
