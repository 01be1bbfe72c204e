from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class Channel(StrEnum):
    google = "google"
    tripadvisor = "tripadvisor"
    expedia = "expedia"
    booking = "booking"
    airbnb = "airbnb"


# Fixed aggregation / reporting order
CHANNELS: tuple[Channel, ...] = (
    Channel.google,
    Channel.tripadvisor,
    Channel.expedia,
    Channel.booking,
    Channel.airbnb,
)

CHANNEL_LABELS: dict[Channel, str] = {
    Channel.google: "Google",
    Channel.tripadvisor: "TripAdvisor",
    Channel.expedia: "Expedia/Hotels.com",
    Channel.booking: "Booking.com",
    Channel.airbnb: "Airbnb",
}


class Confidence(StrEnum):
    high = "high"
    medium = "medium"
    low = "low"


class ErrorKind(StrEnum):
    not_configured = "not_configured"
    not_found = "not_found"
    no_data = "no_data"
    upstream = "upstream"


class ChannelFetchResult(BaseModel):
    channel: Channel
    average_score: float | None = None  # native scale
    normalized_score: float | None = None  # 0-10
    total_reviews: int | None = None
    url: str | None = None
    confidence: Confidence | None = None
    raw_response: dict[str, Any] | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    external_id: str | None = None  # place id / location id / listing id
    resolved_name: str | None = None  # name as listed on the channel

    @property
    def has_score(self) -> bool:
        return self.average_score is not None

    @property
    def is_config_error(self) -> bool:
        """True for a synthetic "not configured" result carrying no data."""
        return self.error_kind == ErrorKind.not_configured and not self.has_score
