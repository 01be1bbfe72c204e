import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from reputation_monitor.config import ChannelCapabilities
from reputation_monitor.exceptions.custom import CredentialsMissingError, HotelNotFoundError
from reputation_monitor.mappers.scoring import channel_scores, weighted_average
from reputation_monitor.schemas.channels import (
    CHANNEL_LABELS,
    Channel,
    ChannelFetchResult,
    Confidence,
)
from reputation_monitor.schemas.hotels import URL_FIELDS, Hotel, ReviewSnapshot
from reputation_monitor.schemas.responses import FetchReviewsResponse
from reputation_monitor.services.channel import (
    ChannelAdapter,
    error_result,
    not_configured_result,
)
from reputation_monitor.stores import HotelStore, SnapshotStore

logger = logging.getLogger(__name__)

# Channels fetched after Google, with the Google-resolved name
PARALLEL_CHANNELS: tuple[Channel, ...] = (
    Channel.tripadvisor,
    Channel.expedia,
    Channel.booking,
    Channel.airbnb,
)

# Google matches trusted enough to rename the hotel
_RENAME_CONFIDENCE = frozenset({Confidence.high, Confidence.medium})

CACHED_MESSAGE = "Reviews were recently fetched. Use force=true to refresh."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewFetchService:
    """Fetch all channels for one hotel and append the results as snapshots.

    Google runs first so its authoritative name can be used for the other four
    searches, which then run concurrently. A channel failing, at any stage,
    only affects that channel's entry in the response.
    """

    def __init__(
        self,
        hotels: HotelStore,
        snapshots: SnapshotStore,
        adapters: Mapping[Channel, ChannelAdapter],
        capabilities: ChannelCapabilities,
        cache_ttl: timedelta = timedelta(hours=24),
        cache_min_channels: int = 3,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._hotels = hotels
        self._snapshots = snapshots
        self._adapters = adapters
        self._capabilities = capabilities
        self._cache_ttl = cache_ttl
        self._cache_min_channels = cache_min_channels
        self._clock = clock

    def is_cached(self, hotel_id: str) -> bool:
        """True when enough channels have a scored snapshot inside the cache window."""
        since = self._clock() - self._cache_ttl
        recent = self._snapshots.query(hotel_id, after=since)
        fresh_channels = {s.channel for s in recent if s.average_score is not None}
        return len(fresh_channels) >= self._cache_min_channels

    def require_credentials(self) -> None:
        if not self._capabilities.any_available:
            raise CredentialsMissingError(self._capabilities.missing_keys)

    async def fetch(self, hotel_id: str, force: bool = False) -> FetchReviewsResponse:
        self.require_credentials()

        hotel = self._hotels.get(hotel_id)
        if hotel is None:
            raise HotelNotFoundError(hotel_id)

        if not force and self.is_cached(hotel_id):
            logger.info("Skipping fetch for %s (%s): cache is fresh", hotel.name, hotel_id)
            return FetchReviewsResponse(
                hotel_id=hotel_id,
                hotel_name=hotel.name,
                cached=True,
                message=CACHED_MESSAGE,
                weighted_average=self.current_weighted_average(hotel_id),
            )

        google_result = await self._run_channel(
            Channel.google, hotel.name, hotel.city, hint=hotel.google_place_id
        )
        resolved_name = self._resolve_name(hotel, google_result)

        parallel_results = await asyncio.gather(
            *(self._run_channel(c, resolved_name, hotel.city) for c in PARALLEL_CHANNELS)
        )
        results = [google_result, *parallel_results]

        self._persist(hotel, results)

        return FetchReviewsResponse(
            hotel_id=hotel_id,
            hotel_name=resolved_name,
            results=results,
            weighted_average=self.current_weighted_average(hotel_id),
        )

    def current_weighted_average(self, hotel_id: str) -> float | None:
        return weighted_average(channel_scores(self._snapshots.query(hotel_id)))

    async def _run_channel(
        self, channel: Channel, hotel_name: str, city: str | None, hint: str | None = None
    ) -> ChannelFetchResult:
        """Run one adapter; never raises, whatever the adapter does."""
        adapter = self._adapters.get(channel)
        if adapter is None or not self._capabilities.is_available(channel):
            key_name = self._capabilities.missing.get(channel, "API key")
            return not_configured_result(channel, key_name)

        try:
            return await adapter.fetch_reviews(hotel_name, city, hint=hint)
        except Exception as exc:
            logger.exception("%s adapter raised for %s", CHANNEL_LABELS[channel], hotel_name)
            return error_result(channel, exc)

    def _resolve_name(self, hotel: Hotel, google_result: ChannelFetchResult) -> str:
        """Name to search the other channels with; persisted when Google renamed the hotel."""
        name = google_result.resolved_name
        if not name or google_result.confidence not in _RENAME_CONFIDENCE:
            return hotel.name
        if name != hotel.name:
            try:
                self._hotels.update(hotel.id, {"name": name})
                logger.info("Renamed hotel %s: '%s' -> '%s'", hotel.id, hotel.name, name)
            except Exception:
                logger.exception("Failed to persist resolved name for hotel %s", hotel.id)
        return name

    def _persist(self, hotel: Hotel, results: list[ChannelFetchResult]) -> None:
        updates: dict[str, Any] = {}

        for result in results:
            if not result.is_config_error:
                try:
                    self._snapshots.insert(
                        ReviewSnapshot(
                            hotel_id=hotel.id,
                            channel=result.channel,
                            average_score=result.average_score,
                            normalized_score=result.normalized_score,
                            total_reviews=result.total_reviews,
                            fetched_at=self._clock(),
                            raw_response=result.raw_response,
                        )
                    )
                except Exception:
                    logger.exception(
                        "Failed to store %s snapshot for hotel %s", result.channel, hotel.id
                    )

            if result.url:
                updates[URL_FIELDS[result.channel]] = result.url
            if (
                result.channel == Channel.google
                and result.external_id
                and not hotel.google_place_id
            ):
                updates["google_place_id"] = result.external_id

        if not updates:
            return
        try:
            self._hotels.update(hotel.id, updates)
        except Exception:
            logger.exception("Failed to update channel URLs for hotel %s", hotel.id)
