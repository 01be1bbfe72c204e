import asyncio
import logging
from collections.abc import Sequence

from reputation_monitor.schemas.responses import (
    BatchFetchResponse,
    FetchReviewsResponse,
    HotelFetchSummary,
)
from reputation_monitor.services.review_fetcher import ReviewFetchService
from reputation_monitor.stores import HotelStore

logger = logging.getLogger(__name__)

BATCH_SIZE = 5
BATCH_DELAY = 1.0  # seconds between batches, to stay under upstream rate limits

RETRY_HINT = "Some fetches failed. Re-run with force=true to retry transient upstream errors."


def summarize(response: FetchReviewsResponse) -> HotelFetchSummary:
    """Per-hotel outcome: success if any channel scored, failed if none did."""
    if response.cached:
        return HotelFetchSummary(
            hotel_id=response.hotel_id,
            hotel_name=response.hotel_name,
            status="cached",
            weighted_average=response.weighted_average,
        )

    succeeded = [r for r in response.results if r.has_score]
    errors = [
        f"{response.hotel_name}: {r.channel}: {r.error}"
        for r in response.results if r.error
    ]
    return HotelFetchSummary(
        hotel_id=response.hotel_id,
        hotel_name=response.hotel_name,
        status="success" if succeeded else "failed",
        channels_succeeded=len(succeeded),
        errors=errors,
        weighted_average=response.weighted_average,
    )


class BatchFetchService:
    def __init__(
        self,
        fetcher: ReviewFetchService,
        hotels: HotelStore,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY,
    ):
        self._fetcher = fetcher
        self._hotels = hotels
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay

    def resolve_hotel_ids(self, hotel_ids: Sequence[str] | None) -> list[str]:
        """Explicit ids as given, or every stored hotel when none were named."""
        if hotel_ids is not None:
            return list(hotel_ids)
        return [h.id for h in self._hotels.list_all()]

    async def run(
        self, hotel_ids: Sequence[str] | None = None, force: bool = False
    ) -> BatchFetchResponse:
        self._fetcher.require_credentials()
        ids = self.resolve_hotel_ids(hotel_ids)
        summaries: list[HotelFetchSummary] = []

        for start in range(0, len(ids), self._batch_size):
            batch = ids[start:start + self._batch_size]
            logger.info(
                "Processing hotels %d-%d of %d", start + 1, start + len(batch), len(ids)
            )
            outcomes = await asyncio.gather(
                *(self._fetcher.fetch(hotel_id, force=force) for hotel_id in batch),
                return_exceptions=True,
            )

            for hotel_id, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.warning("Review fetch failed for hotel %s: %s", hotel_id, outcome)
                    summaries.append(self._failed(hotel_id, outcome))
                else:
                    summaries.append(summarize(outcome))

            if start + self._batch_size < len(ids):
                await asyncio.sleep(self._batch_delay)

        return self._build_response(summaries)

    def _failed(self, hotel_id: str, exc: BaseException) -> HotelFetchSummary:
        hotel = self._hotels.get(hotel_id)
        name = hotel.name if hotel else hotel_id
        return HotelFetchSummary(
            hotel_id=hotel_id,
            hotel_name=hotel.name if hotel else None,
            status="failed",
            errors=[f"{name}: {exc}"],
        )

    @staticmethod
    def _build_response(summaries: list[HotelFetchSummary]) -> BatchFetchResponse:
        succeeded = sum(1 for s in summaries if s.status == "success")
        cached = sum(1 for s in summaries if s.status == "cached")
        failed = sum(1 for s in summaries if s.status == "failed")
        errors = [e for s in summaries for e in s.errors]
        return BatchFetchResponse(
            total=len(summaries),
            succeeded=succeeded,
            cached=cached,
            failed=failed,
            results=summaries,
            errors=errors,
            message=RETRY_HINT if failed else None,
        )
