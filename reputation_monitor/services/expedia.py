"""Expedia / Hotels.com review data via the hotels-com-provider RapidAPI.

Flow:
  1. ``GET /v2/regions?query=...`` -> hotel id
  2. ``GET /v2/hotels/reviews/summary?hotel_id=...`` -> averageOverallRating (0-10), totalCount

The summary score is already on a 0-10 scale; it still goes through
``normalize_score`` (multiplier 1) so every channel is normalized the same way.
"""

import logging

from reputation_monitor.exceptions.custom import ExpediaError
from reputation_monitor.mappers.name_matching import names_contain
from reputation_monitor.mappers.scoring import normalize_score
from reputation_monitor.schemas.channels import (
    Channel,
    ChannelFetchResult,
    Confidence,
    ErrorKind,
)
from reputation_monitor.schemas.expedia import RegionResult, RegionsResponse, ReviewSummary
from reputation_monitor.services.channel import ChannelService, not_found_result
from reputation_monitor.services.rapidapi import RapidAPIService

logger = logging.getLogger(__name__)

API_HOST = "hotels-com-provider.p.rapidapi.com"
REGIONS_PATH = "/v2/regions"
SUMMARY_PATH = "/v2/hotels/reviews/summary"

# Medium confidence when the whole search returned at most this many results
_FEW_RESULTS = 5

_LOCALE_PARAMS = {"locale": "en_US", "domain": "US", "currency": "USD"}


def hotel_url(hotel_id: str) -> str:
    return f"https://www.hotels.com/ho{hotel_id}"


class ExpediaService(RapidAPIService, ChannelService):
    channel = Channel.expedia
    host = API_HOST
    error_cls = ExpediaError

    async def search(
        self, hotel_name: str, city: str | None
    ) -> tuple[RegionResult, str, Confidence] | None:
        query = f"{hotel_name}, {city}" if city else hotel_name
        data = await self._get_json(REGIONS_PATH, {"query": query, **_LOCALE_PARAMS})
        regions = RegionsResponse(**data) if isinstance(data, dict) else RegionsResponse()

        candidates = [r for r in regions.data if r.is_hotel]
        if not candidates:
            logger.info("No Expedia hotel results for: %s", query)
            return None

        top = candidates[0]
        hotel_id = top.resolved_id
        if not hotel_id:
            return None

        if names_contain(hotel_name, top.name):
            confidence = Confidence.high
        elif len(regions.data) <= _FEW_RESULTS:
            confidence = Confidence.medium
        else:
            confidence = Confidence.low
        logger.info("Expedia match for '%s': '%s' (%s)", hotel_name, top.name, confidence)
        return top, hotel_id, confidence

    async def get_review_summary(self, hotel_id: str) -> ReviewSummary | None:
        data = await self._get_json(SUMMARY_PATH, {"hotel_id": hotel_id, **_LOCALE_PARAMS})

        # Usually a one-element list, sometimes the object itself
        if isinstance(data, list):
            return ReviewSummary(**data[0]) if data and isinstance(data[0], dict) else None
        if isinstance(data, dict) and data.get("averageOverallRating"):
            return ReviewSummary(**data)
        return None

    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult:
        found = await self.search(hotel_name, city)
        if found is None:
            return not_found_result(self.channel)
        top, hotel_id, confidence = found

        url = hotel_url(hotel_id)
        listed_name = top.name or hotel_name
        result = ChannelFetchResult(
            channel=self.channel,
            url=url,
            confidence=confidence,
            external_id=hotel_id,
            resolved_name=top.name or None,
        )

        summary = await self.get_review_summary(hotel_id)
        if summary is None or summary.overall is None:
            result.error = "Could not fetch Expedia review summary"
            result.error_kind = ErrorKind.no_data
            result.raw_response = {
                "hotel_id": hotel_id,
                "hotel_name": listed_name,
                "expedia_url": url,
                "summary_response": summary.model_dump(exclude_none=True) if summary else None,
            }
            return result

        overall = summary.overall
        result.average_score = overall
        result.normalized_score = normalize_score(overall, self.channel)
        result.total_reviews = summary.total
        result.raw_response = {
            "hotel_id": hotel_id,
            "hotel_name": listed_name,
            "hotel_address": top.hotelAddress.model_dump(exclude_none=True) if top.hotelAddress else None,
            "expedia_url": url,
            "overall_score": overall,
            "total_reviews": summary.total,
            "sub_scores": summary.sub_scores(),
        }
        return result
