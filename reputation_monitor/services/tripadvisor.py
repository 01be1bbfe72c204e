import logging
import re

from reputation_monitor.exceptions.custom import TripAdvisorError
from reputation_monitor.mappers.name_matching import match_confidence
from reputation_monitor.mappers.scoring import normalize_score
from reputation_monitor.schemas.channels import (
    Channel,
    ChannelFetchResult,
    Confidence,
    ErrorKind,
)
from reputation_monitor.schemas.tripadvisor import (
    AutocompleteResponse,
    ReviewsListResponse,
    TypeaheadResult,
)
from reputation_monitor.services.channel import ChannelService, not_found_result
from reputation_monitor.services.rapidapi import RapidAPIService

logger = logging.getLogger(__name__)

# "Travel Advisor" API by APIDojo on RapidAPI
API_HOST = "travel-advisor.p.rapidapi.com"
AUTOCOMPLETE_PATH = "/locations/v2/auto-complete"
REVIEWS_PATH = "/reviews/list"

# There is no reliable aggregate endpoint, so the score is the mean of this many reviews
REVIEW_SAMPLE_SIZE = 25
STORED_SAMPLE_REVIEWS = 5

_REVIEW_URL_RE = re.compile(r"ShowUserReviews.*?-Reviews-")


def hotel_url_from_review(review_url: str | None, location_id: str) -> str:
    """Turn a review permalink into the hotel page URL."""
    if review_url:
        return _REVIEW_URL_RE.sub("Hotel_Review-", review_url).split("#", 1)[0]
    return f"https://www.tripadvisor.com/Hotel_Review-d{location_id}"


class TripAdvisorService(RapidAPIService, ChannelService):
    channel = Channel.tripadvisor
    host = API_HOST
    error_cls = TripAdvisorError

    async def search(
        self, hotel_name: str, city: str | None
    ) -> tuple[TypeaheadResult, str, Confidence] | None:
        """Search for a lodging location; return ``(result, location_id, confidence)`` or None."""
        query = f"{hotel_name} {city}" if city else hotel_name
        params = {"query": query, "lang": "en_US", "units": "mi"}

        data = AutocompleteResponse(**await self._get_json(AUTOCOMPLETE_PATH, params))
        candidates = [r for r in data.results if r.is_lodging]
        if not candidates:
            logger.info("No TripAdvisor lodging results for: %s", query)
            return None

        top = candidates[0]
        location_id = top.location_id
        if not location_id:
            return None

        confidence = match_confidence(hotel_name, top.name, len(candidates))
        logger.info("TripAdvisor match for '%s': '%s' (%s)", hotel_name, top.name, confidence)
        return top, location_id, confidence

    async def get_reviews(self, location_id: str) -> ReviewsListResponse:
        params = {
            "location_id": location_id,
            "limit": str(REVIEW_SAMPLE_SIZE),
            "currency": "USD",
            "lang": "en_US",
        }
        return ReviewsListResponse(**await self._get_json(REVIEWS_PATH, params))

    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult:
        found = await self.search(hotel_name, city)
        if found is None:
            return not_found_result(self.channel)
        top, location_id, confidence = found

        result = ChannelFetchResult(
            channel=self.channel,
            confidence=confidence,
            external_id=location_id,
            resolved_name=top.name or None,
        )

        reviews_data = await self.get_reviews(location_id)
        reviews = reviews_data.data[:REVIEW_SAMPLE_SIZE]
        total_results = reviews_data.total_results

        if not reviews:
            result.error = "No reviews found on TripAdvisor"
            result.error_kind = ErrorKind.no_data
            result.raw_response = {"location_id": location_id, "total_results": total_results}
            return result

        ratings = [r.rating_value for r in reviews if r.rating_value]
        if not ratings:
            result.error = "No rating data in TripAdvisor reviews"
            result.error_kind = ErrorKind.no_data
            result.raw_response = {"location_id": location_id, "total_results": total_results}
            return result

        average = sum(ratings) / len(ratings)

        result.average_score = round(average, 2)
        result.normalized_score = normalize_score(average, self.channel)
        result.total_reviews = total_results or len(ratings)
        result.url = hotel_url_from_review(reviews[0].url, location_id)
        result.raw_response = {
            "location_id": location_id,
            "reviews": [
                r.model_dump(exclude_none=True) for r in reviews[:STORED_SAMPLE_REVIEWS]
            ],
            "total_results": total_results,
            "calculated_average": average,
            "sample_size": len(ratings),
        }
        return result
