import asyncio
import logging
from datetime import date, timedelta

from reputation_monitor.exceptions.custom import BookingError, RateLimitError
from reputation_monitor.mappers.name_matching import match_confidence
from reputation_monitor.mappers.scoring import normalize_score
from reputation_monitor.schemas.booking import (
    DestinationResponse,
    DestinationResult,
    HotelDetailsResponse,
    ReviewsResponse,
)
from reputation_monitor.schemas.channels import (
    Channel,
    ChannelFetchResult,
    Confidence,
    ErrorKind,
)
from reputation_monitor.services.channel import ChannelService, not_found_result
from reputation_monitor.services.rapidapi import RapidAPIService

logger = logging.getLogger(__name__)

API_HOST = "booking-com15.p.rapidapi.com"
SEARCH_PATH = "/api/v1/hotels/searchDestination"
REVIEWS_PATH = "/api/v1/hotels/getHotelReviews"
DETAILS_PATH = "/api/v1/hotels/getHotelDetails"
SITE_URL = "https://www.booking.com"

# The reviews API reports the hotel average on a 0-4 scale; booking.com shows 0-10
INTERNAL_TO_PUBLIC = 2.5
STORED_SAMPLE_REVIEWS = 3


def public_score(internal_score: float) -> float:
    """Convert Booking's internal 0-4 hotel average to the public 0-10 score (2.8 -> 7.0)."""
    return internal_score * INTERNAL_TO_PUBLIC


def hotel_page_url(path: str | None) -> str | None:
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{SITE_URL}{'' if path.startswith('/') else '/'}{path}"


class BookingService(RapidAPIService, ChannelService):
    channel = Channel.booking
    host = API_HOST
    error_cls = BookingError

    async def search(
        self, hotel_name: str, city: str | None
    ) -> tuple[DestinationResult, str, Confidence] | None:
        query = f"{hotel_name}, {city}" if city else hotel_name
        data = await self._get_json(SEARCH_PATH, {"query": query, "languagecode": "en-us"})
        if isinstance(data, list):
            data = {"data": data}
        destinations = DestinationResponse(**data)

        candidates = [d for d in destinations.data if d.is_hotel]
        if not candidates:
            logger.info("No Booking.com hotel results for: %s", query)
            return None

        top = candidates[0]
        hotel_id = top.resolved_id
        if not hotel_id:
            return None

        confidence = match_confidence(hotel_name, top.display_name, len(destinations.data))
        logger.info("Booking.com match for '%s': '%s' (%s)", hotel_name, top.display_name, confidence)
        return top, hotel_id, confidence

    async def get_reviews(self, hotel_id: str) -> ReviewsResponse:
        params = {
            "hotel_id": hotel_id,
            "languagecode": "en-us",
            "sort_type": "SORT_MOST_RELEVANT",
        }
        return ReviewsResponse(**await self._get_json(REVIEWS_PATH, params))

    async def get_hotel_details(self, hotel_id: str) -> HotelDetailsResponse:
        # Details require a stay window
        arrival = date.today() + timedelta(days=1)
        params = {
            "hotel_id": hotel_id,
            "arrival_date": arrival.isoformat(),
            "departure_date": (arrival + timedelta(days=1)).isoformat(),
            "languagecode": "en-us",
            "currency_code": "USD",
            "adults": "1",
            "room_qty": "1",
        }
        return HotelDetailsResponse(**await self._get_json(DETAILS_PATH, params))

    @staticmethod
    def _optional(label: str, hotel_id: str, outcome):
        """A failed secondary call counts as absent; rate limits still propagate."""
        if isinstance(outcome, RateLimitError):
            raise outcome
        if isinstance(outcome, Exception):
            logger.warning("Booking.com %s failed for hotel %s: %s", label, hotel_id, outcome)
            return None
        return outcome

    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult:
        found = await self.search(hotel_name, city)
        if found is None:
            return not_found_result(self.channel)
        top, hotel_id, confidence = found

        reviews_out, details_out = await asyncio.gather(
            self.get_reviews(hotel_id),
            self.get_hotel_details(hotel_id),
            return_exceptions=True,
        )
        reviews_resp = self._optional("reviews", hotel_id, reviews_out)
        details_resp = self._optional("details", hotel_id, details_out)

        details = details_resp.data if details_resp and details_resp.data else None
        reviews = reviews_resp.reviews if reviews_resp else []
        review_count = (details.review_nr if details else None) or (
            reviews_resp.count if reviews_resp else None
        )

        internal = None
        if reviews and reviews[0].average_score not in (None, ""):
            internal = float(reviews[0].average_score)

        result = ChannelFetchResult(
            channel=self.channel,
            confidence=confidence,
            external_id=hotel_id,
            resolved_name=(details.hotel_name if details else None) or top.display_name or None,
            url=hotel_page_url(details.url if details else None),
        )

        if not internal or internal <= 0:
            result.error = "No rating data available on Booking.com"
            result.error_kind = ErrorKind.no_data
            result.raw_response = {
                "hotel_id": hotel_id,
                "search_data": top.model_dump(exclude_none=True),
                "review_count": review_count,
            }
            return result

        score = public_score(internal)
        result.average_score = round(score, 2)
        result.normalized_score = normalize_score(score, self.channel)
        result.total_reviews = review_count or None
        result.raw_response = {
            "hotel_id": hotel_id,
            "hotel_name": details.hotel_name if details else None,
            "review_count": review_count,
            "booking_score": score,
            "raw_avg_score": internal,
            "sample_reviews": [
                r.model_dump(exclude_none=True) for r in reviews[:STORED_SAMPLE_REVIEWS]
            ],
        }
        return result
