"""Airbnb review data via airbnb13.p.rapidapi.com.

Flow:
  1. ``GET /search-location`` -> listings around the city
  2. ``GET /reviews`` -> aggregate rating, or individual ratings to average

Listings are only accepted when they share a significant name token with the
hotel; an unrelated short-term rental is worse than no answer, so there is no
fallback to the first search result.
"""

import logging

from reputation_monitor.exceptions.custom import AirbnbError
from reputation_monitor.mappers.name_matching import (
    match_confidence,
    names_contain,
    shares_significant_token,
)
from reputation_monitor.mappers.scoring import normalize_score
from reputation_monitor.schemas.airbnb import AirbnbListing, ReviewsResponse, SearchResponse
from reputation_monitor.schemas.channels import (
    Channel,
    ChannelFetchResult,
    Confidence,
    ErrorKind,
)
from reputation_monitor.services.channel import ChannelService, not_found_result
from reputation_monitor.services.rapidapi import RapidAPIService

logger = logging.getLogger(__name__)

API_HOST = "airbnb13.p.rapidapi.com"
SEARCH_PATH = "/search-location"
REVIEWS_PATH = "/reviews"

MAX_RATED_REVIEWS = 50
STORED_SAMPLE_REVIEWS = 10

NOT_FOUND_MESSAGE = "Property not found on Airbnb. Note: Many hotels do not list on Airbnb."


def select_listing(
    hotel_name: str, listings: list[AirbnbListing]
) -> tuple[AirbnbListing, Confidence] | None:
    """Pick the listing matching ``hotel_name``, or None when nothing plausibly matches."""
    accepted = [
        listing for listing in listings
        if listing.name and listing.resolved_id
        and shares_significant_token(hotel_name, listing.name)
    ]
    if not accepted:
        return None

    best = next((c for c in accepted if names_contain(hotel_name, c.name)), accepted[0])
    return best, match_confidence(hotel_name, best.name, len(accepted))


class AirbnbService(RapidAPIService, ChannelService):
    channel = Channel.airbnb
    host = API_HOST
    error_cls = AirbnbError

    async def search(self, hotel_name: str, city: str | None) -> tuple[AirbnbListing, Confidence] | None:
        params = {
            "location": city or hotel_name,
            "checkin": "",
            "checkout": "",
            "adults": "1",
            "page": "1",
        }
        data = await self._get_json(SEARCH_PATH, params)
        listings = SearchResponse(**data).listings if isinstance(data, dict) else []
        if not listings:
            logger.info("No Airbnb listings for location: %s", params["location"])
            return None

        selected = select_listing(hotel_name, listings)
        if selected is None:
            logger.info(
                "No Airbnb listing shares a name token with '%s' (%d listings), skipping",
                hotel_name, len(listings),
            )
        return selected

    async def get_reviews(self, listing_id: str) -> ReviewsResponse:
        data = await self._get_json(REVIEWS_PATH, {"id": listing_id, "page": "1"})
        return ReviewsResponse(**data) if isinstance(data, dict) else ReviewsResponse()

    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult:
        found = await self.search(hotel_name, city)
        if found is None:
            return not_found_result(self.channel, NOT_FOUND_MESSAGE)
        listing, confidence = found
        listing_id = listing.resolved_id

        result = ChannelFetchResult(
            channel=self.channel,
            url=listing.listing_url,
            confidence=confidence,
            external_id=listing_id,
            resolved_name=listing.name,
        )

        rating = listing.resolved_rating
        if rating:
            result.average_score = rating
            result.normalized_score = normalize_score(rating, self.channel)
            result.total_reviews = listing.resolved_count
            result.raw_response = {
                "listing_id": listing_id,
                "listing_name": listing.name,
                "source": "search",
                "rating": rating,
                "reviews_count": listing.resolved_count,
            }
            return result

        reviews_data = await self.get_reviews(listing_id)
        reviews = reviews_data.review_items[:MAX_RATED_REVIEWS]

        rating = reviews_data.aggregate_rating
        if not rating:
            ratings = [r.rating_value for r in reviews if r.rating_value and r.rating_value > 0]
            if ratings:
                rating = sum(ratings) / len(ratings)

        if not rating:
            result.error = "Airbnb listing found but no review data available"
            result.error_kind = ErrorKind.no_data
            result.raw_response = {"listing_id": listing_id, "listing_name": listing.name}
            return result

        count = reviews_data.aggregate_count or len(reviews) or None
        result.average_score = round(rating, 2)
        result.normalized_score = normalize_score(rating, self.channel)
        result.total_reviews = count
        result.raw_response = {
            "listing_id": listing_id,
            "listing_name": listing.name,
            "source": "reviews",
            "rating": round(rating, 2),
            "reviews_count": count,
            "sample_reviews": [
                {"text": r.body, "rating": r.rating_value, "date": r.when}
                for r in reviews[:STORED_SAMPLE_REVIEWS]
            ],
        }
        return result
