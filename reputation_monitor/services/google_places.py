import logging

import httpx

from reputation_monitor.exceptions.custom import GooglePlacesError, RateLimitError
from reputation_monitor.mappers.name_matching import match_confidence
from reputation_monitor.mappers.scoring import normalize_score
from reputation_monitor.schemas.channels import (
    Channel,
    ChannelFetchResult,
    Confidence,
    ErrorKind,
)
from reputation_monitor.schemas.google_places import GooglePlace, TextSearchResponse
from reputation_monitor.services.channel import ChannelService, not_found_result

logger = logging.getLogger(__name__)

SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
DETAILS_URL = "https://places.googleapis.com/v1/places"

FIELD_MASK = (
    "places.id,"
    "places.displayName,"
    "places.formattedAddress,"
    "places.types,"
    "places.rating,"
    "places.userRatingCount"
)

DETAILS_FIELD_MASK = (
    "id,"
    "displayName,"
    "rating,"
    "userRatingCount,"
    "googleMapsUri,"
    "reviews"
)

LODGING_TYPE = "lodging"


def build_search_query(name: str | None, city: str | None = None) -> str:
    parts = [p for p in (name, city) if p]
    return ", ".join(parts)


class GooglePlacesService(ChannelService):
    channel = Channel.google

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self._client = client
        self._api_key = api_key

    async def text_search(self, query: str) -> list[GooglePlace]:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }
        payload = {"textQuery": query}

        resp = await self._client.post(SEARCH_URL, json=payload, headers=headers)

        if resp.status_code == 429:
            raise RateLimitError("Google Places")
        if resp.status_code >= 400:
            raise GooglePlacesError(resp.text, status_code=resp.status_code)

        data = TextSearchResponse(**resp.json())
        if not data.places:
            logger.info("No results for query: %s", query)
        return data.places

    async def get_place_details(self, place_id: str) -> GooglePlace:
        headers = {
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": DETAILS_FIELD_MASK,
        }

        resp = await self._client.get(f"{DETAILS_URL}/{place_id}", headers=headers)

        if resp.status_code == 429:
            raise RateLimitError("Google Places")
        if resp.status_code >= 400:
            raise GooglePlacesError(resp.text, status_code=resp.status_code)

        return GooglePlace(**resp.json())

    async def find_place(
        self, hotel_name: str, city: str | None
    ) -> tuple[str, Confidence] | None:
        """Search by name + city and return ``(place_id, confidence)`` for the top lodging result."""
        places = await self.text_search(build_search_query(hotel_name, city))
        candidates = [p for p in places if p.id and (not p.types or LODGING_TYPE in p.types)]
        if not candidates:
            return None

        top = candidates[0]
        # Google only counts as "few" when it returned a single candidate
        confidence = match_confidence(hotel_name, top.name or "", len(candidates), few_candidates=1)
        logger.info(
            "Google match for '%s': '%s' (%s, %d candidates)",
            hotel_name, top.name, confidence, len(candidates),
        )
        return top.id, confidence

    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult:
        place_id = hint
        confidence = Confidence.high

        if not place_id:
            found = await self.find_place(hotel_name, city)
            if found is None:
                return not_found_result(self.channel)
            place_id, confidence = found

        try:
            details = await self.get_place_details(place_id)
        except GooglePlacesError as exc:
            logger.warning("Google details failed for %s: %s", place_id, exc.message)
            return ChannelFetchResult(
                channel=self.channel,
                error="Could not fetch place details",
                error_kind=ErrorKind.upstream,
                external_id=place_id,
            )

        result = ChannelFetchResult(
            channel=self.channel,
            url=details.googleMapsUri,
            confidence=confidence,
            external_id=place_id,
            resolved_name=details.name,
            raw_response={
                "place_id": place_id,
                "details": details.model_dump(exclude_none=True),
            },
        )
        if details.rating is None:
            result.error = "No rating data available on Google"
            result.error_kind = ErrorKind.no_data
            return result

        result.average_score = details.rating
        result.normalized_score = normalize_score(details.rating, self.channel)
        result.total_reviews = details.userRatingCount
        return result
