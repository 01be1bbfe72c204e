from typing import ClassVar

from pydantic import BaseModel

from reputation_monitor.schemas.fields import as_str, first_field


class AirbnbListing(BaseModel):
    ID_FIELDS: ClassVar[tuple[str, ...]] = ("id", "listing_id")
    RATING_FIELDS: ClassVar[tuple[str, ...]] = ("rating", "avgRating")
    COUNT_FIELDS: ClassVar[tuple[str, ...]] = ("reviewsCount", "reviews_count")

    id: int | str | None = None
    listing_id: int | str | None = None
    name: str | None = None
    city: str | None = None
    rating: float | None = None
    avgRating: float | None = None
    reviewsCount: int | None = None
    reviews_count: int | None = None
    url: str | None = None

    @property
    def resolved_id(self) -> str | None:
        return as_str(first_field(self, self.ID_FIELDS))

    @property
    def resolved_rating(self) -> float | None:
        for name in self.RATING_FIELDS:
            value = getattr(self, name)
            if value:
                return value
        return None

    @property
    def resolved_count(self) -> int | None:
        return first_field(self, self.COUNT_FIELDS) or None

    @property
    def listing_url(self) -> str | None:
        if self.url:
            return self.url
        listing_id = self.resolved_id
        return f"https://www.airbnb.com/rooms/{listing_id}" if listing_id else None


class SearchResponse(BaseModel):
    LIST_FIELDS: ClassVar[tuple[str, ...]] = ("results", "data")

    results: list[AirbnbListing] | None = None
    data: list[AirbnbListing] | None = None

    @property
    def listings(self) -> list[AirbnbListing]:
        return first_field(self, self.LIST_FIELDS) or []


class AirbnbReview(BaseModel):
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = ("comments", "text", "review")
    RATING_FIELDS: ClassVar[tuple[str, ...]] = ("rating", "stars")
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("createdAt", "created_at", "date")

    comments: str | None = None
    text: str | None = None
    review: str | None = None
    rating: float | None = None
    stars: float | None = None
    createdAt: str | None = None
    created_at: str | None = None
    date: str | None = None

    @property
    def body(self) -> str:
        return first_field(self, self.TEXT_FIELDS) or ""

    @property
    def rating_value(self) -> float | None:
        return first_field(self, self.RATING_FIELDS)

    @property
    def when(self) -> str:
        return first_field(self, self.DATE_FIELDS) or ""


class ReviewsResponse(BaseModel):
    RATING_FIELDS: ClassVar[tuple[str, ...]] = ("rating", "averageRating", "avg_rating")
    COUNT_FIELDS: ClassVar[tuple[str, ...]] = ("count", "totalCount", "reviews_count")
    LIST_FIELDS: ClassVar[tuple[str, ...]] = ("data", "reviews")

    rating: float | None = None
    averageRating: float | None = None
    avg_rating: float | None = None
    count: int | None = None
    totalCount: int | None = None
    reviews_count: int | None = None
    data: list[AirbnbReview] | None = None
    reviews: list[AirbnbReview] | None = None

    @property
    def aggregate_rating(self) -> float | None:
        for name in self.RATING_FIELDS:
            value = getattr(self, name)
            if value:
                return value
        return None

    @property
    def aggregate_count(self) -> int | None:
        return first_field(self, self.COUNT_FIELDS) or None

    @property
    def review_items(self) -> list[AirbnbReview]:
        return first_field(self, self.LIST_FIELDS) or []
