from typing import ClassVar

from pydantic import BaseModel

from reputation_monitor.schemas.fields import as_str, first_field


class DestinationResult(BaseModel):
    ID_FIELDS: ClassVar[tuple[str, ...]] = ("dest_id", "hotel_id", "id")
    NAME_FIELDS: ClassVar[tuple[str, ...]] = ("name", "label")

    dest_id: int | str | None = None
    hotel_id: int | str | None = None
    id: int | str | None = None
    name: str | None = None
    label: str | None = None
    search_type: str | None = None
    dest_type: str | None = None
    type: str | None = None
    city_name: str | None = None

    @property
    def is_hotel(self) -> bool:
        return (
            self.search_type == "hotel"
            or self.dest_type == "hotel"
            or self.type == "ho"
        )

    @property
    def resolved_id(self) -> str | None:
        return as_str(first_field(self, self.ID_FIELDS))

    @property
    def display_name(self) -> str:
        return first_field(self, self.NAME_FIELDS) or ""


class DestinationResponse(BaseModel):
    data: list[DestinationResult] = []


class BookingReview(BaseModel):
    # Hotel-level average on Booking's internal 0-4 scale, repeated on every review
    average_score: float | str | None = None
    review_score: float | str | None = None
    pros: str | None = None
    cons: str | None = None
    title: str | None = None
    date: str | None = None


class ReviewsData(BaseModel):
    result: list[BookingReview] = []
    count: int | None = None


class ReviewsResponse(BaseModel):
    data: ReviewsData | None = None

    @property
    def reviews(self) -> list[BookingReview]:
        return self.data.result if self.data else []

    @property
    def count(self) -> int | None:
        return self.data.count if self.data else None


class HotelDetailsData(BaseModel):
    hotel_id: int | str | None = None
    hotel_name: str | None = None
    review_nr: int | None = None
    url: str | None = None
    city: str | None = None


class HotelDetailsResponse(BaseModel):
    data: HotelDetailsData | None = None
