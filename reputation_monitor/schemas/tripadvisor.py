from typing import ClassVar

from pydantic import BaseModel

from reputation_monitor.schemas.fields import as_str


class TypeaheadNames(BaseModel):
    name: str | None = None
    longOnlyHierarchyTypeaheadV2: str | None = None


class TypeaheadRoute(BaseModel):
    url: str | None = None


class TypeaheadDetails(BaseModel):
    locationId: int | str | None = None
    placeType: str | None = None
    names: TypeaheadNames | None = None
    route: TypeaheadRoute | None = None


class TypeaheadResult(BaseModel):
    LODGING_PLACE_TYPE: ClassVar[str] = "ACCOMMODATION"

    documentId: str | None = None
    detailsV2: TypeaheadDetails | None = None

    @property
    def is_lodging(self) -> bool:
        return bool(self.detailsV2 and self.detailsV2.placeType == self.LODGING_PLACE_TYPE)

    @property
    def location_id(self) -> str | None:
        """``detailsV2.locationId`` first, then ``documentId`` without its ``loc;`` prefix."""
        if self.detailsV2 and (location_id := as_str(self.detailsV2.locationId)):
            return location_id
        if self.documentId:
            return self.documentId.removeprefix("loc;") or None
        return None

    @property
    def name(self) -> str:
        if self.detailsV2 and self.detailsV2.names and self.detailsV2.names.name:
            return self.detailsV2.names.name
        return ""


class TypeaheadAutocomplete(BaseModel):
    results: list[TypeaheadResult] = []


class AutocompleteData(BaseModel):
    Typeahead_autocomplete: TypeaheadAutocomplete | None = None


class AutocompleteResponse(BaseModel):
    data: AutocompleteData | None = None

    @property
    def results(self) -> list[TypeaheadResult]:
        if self.data and self.data.Typeahead_autocomplete:
            return self.data.Typeahead_autocomplete.results
        return []


class TripAdvisorReview(BaseModel):
    rating: str | float | None = None
    title: str | None = None
    text: str | None = None
    url: str | None = None
    published_date: str | None = None

    @property
    def rating_value(self) -> float | None:
        if self.rating is None or self.rating == "":
            return None
        try:
            return float(self.rating)
        except (TypeError, ValueError):
            return None


class Paging(BaseModel):
    total_results: str | int | None = None
    results: str | int | None = None


class ReviewsListResponse(BaseModel):
    data: list[TripAdvisorReview] = []
    paging: Paging | None = None

    @property
    def total_results(self) -> int:
        if not self.paging or self.paging.total_results in (None, ""):
            return 0
        try:
            return int(self.paging.total_results)
        except (TypeError, ValueError):
            return 0
