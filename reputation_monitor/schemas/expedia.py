from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from reputation_monitor.schemas.fields import as_str, first_field


class RegionNames(BaseModel):
    fullName: str | None = None
    shortName: str | None = None
    displayName: str | None = None
    primaryDisplayName: str | None = None


class HotelAddress(BaseModel):
    street: str | None = None
    city: str | None = None
    province: str | None = None


class RegionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ID_FIELDS: ClassVar[tuple[str, ...]] = ("hotelId", "gaiaId", "regionId")
    NAME_FIELDS: ClassVar[tuple[str, ...]] = ("primaryDisplayName", "shortName", "fullName")

    result_type: str | None = Field(None, alias="@type")
    type: str | None = None
    hotelId: int | str | None = None
    gaiaId: int | str | None = None
    regionId: int | str | None = None
    regionNames: RegionNames | None = None
    hotelAddress: HotelAddress | None = None

    @property
    def is_hotel(self) -> bool:
        return self.result_type == "gaiaHotelResult" or self.type == "HOTEL"

    @property
    def resolved_id(self) -> str | None:
        return as_str(first_field(self, self.ID_FIELDS))

    @property
    def name(self) -> str:
        return first_field(self.regionNames, self.NAME_FIELDS) or ""


class RegionsResponse(BaseModel):
    data: list[RegionResult] = []


class RawValue(BaseModel):
    raw: float | None = None


class ReviewSummary(BaseModel):
    averageOverallRating: RawValue | None = None
    totalCount: RawValue | None = None
    cleanliness: RawValue | None = None
    hotelCondition: RawValue | None = None
    roomComfort: RawValue | None = None
    serviceAndStaff: RawValue | None = None
    propertyId: str | None = None

    @property
    def overall(self) -> float | None:
        return self.averageOverallRating.raw if self.averageOverallRating else None

    @property
    def total(self) -> int | None:
        if self.totalCount and self.totalCount.raw:
            return int(self.totalCount.raw)
        return None

    def sub_scores(self) -> dict[str, float | None]:
        return {
            name: value.raw if value else None
            for name, value in (
                ("cleanliness", self.cleanliness),
                ("hotelCondition", self.hotelCondition),
                ("roomComfort", self.roomComfort),
                ("serviceAndStaff", self.serviceAndStaff),
            )
        }
