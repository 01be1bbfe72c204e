from pydantic import BaseModel


class DisplayName(BaseModel):
    text: str | None = None


class LocalizedText(BaseModel):
    text: str | None = None
    languageCode: str | None = None


class AuthorAttribution(BaseModel):
    displayName: str | None = None


class GoogleReview(BaseModel):
    rating: float | None = None
    text: LocalizedText | None = None
    originalText: LocalizedText | None = None
    authorAttribution: AuthorAttribution | None = None
    relativePublishTimeDescription: str | None = None
    publishTime: str | None = None

    @property
    def body(self) -> str | None:
        for localized in (self.text, self.originalText):
            if localized and localized.text:
                return localized.text
        return None


class GooglePlace(BaseModel):
    id: str | None = None
    displayName: DisplayName | None = None
    formattedAddress: str | None = None
    types: list[str] = []
    rating: float | None = None
    userRatingCount: int | None = None
    googleMapsUri: str | None = None
    reviews: list[GoogleReview] = []

    @property
    def name(self) -> str | None:
        return self.displayName.text if self.displayName else None


class TextSearchResponse(BaseModel):
    places: list[GooglePlace] = []
