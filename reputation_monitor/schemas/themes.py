import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ThemeItem(BaseModel):
    theme: str
    summary: str = ""
    mention_count: int = 0


class ThemeAnalysis(BaseModel):
    positive_themes: list[ThemeItem] = []
    negative_themes: list[ThemeItem] = []


class ReviewTheme(ThemeAnalysis):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    hotel_id: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    model_used: str
    review_count: int = 0  # review snippets sent; 0 means inferred from scores


class ThemesRequest(BaseModel):
    hotel_id: str
