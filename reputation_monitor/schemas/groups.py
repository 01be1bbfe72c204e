import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from reputation_monitor.schemas.hotels import HotelWithScores


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)


class GroupRename(BaseModel):
    name: str = Field(min_length=1)


class GroupMembers(BaseModel):
    hotel_ids: list[str]


class Group(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str
    created_at: datetime = Field(default_factory=_now)


class GroupSummary(BaseModel):
    group: Group
    hotel_count: int = 0
    weighted_average: float | None = None


class GroupWithScores(BaseModel):
    group: Group
    hotels: list[HotelWithScores] = []
    weighted_average: float | None = None
