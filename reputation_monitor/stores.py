"""Hotel, snapshot, theme and group storage.

The pipeline depends only on the ``*Store`` protocols; the in-memory
implementations back the default app and the tests. A database-backed store
only has to provide the same methods.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol

from reputation_monitor.exceptions.custom import GroupNotFoundError, HotelNotFoundError
from reputation_monitor.mappers.scoring import latest_by_channel
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.groups import Group, GroupCreate
from reputation_monitor.schemas.hotels import Hotel, HotelCreate, ReviewSnapshot
from reputation_monitor.schemas.themes import ReviewTheme

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class HotelStore(Protocol):
    def create(self, data: HotelCreate) -> Hotel: ...
    def get(self, hotel_id: str) -> Hotel | None: ...
    def list_all(self) -> list[Hotel]: ...
    def update(self, hotel_id: str, fields: dict[str, Any]) -> Hotel: ...
    def delete(self, hotel_id: str) -> bool: ...


class SnapshotStore(Protocol):
    def insert(self, snapshot: ReviewSnapshot) -> ReviewSnapshot: ...

    def query(
        self,
        hotel_id: str,
        channel: Channel | None = None,
        after: datetime | None = None,
        before: datetime | None = None,
    ) -> list[ReviewSnapshot]: ...

    def latest(self, hotel_id: str) -> dict[Channel, ReviewSnapshot]: ...
    def delete_for_hotel(self, hotel_id: str) -> int: ...


class GroupStore(Protocol):
    def create(self, data: GroupCreate) -> Group: ...
    def get(self, group_id: str) -> Group | None: ...
    def list_all(self) -> list[Group]: ...
    def rename(self, group_id: str, name: str) -> Group: ...
    def delete(self, group_id: str) -> bool: ...
    def members(self, group_id: str) -> list[str]: ...
    def set_members(self, group_id: str, hotel_ids: list[str]) -> list[str]: ...
    def remove_member(self, group_id: str, hotel_id: str) -> bool: ...
    def remove_hotel(self, hotel_id: str) -> int: ...


class ThemeStore(Protocol):
    def insert(self, theme: ReviewTheme) -> ReviewTheme: ...
    def latest(self, hotel_id: str) -> ReviewTheme | None: ...
    def delete_for_hotel(self, hotel_id: str) -> int: ...


class InMemoryHotelStore:
    def __init__(self) -> None:
        self._hotels: dict[str, Hotel] = {}

    def create(self, data: HotelCreate) -> Hotel:
        hotel = Hotel(**data.model_dump())
        self._hotels[hotel.id] = hotel
        return hotel

    def get(self, hotel_id: str) -> Hotel | None:
        return self._hotels.get(hotel_id)

    def list_all(self) -> list[Hotel]:
        return sorted(self._hotels.values(), key=lambda h: h.name.lower())

    def update(self, hotel_id: str, fields: dict[str, Any]) -> Hotel:
        """Apply a partial update; fields not named are left untouched."""
        hotel = self._hotels.get(hotel_id)
        if hotel is None:
            raise HotelNotFoundError(hotel_id)

        bad = _IMMUTABLE_FIELDS & fields.keys()
        if bad:
            raise ValueError(f"Cannot update {', '.join(sorted(bad))}")
        new_city = fields.get("city", hotel.city)
        if hotel.city and new_city != hotel.city:
            raise ValueError("City cannot be changed once set")

        updated = hotel.model_copy(
            update={**fields, "updated_at": datetime.now(timezone.utc)}
        )
        self._hotels[hotel_id] = updated
        return updated

    def delete(self, hotel_id: str) -> bool:
        return self._hotels.pop(hotel_id, None) is not None


class InMemorySnapshotStore:
    """Append-only: rows are never modified after insert."""

    def __init__(self) -> None:
        self._rows: list[ReviewSnapshot] = []

    def insert(self, snapshot: ReviewSnapshot) -> ReviewSnapshot:
        stored = snapshot.model_copy(deep=True)
        self._rows.append(stored)
        return stored.model_copy(deep=True)

    def query(
        self,
        hotel_id: str,
        channel: Channel | None = None,
        after: datetime | None = None,
        before: datetime | None = None,
    ) -> list[ReviewSnapshot]:
        """Matching snapshots, oldest first (insertion order breaks ties)."""
        rows = [
            row for row in self._rows
            if row.hotel_id == hotel_id
            and (channel is None or row.channel == channel)
            and (after is None or row.fetched_at >= after)
            and (before is None or row.fetched_at < before)
        ]
        # sorted() is stable, so same-timestamp rows keep insertion order
        return [row.model_copy(deep=True) for row in sorted(rows, key=lambda r: r.fetched_at)]

    def latest(self, hotel_id: str) -> dict[Channel, ReviewSnapshot]:
        return latest_by_channel(self.query(hotel_id))

    def delete_for_hotel(self, hotel_id: str) -> int:
        before = len(self._rows)
        self._rows = [row for row in self._rows if row.hotel_id != hotel_id]
        return before - len(self._rows)


class InMemoryThemeStore:
    def __init__(self) -> None:
        self._themes: list[ReviewTheme] = []

    def insert(self, theme: ReviewTheme) -> ReviewTheme:
        self._themes.append(theme)
        return theme

    def latest(self, hotel_id: str) -> ReviewTheme | None:
        matching = [t for t in self._themes if t.hotel_id == hotel_id]
        return max(matching, key=lambda t: t.generated_at) if matching else None

    def delete_for_hotel(self, hotel_id: str) -> int:
        before = len(self._themes)
        self._themes = [t for t in self._themes if t.hotel_id != hotel_id]
        return before - len(self._themes)


class InMemoryGroupStore:
    """Groups plus their hotel memberships; deleting a group leaves its hotels alone."""

    def __init__(self) -> None:
        self._groups: dict[str, Group] = {}
        self._members: dict[str, list[str]] = {}

    def create(self, data: GroupCreate) -> Group:
        group = Group(name=data.name.strip())
        self._groups[group.id] = group
        self._members[group.id] = []
        return group

    def get(self, group_id: str) -> Group | None:
        return self._groups.get(group_id)

    def list_all(self) -> list[Group]:
        return sorted(self._groups.values(), key=lambda g: g.name.lower())

    def rename(self, group_id: str, name: str) -> Group:
        group = self._require(group_id)
        renamed = group.model_copy(update={"name": name.strip()})
        self._groups[group_id] = renamed
        return renamed

    def delete(self, group_id: str) -> bool:
        self._members.pop(group_id, None)
        return self._groups.pop(group_id, None) is not None

    def members(self, group_id: str) -> list[str]:
        return list(self._members.get(group_id, []))

    def set_members(self, group_id: str, hotel_ids: list[str]) -> list[str]:
        """Replace the membership set; duplicates collapse, first occurrence wins."""
        self._require(group_id)
        self._members[group_id] = list(dict.fromkeys(hotel_ids))
        return self.members(group_id)

    def remove_member(self, group_id: str, hotel_id: str) -> bool:
        members = self._members.get(group_id, [])
        if hotel_id not in members:
            return False
        members.remove(hotel_id)
        return True

    def remove_hotel(self, hotel_id: str) -> int:
        removed = 0
        for members in self._members.values():
            if hotel_id in members:
                members.remove(hotel_id)
                removed += 1
        return removed

    def _require(self, group_id: str) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group
