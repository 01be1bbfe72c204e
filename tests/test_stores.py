from datetime import datetime, timedelta, timezone

import pytest

from reputation_monitor.exceptions.custom import GroupNotFoundError, HotelNotFoundError
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.groups import GroupCreate
from reputation_monitor.schemas.hotels import HotelCreate, ReviewSnapshot
from reputation_monitor.schemas.themes import ReviewTheme
from reputation_monitor.stores import (
    InMemoryGroupStore,
    InMemoryHotelStore,
    InMemorySnapshotStore,
    InMemoryThemeStore,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _snap(channel, hours_ago, score=8.0, hotel_id="h1"):
    return ReviewSnapshot(
        hotel_id=hotel_id,
        channel=channel,
        average_score=score,
        normalized_score=score,
        total_reviews=10,
        fetched_at=NOW - timedelta(hours=hours_ago),
    )


def test_hotel_partial_update_keeps_other_fields():
    store = InMemoryHotelStore()
    hotel = store.create(HotelCreate(name="Grand Plaza", city="Austin", booking_url="https://b.example"))

    updated = store.update(hotel.id, {"google_url": "https://g.example"})

    assert updated.google_url == "https://g.example"
    assert updated.booking_url == "https://b.example"
    assert updated.name == "Grand Plaza"
    assert updated.updated_at >= hotel.updated_at


def test_hotel_city_is_immutable_once_set():
    store = InMemoryHotelStore()
    hotel = store.create(HotelCreate(name="Grand Plaza", city="Austin"))

    with pytest.raises(ValueError):
        store.update(hotel.id, {"city": "Dallas"})
    # Same value is allowed
    store.update(hotel.id, {"city": "Austin"})


def test_hotel_city_can_be_set_when_empty():
    store = InMemoryHotelStore()
    hotel = store.create(HotelCreate(name="Grand Plaza"))
    assert store.update(hotel.id, {"city": "Austin"}).city == "Austin"


def test_hotel_id_cannot_change():
    store = InMemoryHotelStore()
    hotel = store.create(HotelCreate(name="Grand Plaza"))
    with pytest.raises(ValueError):
        store.update(hotel.id, {"id": "other"})


def test_hotel_update_unknown():
    with pytest.raises(HotelNotFoundError):
        InMemoryHotelStore().update("missing", {"name": "x"})


def test_hotel_list_and_delete():
    store = InMemoryHotelStore()
    b = store.create(HotelCreate(name="beta"))
    store.create(HotelCreate(name="Alpha"))
    assert [h.name for h in store.list_all()] == ["Alpha", "beta"]
    assert store.delete(b.id) is True
    assert store.delete(b.id) is False


def test_snapshot_query_filters_and_orders():
    store = InMemorySnapshotStore()
    store.insert(_snap(Channel.google, 1))
    store.insert(_snap(Channel.google, 48))
    store.insert(_snap(Channel.booking, 2))
    store.insert(_snap(Channel.google, 3, hotel_id="h2"))

    rows = store.query("h1")
    assert [r.fetched_at for r in rows] == sorted(r.fetched_at for r in rows)
    assert len(rows) == 3

    assert len(store.query("h1", channel=Channel.google)) == 2
    assert len(store.query("h1", after=NOW - timedelta(hours=24))) == 2
    assert len(store.query("h1", before=NOW - timedelta(hours=2))) == 1
    # after is inclusive, before is exclusive
    assert len(store.query("h1", after=NOW - timedelta(hours=2), before=NOW - timedelta(hours=1))) == 1


def test_snapshot_rows_cannot_be_mutated_through_results():
    store = InMemorySnapshotStore()
    store.insert(_snap(Channel.google, 1, score=8.0))

    store.query("h1")[0].normalized_score = 1.0

    assert store.query("h1")[0].normalized_score == 8.0


def test_snapshot_latest_per_channel():
    store = InMemorySnapshotStore()
    store.insert(_snap(Channel.google, 5, score=7.0))
    store.insert(_snap(Channel.google, 1, score=9.0))
    store.insert(_snap(Channel.expedia, 2, score=8.5))

    latest = store.latest("h1")
    assert latest[Channel.google].normalized_score == 9.0
    assert latest[Channel.expedia].normalized_score == 8.5


def test_snapshot_delete_for_hotel():
    store = InMemorySnapshotStore()
    store.insert(_snap(Channel.google, 1))
    store.insert(_snap(Channel.google, 1, hotel_id="h2"))
    assert store.delete_for_hotel("h1") == 1
    assert store.query("h1") == []
    assert len(store.query("h2")) == 1


def test_theme_store_latest():
    store = InMemoryThemeStore()
    older = store.insert(ReviewTheme(hotel_id="h1", model_used="m", generated_at=NOW - timedelta(days=1)))
    newer = store.insert(ReviewTheme(hotel_id="h1", model_used="m", generated_at=NOW))
    assert store.latest("h1") == newer
    assert store.latest("h1") != older
    assert store.latest("h2") is None
    assert store.delete_for_hotel("h1") == 2


def test_group_membership_replace_and_remove():
    store = InMemoryGroupStore()
    group = store.create(GroupCreate(name="  Texas portfolio "))
    assert group.name == "Texas portfolio"

    assert store.set_members(group.id, ["h1", "h2", "h1"]) == ["h1", "h2"]
    assert store.set_members(group.id, ["h3"]) == ["h3"]
    assert store.remove_member(group.id, "h3") is True
    assert store.remove_member(group.id, "h3") is False
    assert store.members(group.id) == []


def test_group_remove_hotel_touches_every_group():
    store = InMemoryGroupStore()
    a = store.create(GroupCreate(name="A"))
    b = store.create(GroupCreate(name="B"))
    store.set_members(a.id, ["h1", "h2"])
    store.set_members(b.id, ["h1"])

    assert store.remove_hotel("h1") == 2
    assert store.members(a.id) == ["h2"]
    assert store.members(b.id) == []


def test_group_rename_and_delete():
    store = InMemoryGroupStore()
    group = store.create(GroupCreate(name="Old"))

    assert store.rename(group.id, "New").name == "New"
    assert [g.name for g in store.list_all()] == ["New"]
    assert store.delete(group.id) is True
    assert store.get(group.id) is None
    with pytest.raises(GroupNotFoundError):
        store.set_members(group.id, ["h1"])
