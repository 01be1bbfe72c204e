from datetime import datetime, timezone

from reputation_monitor.main import app
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.hotels import ReviewSnapshot
from reputation_monitor.schemas.themes import ReviewTheme


def _snapshot(hotel_id, channel, day, score=8.0, reviews=100):
    return ReviewSnapshot(
        hotel_id=hotel_id,
        channel=channel,
        average_score=score,
        normalized_score=score,
        total_reviews=reviews,
        fetched_at=datetime(2025, 6, day, 12, 0, tzinfo=timezone.utc),
    )


async def test_create_and_get_hotel(client):
    resp = await client.post(
        "/hotels",
        json={"name": "Grand Plaza", "city": "Austin", "booking_url": "https://booking.com/x"},
    )
    assert resp.status_code == 201
    hotel = resp.json()
    assert hotel["name"] == "Grand Plaza"
    assert hotel["booking_url"] == "https://booking.com/x"
    assert hotel["google_place_id"] is None

    fetched = await client.get(f"/hotels/{hotel['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == hotel


async def test_create_hotel_with_details(client):
    resp = await client.post(
        "/hotels",
        json={
            "name": "Grand Plaza",
            "city": "Austin",
            "state": "TX",
            "num_keys": 240,
            "hotel_type": "Full Service",
        },
    )
    assert resp.status_code == 201
    hotel = resp.json()
    assert hotel["state"] == "TX"
    assert hotel["num_keys"] == 240
    assert hotel["hotel_type"] == "Full Service"

    bad = await client.post("/hotels", json={"name": "Grand Plaza", "num_keys": -1})
    assert bad.status_code == 422


async def test_create_hotel_requires_name(client):
    resp = await client.post("/hotels", json={"name": "", "city": "Austin"})
    assert resp.status_code == 422


async def test_get_unknown_hotel(client):
    resp = await client.get("/hotels/nope")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Hotel not found"}


async def test_list_hotels_with_scores(client):
    a = (await client.post("/hotels", json={"name": "Zephyr Inn"})).json()["id"]
    b = (await client.post("/hotels", json={"name": "Alpine Lodge"})).json()["id"]
    snapshots = app.state.snapshot_store
    snapshots.insert(_snapshot(a, Channel.google, 1, score=9.0, reviews=100))
    snapshots.insert(_snapshot(a, Channel.expedia, 1, score=8.0, reviews=300))

    resp = await client.get("/hotels")

    assert resp.status_code == 200
    data = resp.json()
    assert [h["hotel"]["id"] for h in data] == [b, a]
    assert data[0]["weighted_average"] is None
    assert data[1]["weighted_average"] == 8.25
    assert data[1]["scores"]["airbnb"] is None


async def test_scores_use_latest_snapshot(client):
    hotel_id = (await client.post("/hotels", json={"name": "Grand Plaza"})).json()["id"]
    snapshots = app.state.snapshot_store
    snapshots.insert(_snapshot(hotel_id, Channel.booking, 1, score=6.0))
    snapshots.insert(_snapshot(hotel_id, Channel.booking, 3, score=8.0))

    data = (await client.get(f"/hotels/{hotel_id}/scores")).json()

    assert data["scores"]["booking"]["normalized_score"] == 8.0
    assert data["weighted_average"] == 8.0


async def test_history_filters(client):
    hotel_id = (await client.post("/hotels", json={"name": "Grand Plaza"})).json()["id"]
    snapshots = app.state.snapshot_store
    for day in (1, 2, 3):
        snapshots.insert(_snapshot(hotel_id, Channel.google, day))
    snapshots.insert(_snapshot(hotel_id, Channel.booking, 2))

    all_rows = (await client.get(f"/hotels/{hotel_id}/history")).json()
    assert len(all_rows) == 4

    google = (await client.get(f"/hotels/{hotel_id}/history", params={"channel": "google"})).json()
    assert [r["channel"] for r in google] == ["google"] * 3

    # Naive timestamps are read as UTC
    window = (
        await client.get(
            f"/hotels/{hotel_id}/history",
            params={
                "channel": "google",
                "after": "2025-06-02T00:00:00",
                "before": "2025-06-03T00:00:00",
            },
        )
    ).json()
    assert len(window) == 1
    assert window[0]["fetched_at"].startswith("2025-06-02")


async def test_history_rejects_unknown_channel(client):
    hotel_id = (await client.post("/hotels", json={"name": "Grand Plaza"})).json()["id"]
    resp = await client.get(f"/hotels/{hotel_id}/history", params={"channel": "yelp"})
    assert resp.status_code == 422


async def test_delete_hotel_cascades(client):
    hotel_id = (await client.post("/hotels", json={"name": "Grand Plaza"})).json()["id"]
    app.state.snapshot_store.insert(_snapshot(hotel_id, Channel.google, 1))
    app.state.theme_store.insert(ReviewTheme(hotel_id=hotel_id, model_used="m"))

    resp = await client.delete(f"/hotels/{hotel_id}")

    assert resp.status_code == 204
    assert app.state.snapshot_store.query(hotel_id) == []
    assert app.state.theme_store.latest(hotel_id) is None
    assert (await client.get(f"/hotels/{hotel_id}")).status_code == 404


async def test_delete_hotel_removes_group_membership(client):
    hotel_id = (await client.post("/hotels", json={"name": "Grand Plaza"})).json()["id"]
    group_id = (await client.post("/groups", json={"name": "Austin"})).json()["id"]
    await client.put(f"/groups/{group_id}/hotels", json={"hotel_ids": [hotel_id]})

    await client.delete(f"/hotels/{hotel_id}")

    group = (await client.get(f"/groups/{group_id}")).json()
    assert group["hotels"] == []
    assert group["weighted_average"] is None


async def test_delete_unknown_hotel(client):
    resp = await client.delete("/hotels/nope")
    assert resp.status_code == 404
