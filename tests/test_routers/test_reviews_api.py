import asyncio

import respx
from httpx import AsyncClient, Response

GOOGLE_SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
GOOGLE_DETAILS_URL = "https://places.googleapis.com/v1/places/place-1"
TA_AUTOCOMPLETE_URL = "https://travel-advisor.p.rapidapi.com/locations/v2/auto-complete"
EXPEDIA_REGIONS_URL = "https://hotels-com-provider.p.rapidapi.com/v2/regions"
BOOKING_SEARCH_URL = "https://booking-com15.p.rapidapi.com/api/v1/hotels/searchDestination"
AIRBNB_SEARCH_URL = "https://airbnb13.p.rapidapi.com/search-location"


def _mock_upstreams():
    """Google finds the hotel; every RapidAPI channel comes back empty."""
    respx.post(GOOGLE_SEARCH_URL).mock(
        return_value=Response(
            200,
            json={
                "places": [
                    {
                        "id": "place-1",
                        "displayName": {"text": "The Grand Plaza Hotel"},
                        "types": ["lodging"],
                    }
                ]
            },
        )
    )
    respx.get(GOOGLE_DETAILS_URL).mock(
        return_value=Response(
            200,
            json={
                "id": "place-1",
                "displayName": {"text": "The Grand Plaza Hotel"},
                "rating": 4.2,
                "userRatingCount": 500,
                "googleMapsUri": "https://maps.google.com/?cid=1",
            },
        )
    )
    respx.get(TA_AUTOCOMPLETE_URL).mock(
        return_value=Response(200, json={"data": {"Typeahead_autocomplete": {"results": []}}})
    )
    respx.get(EXPEDIA_REGIONS_URL).mock(return_value=Response(200, json={"data": []}))
    respx.get(BOOKING_SEARCH_URL).mock(return_value=Response(200, json={"data": []}))
    respx.get(AIRBNB_SEARCH_URL).mock(return_value=Response(200, json={"results": []}))


async def _create_hotel(client: AsyncClient, name="Grand Plaza", city="Austin") -> str:
    resp = await client.post("/hotels", json={"name": name, "city": city})
    assert resp.status_code == 201
    return resp.json()["id"]


async def submit_and_wait(client: AsyncClient, json=None, timeout: float = 5.0):
    """POST /reviews/batch -> 202, then poll GET /jobs/{job_id} until terminal state."""
    resp = await client.post("/reviews/batch", json=json)
    assert resp.status_code == 202

    data = resp.json()
    job_id = data["job_id"]
    assert data["status"] == "pending"

    deadline = asyncio.get_event_loop().time() + timeout
    while asyncio.get_event_loop().time() < deadline:
        await asyncio.sleep(0.05)
        status_resp = await client.get(f"/jobs/{job_id}")
        assert status_resp.status_code == 200
        job = status_resp.json()
        if job["status"] in ("completed", "failed"):
            return job

    raise TimeoutError(f"Job {job_id} did not complete within {timeout}s")


@respx.mock
async def test_fetch_reviews_full_flow(client):
    _mock_upstreams()
    hotel_id = await _create_hotel(client)

    resp = await client.post("/reviews", json={"hotel_id": hotel_id})

    assert resp.status_code == 200
    data = resp.json()
    assert data["cached"] is False
    assert data["hotel_name"] == "The Grand Plaza Hotel"
    assert [r["channel"] for r in data["results"]] == [
        "google", "tripadvisor", "expedia", "booking", "airbnb",
    ]
    google = data["results"][0]
    assert google["normalized_score"] == 8.4
    assert google["confidence"] == "high"
    assert data["results"][1]["error"] == "Hotel not found on TripAdvisor"
    assert data["results"][4]["error"].startswith("Property not found on Airbnb")
    assert data["weighted_average"] == 8.4

    hotel = (await client.get(f"/hotels/{hotel_id}")).json()
    assert hotel["name"] == "The Grand Plaza Hotel"
    assert hotel["google_place_id"] == "place-1"
    assert hotel["google_url"] == "https://maps.google.com/?cid=1"

    scores = (await client.get(f"/hotels/{hotel_id}/scores")).json()
    assert scores["scores"]["google"]["normalized_score"] == 8.4
    assert scores["scores"]["booking"]["normalized_score"] is None
    assert scores["weighted_average"] == 8.4

    history = (await client.get(f"/hotels/{hotel_id}/history")).json()
    assert len(history) == 5


async def test_fetch_reviews_unknown_hotel(client):
    resp = await client.post("/reviews", json={"hotel_id": "missing"})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Hotel not found"}


async def test_fetch_reviews_without_any_keys(unconfigured_client):
    hotel_id = await _create_hotel(unconfigured_client)

    resp = await unconfigured_client.post("/reviews", json={"hotel_id": hotel_id})

    assert resp.status_code == 503
    data = resp.json()
    assert data["missing_keys"] == ["GOOGLE_PLACES_API_KEY", "RAPIDAPI_KEY"]
    assert data["results"] == []
    assert "GOOGLE_PLACES_API_KEY" in data["detail"]


@respx.mock
async def test_batch_job_flow(client):
    _mock_upstreams()
    await _create_hotel(client, name="Grand Plaza")
    await _create_hotel(client, name="Grand Plaza Annex")

    job = await submit_and_wait(client, json={"force": True})

    assert job["status"] == "completed"
    assert job["hotel_count"] == 2
    result = job["result"]
    assert result["total"] == 2
    assert result["succeeded"] == 2
    assert result["failed"] == 0
    assert all(r["channels_succeeded"] == 1 for r in result["results"])


@respx.mock
async def test_batch_sync(client):
    _mock_upstreams()
    hotel_id = await _create_hotel(client)

    resp = await client.post("/reviews/batch/sync", json={"hotel_ids": [hotel_id, "missing"]})

    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert data["succeeded"] == 1
    assert data["failed"] == 1
    assert data["message"].startswith("Some fetches failed")
    assert "Hotel not found: missing" in data["errors"][-1]


async def test_batch_without_any_keys(unconfigured_client):
    resp = await unconfigured_client.post("/reviews/batch")
    assert resp.status_code == 503


async def test_get_job_nonexistent(client):
    resp = await client.get("/jobs/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Job not found"
