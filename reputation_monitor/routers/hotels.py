import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response

from reputation_monitor.dependencies import (
    GroupStoreDep,
    HotelStoreDep,
    SnapshotStoreDep,
    ThemeStoreDep,
)
from reputation_monitor.exceptions.custom import HotelNotFoundError
from reputation_monitor.mappers.scoring import channel_scores, weighted_average
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.hotels import (
    Hotel,
    HotelCreate,
    HotelWithScores,
    ReviewSnapshot,
)
from reputation_monitor.stores import HotelStore, SnapshotStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive query params are taken as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _get_or_404(hotels: HotelStore, hotel_id: str) -> Hotel:
    hotel = hotels.get(hotel_id)
    if hotel is None:
        raise HotelNotFoundError(hotel_id)
    return hotel


def hotel_with_scores(hotel: Hotel, snapshots: SnapshotStore) -> HotelWithScores:
    scores = channel_scores(snapshots.query(hotel.id))
    return HotelWithScores(hotel=hotel, scores=scores, weighted_average=weighted_average(scores))


@router.post("/hotels", response_model=Hotel, status_code=201)
async def create_hotel(data: HotelCreate, hotels: HotelStoreDep) -> Hotel:
    hotel = hotels.create(data)
    logger.info("Created hotel %s (%s)", hotel.name, hotel.id)
    return hotel


@router.get("/hotels", response_model=list[HotelWithScores])
async def list_hotels(
    hotels: HotelStoreDep, snapshots: SnapshotStoreDep
) -> list[HotelWithScores]:
    return [hotel_with_scores(hotel, snapshots) for hotel in hotels.list_all()]


@router.get("/hotels/{hotel_id}", response_model=Hotel)
async def get_hotel(hotel_id: str, hotels: HotelStoreDep) -> Hotel:
    return _get_or_404(hotels, hotel_id)


@router.delete("/hotels/{hotel_id}", status_code=204)
async def delete_hotel(
    hotel_id: str,
    hotels: HotelStoreDep,
    snapshots: SnapshotStoreDep,
    themes: ThemeStoreDep,
    groups: GroupStoreDep,
) -> Response:
    _get_or_404(hotels, hotel_id)
    removed = snapshots.delete_for_hotel(hotel_id)
    themes.delete_for_hotel(hotel_id)
    groups.remove_hotel(hotel_id)
    hotels.delete(hotel_id)
    logger.info("Deleted hotel %s and %d snapshots", hotel_id, removed)
    return Response(status_code=204)


@router.get("/hotels/{hotel_id}/scores", response_model=HotelWithScores)
async def get_scores(
    hotel_id: str, hotels: HotelStoreDep, snapshots: SnapshotStoreDep
) -> HotelWithScores:
    return hotel_with_scores(_get_or_404(hotels, hotel_id), snapshots)


@router.get("/hotels/{hotel_id}/history", response_model=list[ReviewSnapshot])
async def get_history(
    hotel_id: str,
    hotels: HotelStoreDep,
    snapshots: SnapshotStoreDep,
    channel: Channel | None = None,
    after: datetime | None = None,
    before: datetime | None = None,
) -> list[ReviewSnapshot]:
    _get_or_404(hotels, hotel_id)
    return snapshots.query(
        hotel_id, channel=channel, after=_as_utc(after), before=_as_utc(before)
    )
