import logging

from fastapi import APIRouter, Response

from reputation_monitor.dependencies import GroupStoreDep, HotelStoreDep, SnapshotStoreDep
from reputation_monitor.exceptions.custom import GroupNotFoundError, HotelNotFoundError
from reputation_monitor.mappers.scoring import group_average
from reputation_monitor.routers.hotels import hotel_with_scores
from reputation_monitor.schemas.groups import (
    Group,
    GroupCreate,
    GroupMembers,
    GroupRename,
    GroupSummary,
    GroupWithScores,
)
from reputation_monitor.stores import GroupStore, HotelStore, SnapshotStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(groups: GroupStore, group_id: str) -> Group:
    group = groups.get(group_id)
    if group is None:
        raise GroupNotFoundError(group_id)
    return group


def _with_scores(
    group: Group, groups: GroupStore, hotels: HotelStore, snapshots: SnapshotStore
) -> GroupWithScores:
    members = [hotels.get(hotel_id) for hotel_id in groups.members(group.id)]
    scored = [hotel_with_scores(h, snapshots) for h in members if h is not None]
    return GroupWithScores(
        group=group,
        hotels=scored,
        weighted_average=group_average(h.weighted_average for h in scored),
    )


@router.post("/groups", response_model=Group, status_code=201)
async def create_group(data: GroupCreate, groups: GroupStoreDep) -> Group:
    group = groups.create(data)
    logger.info("Created group %s (%s)", group.name, group.id)
    return group


@router.get("/groups", response_model=list[GroupSummary])
async def list_groups(
    groups: GroupStoreDep, hotels: HotelStoreDep, snapshots: SnapshotStoreDep
) -> list[GroupSummary]:
    summaries = []
    for group in groups.list_all():
        detail = _with_scores(group, groups, hotels, snapshots)
        summaries.append(
            GroupSummary(
                group=group,
                hotel_count=len(detail.hotels),
                weighted_average=detail.weighted_average,
            )
        )
    return summaries


@router.get("/groups/{group_id}", response_model=GroupWithScores)
async def get_group(
    group_id: str,
    groups: GroupStoreDep,
    hotels: HotelStoreDep,
    snapshots: SnapshotStoreDep,
) -> GroupWithScores:
    return _with_scores(_get_or_404(groups, group_id), groups, hotels, snapshots)


@router.patch("/groups/{group_id}", response_model=Group)
async def rename_group(group_id: str, data: GroupRename, groups: GroupStoreDep) -> Group:
    _get_or_404(groups, group_id)
    return groups.rename(group_id, data.name)


@router.delete("/groups/{group_id}", status_code=204)
async def delete_group(group_id: str, groups: GroupStoreDep) -> Response:
    # Member hotels are kept
    _get_or_404(groups, group_id)
    groups.delete(group_id)
    logger.info("Deleted group %s", group_id)
    return Response(status_code=204)


@router.put("/groups/{group_id}/hotels", response_model=GroupWithScores)
async def set_group_hotels(
    group_id: str,
    data: GroupMembers,
    groups: GroupStoreDep,
    hotels: HotelStoreDep,
    snapshots: SnapshotStoreDep,
) -> GroupWithScores:
    group = _get_or_404(groups, group_id)
    for hotel_id in data.hotel_ids:
        if hotels.get(hotel_id) is None:
            raise HotelNotFoundError(hotel_id)

    members = groups.set_members(group_id, data.hotel_ids)
    logger.info("Group %s now has %d hotels", group_id, len(members))
    return _with_scores(group, groups, hotels, snapshots)


@router.delete("/groups/{group_id}/hotels/{hotel_id}", status_code=204)
async def remove_group_hotel(group_id: str, hotel_id: str, groups: GroupStoreDep) -> Response:
    _get_or_404(groups, group_id)
    if not groups.remove_member(group_id, hotel_id):
        raise HotelNotFoundError(hotel_id)
    return Response(status_code=204)
