from typing import Annotated

from fastapi import Depends, Request

from reputation_monitor.config import Settings
from reputation_monitor.exceptions.custom import ThemesNotConfiguredError
from reputation_monitor.jobs import JobStore
from reputation_monitor.services.batch import BatchFetchService
from reputation_monitor.services.review_fetcher import ReviewFetchService
from reputation_monitor.services.themes import ThemeService
from reputation_monitor.stores import GroupStore, HotelStore, SnapshotStore, ThemeStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_hotel_store(request: Request) -> HotelStore:
    return request.app.state.hotel_store


def get_snapshot_store(request: Request) -> SnapshotStore:
    return request.app.state.snapshot_store


def get_theme_store(request: Request) -> ThemeStore:
    return request.app.state.theme_store


def get_group_store(request: Request) -> GroupStore:
    return request.app.state.group_store


def get_review_fetcher(request: Request) -> ReviewFetchService:
    return request.app.state.review_fetcher


def get_batch_service(request: Request) -> BatchFetchService:
    return request.app.state.batch_service


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_theme_service(request: Request) -> ThemeService:
    service = getattr(request.app.state, "theme_service", None)
    if service is None:
        raise ThemesNotConfiguredError()
    return service


SettingsDep = Annotated[Settings, Depends(get_settings)]
HotelStoreDep = Annotated[HotelStore, Depends(get_hotel_store)]
SnapshotStoreDep = Annotated[SnapshotStore, Depends(get_snapshot_store)]
ThemeStoreDep = Annotated[ThemeStore, Depends(get_theme_store)]
GroupStoreDep = Annotated[GroupStore, Depends(get_group_store)]
ReviewFetcherDep = Annotated[ReviewFetchService, Depends(get_review_fetcher)]
BatchServiceDep = Annotated[BatchFetchService, Depends(get_batch_service)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
ThemeServiceDep = Annotated[ThemeService, Depends(get_theme_service)]
