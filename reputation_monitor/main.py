import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta

import httpx
from fastapi import FastAPI

from reputation_monitor.config import Settings
from reputation_monitor.exceptions.custom import (
    CredentialsMissingError,
    GroupNotFoundError,
    HotelNotFoundError,
    ThemeAnalysisError,
    ThemesNotConfiguredError,
)
from reputation_monitor.exceptions.handlers import (
    credentials_missing_handler,
    group_not_found_handler,
    hotel_not_found_handler,
    theme_analysis_error_handler,
    themes_not_configured_handler,
)
from reputation_monitor.jobs import JobStore
from reputation_monitor.routers.groups import router as groups_router
from reputation_monitor.routers.health import router as health_router
from reputation_monitor.routers.hotels import router as hotels_router
from reputation_monitor.routers.reviews import router as reviews_router
from reputation_monitor.routers.themes import router as themes_router
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.services.airbnb import AirbnbService
from reputation_monitor.services.batch import BatchFetchService
from reputation_monitor.services.booking import BookingService
from reputation_monitor.services.channel import ChannelAdapter
from reputation_monitor.services.claude import ClaudeService
from reputation_monitor.services.expedia import ExpediaService
from reputation_monitor.services.google_places import GooglePlacesService
from reputation_monitor.services.review_fetcher import ReviewFetchService
from reputation_monitor.services.themes import ThemeService
from reputation_monitor.services.tripadvisor import TripAdvisorService
from reputation_monitor.stores import (
    InMemoryGroupStore,
    InMemoryHotelStore,
    InMemorySnapshotStore,
    InMemoryThemeStore,
)

logger = logging.getLogger(__name__)


def build_adapters(
    client: httpx.AsyncClient, settings: Settings
) -> dict[Channel, ChannelAdapter]:
    adapters: dict[Channel, ChannelAdapter] = {}
    if settings.google_places_api_key:
        adapters[Channel.google] = GooglePlacesService(client, settings.google_places_api_key)
    if settings.rapidapi_key:
        adapters[Channel.tripadvisor] = TripAdvisorService(client, settings.rapidapi_key)
        adapters[Channel.expedia] = ExpediaService(client, settings.rapidapi_key)
        adapters[Channel.booking] = BookingService(client, settings.rapidapi_key)
        adapters[Channel.airbnb] = AirbnbService(client, settings.rapidapi_key)
    return adapters


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    capabilities = settings.capabilities()
    if capabilities.missing_keys:
        logger.warning("Missing API keys: %s", ", ".join(capabilities.missing_keys))

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        hotels = InMemoryHotelStore()
        snapshots = InMemorySnapshotStore()
        themes = InMemoryThemeStore()

        fetcher = ReviewFetchService(
            hotels,
            snapshots,
            build_adapters(client, settings),
            capabilities,
            cache_ttl=timedelta(hours=settings.cache_ttl_hours),
            cache_min_channels=settings.cache_min_channels,
        )

        app.state.settings = settings
        app.state.hotel_store = hotels
        app.state.snapshot_store = snapshots
        app.state.theme_store = themes
        app.state.group_store = InMemoryGroupStore()
        app.state.review_fetcher = fetcher
        app.state.batch_service = BatchFetchService(
            fetcher,
            hotels,
            batch_size=settings.batch_size,
            batch_delay=settings.batch_delay_seconds,
        )
        app.state.job_store = JobStore()

        # Theme analysis (conditional on the Anthropic key)
        if settings.anthropic_api_key:
            app.state.theme_service = ThemeService(
                ClaudeService(settings.anthropic_api_key), hotels, snapshots, themes
            )
        else:
            app.state.theme_service = None

        yield


app = FastAPI(title="Reputation Monitor", lifespan=lifespan)

app.add_exception_handler(CredentialsMissingError, credentials_missing_handler)
app.add_exception_handler(HotelNotFoundError, hotel_not_found_handler)
app.add_exception_handler(GroupNotFoundError, group_not_found_handler)
app.add_exception_handler(ThemesNotConfiguredError, themes_not_configured_handler)
app.add_exception_handler(ThemeAnalysisError, theme_analysis_error_handler)

app.include_router(health_router)
app.include_router(hotels_router)
app.include_router(groups_router)
app.include_router(reviews_router)
app.include_router(themes_router)
