import logging
from abc import ABC, abstractmethod
from typing import Protocol

from pydantic import ValidationError

from reputation_monitor.exceptions.custom import ChannelAPIError, RateLimitError
from reputation_monitor.schemas.channels import (
    CHANNEL_LABELS,
    Channel,
    ChannelFetchResult,
    ErrorKind,
)

logger = logging.getLogger(__name__)


class ChannelAdapter(Protocol):
    channel: Channel

    async def fetch_reviews(
        self, hotel_name: str, city: str | None, hint: str | None = None
    ) -> ChannelFetchResult: ...


def not_found_result(channel: Channel, message: str | None = None) -> ChannelFetchResult:
    return ChannelFetchResult(
        channel=channel,
        error=message or f"Hotel not found on {CHANNEL_LABELS[channel]}",
        error_kind=ErrorKind.not_found,
    )


def not_configured_result(channel: Channel, key_name: str) -> ChannelFetchResult:
    return ChannelFetchResult(
        channel=channel,
        error=f"{key_name} not configured",
        error_kind=ErrorKind.not_configured,
    )


def error_result(channel: Channel, exc: BaseException) -> ChannelFetchResult:
    """Turn a transport/parse failure into a per-channel error."""
    if isinstance(exc, RateLimitError):
        message = str(exc)
    elif isinstance(exc, ChannelAPIError):
        status = f" (status={exc.status_code})" if exc.status_code else ""
        message = f"{exc.label} error: {exc.message}{status}"
    elif isinstance(exc, ValidationError):
        message = f"Unexpected {CHANNEL_LABELS[channel]} response format"
    else:
        message = str(exc) or type(exc).__name__
    return ChannelFetchResult(channel=channel, error=message, error_kind=ErrorKind.upstream)


class ChannelService(ABC):
    """Common best-effort wrapper: ``fetch_reviews`` never raises.

    Subclasses implement ``_fetch`` and may raise freely from it.
    """

    channel: Channel

    async def fetch_reviews(
        self, hotel_name: str, city: str | None, hint: str | None = None
    ) -> ChannelFetchResult:
        try:
            return await self._fetch(hotel_name, city, hint)
        except Exception as exc:
            logger.exception("%s fetch failed for %s", CHANNEL_LABELS[self.channel], hotel_name)
            return error_result(self.channel, exc)

    @abstractmethod
    async def _fetch(
        self, hotel_name: str, city: str | None, hint: str | None
    ) -> ChannelFetchResult: ...
