import pytest

from reputation_monitor.exceptions.custom import AirbnbError
from reputation_monitor.schemas.channels import Channel, ChannelFetchResult, ErrorKind
from reputation_monitor.services.channel import ChannelService


class _Raising(ChannelService):
    channel = Channel.airbnb

    async def _fetch(self, hotel_name, city, hint):
        raise AirbnbError("bad gateway", status_code=502)


class _Echo(ChannelService):
    channel = Channel.google

    async def _fetch(self, hotel_name, city, hint):
        return ChannelFetchResult(channel=self.channel, resolved_name=hotel_name, external_id=hint)


def test_base_requires_fetch_hook():
    with pytest.raises(TypeError):
        ChannelService()


async def test_fetch_reviews_passes_result_through():
    result = await _Echo().fetch_reviews("Grand Plaza", "Austin", hint="place-1")

    assert result.resolved_name == "Grand Plaza"
    assert result.external_id == "place-1"


async def test_fetch_reviews_turns_errors_into_results():
    result = await _Raising().fetch_reviews("Grand Plaza", "Austin")

    assert result.channel == Channel.airbnb
    assert result.error == "Airbnb error: bad gateway (status=502)"
    assert result.error_kind == ErrorKind.upstream
