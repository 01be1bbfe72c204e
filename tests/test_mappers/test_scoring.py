from datetime import datetime, timedelta, timezone

import pytest

from reputation_monitor.mappers.scoring import (
    channel_scores,
    group_average,
    latest_by_channel,
    normalize_score,
    weighted_average,
)
from reputation_monitor.schemas.channels import CHANNELS, Channel
from reputation_monitor.schemas.hotels import ChannelScore, ReviewSnapshot

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "channel, raw, expected",
    [
        (Channel.google, 4.5, 9.0),
        (Channel.tripadvisor, 4.21, 8.42),
        (Channel.expedia, 8.7, 8.7),
        (Channel.booking, 7.0, 7.0),
        (Channel.airbnb, 4.87, 9.74),
    ],
)
def test_normalize_score(channel, raw, expected):
    assert normalize_score(raw, channel) == expected


def test_normalize_is_idempotent_for_ten_point_scales():
    once = normalize_score(8.7, Channel.expedia)
    assert normalize_score(once, Channel.expedia) == once


def test_weighted_average_by_review_volume():
    scores = {
        Channel.google: ChannelScore(normalized_score=8.4, total_reviews=500),
        Channel.tripadvisor: ChannelScore(normalized_score=8.0, total_reviews=300),
        Channel.expedia: None,
        Channel.booking: ChannelScore(normalized_score=8.5, total_reviews=200),
        Channel.airbnb: None,
    }
    assert weighted_average(scores) == 8.3


def test_weighted_average_all_null():
    assert weighted_average({c: None for c in CHANNELS}) is None


def test_weighted_average_zero_weight_is_none_not_zero():
    scores = {
        Channel.google: ChannelScore(normalized_score=9.0, total_reviews=0),
        Channel.booking: ChannelScore(normalized_score=7.0, total_reviews=None),
    }
    assert weighted_average(scores) is None


def test_weighted_average_skips_channels_missing_a_field():
    scores = {
        Channel.google: ChannelScore(normalized_score=9.0, total_reviews=100),
        Channel.expedia: ChannelScore(normalized_score=None, total_reviews=5000),
    }
    assert weighted_average(scores) == 9.0


def _snap(channel, score, minutes_ago, reviews=10):
    return ReviewSnapshot(
        hotel_id="h1",
        channel=channel,
        average_score=score,
        normalized_score=score,
        total_reviews=reviews,
        fetched_at=NOW - timedelta(minutes=minutes_ago),
    )


def test_latest_by_channel_uses_max_fetched_at():
    older = _snap(Channel.expedia, 7.0, 60)
    newer = _snap(Channel.expedia, 8.0, 5)
    latest = latest_by_channel([newer, older])
    assert latest[Channel.expedia].average_score == 8.0


def test_latest_by_channel_tie_goes_to_later_row():
    first = _snap(Channel.booking, 7.0, 0)
    second = _snap(Channel.booking, 7.5, 0)
    assert latest_by_channel([first, second])[Channel.booking].average_score == 7.5


def test_channel_scores_has_every_channel():
    scores = channel_scores([_snap(Channel.google, 9.0, 1)])
    assert list(scores) == list(CHANNELS)
    assert scores[Channel.google].normalized_score == 9.0
    assert scores[Channel.airbnb] is None


def test_aggregate_ignores_history():
    # Only the latest snapshot per channel counts
    snapshots = [
        _snap(Channel.google, 2.0, 120, reviews=1000),
        _snap(Channel.google, 9.0, 1, reviews=100),
    ]
    assert weighted_average(channel_scores(snapshots)) == 9.0


def test_group_average_skips_unscored_hotels():
    assert group_average([8.0, None, 9.0]) == 8.5
    assert group_average([8.36, 7.1, 9.25]) == 8.24


def test_group_average_none_when_no_hotel_scored():
    assert group_average([]) is None
    assert group_average([None, None]) is None
