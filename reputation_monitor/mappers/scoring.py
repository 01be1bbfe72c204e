from collections.abc import Iterable, Mapping

from reputation_monitor.schemas.channels import CHANNELS, Channel
from reputation_monitor.schemas.hotels import ChannelScore, ReviewSnapshot

# Multiplier bringing each channel's native scale to 0-10.
# Booking's internal 0-4 value is converted (x2.5) inside its adapter,
# so it reaches the normalizer already on 0-10.
NORMALIZATION_FACTORS: dict[Channel, float] = {
    Channel.google: 2,
    Channel.tripadvisor: 2,
    Channel.expedia: 1,
    Channel.booking: 1,
    Channel.airbnb: 2,
}

CHANNEL_MAX_SCORES: dict[Channel, float] = {
    Channel.google: 5,
    Channel.tripadvisor: 5,
    Channel.expedia: 10,
    Channel.booking: 10,
    Channel.airbnb: 5,
}


def normalize_score(raw_score: float, channel: Channel) -> float:
    """Rescale a native channel score to 0-10, rounded to 2 decimals."""
    return round(raw_score * NORMALIZATION_FACTORS[channel], 2)


def weighted_average(scores: Mapping[Channel, ChannelScore | None]) -> float | None:
    """Review-volume weighted mean of normalized scores.

    Formula: sum(normalized_i * reviews_i) / sum(reviews_i), over the channels
    that have both a normalized score and a positive review count. Channels
    missing either are left out, not counted as zero. Returns None when no
    channel qualifies.
    """
    total_weighted = 0.0
    total_reviews = 0

    for channel in CHANNELS:
        score = scores.get(channel)
        if score is None or score.normalized_score is None:
            continue
        if score.total_reviews is None or score.total_reviews <= 0:
            continue
        total_weighted += score.normalized_score * score.total_reviews
        total_reviews += score.total_reviews

    if total_reviews == 0:
        return None
    return round(total_weighted / total_reviews, 2)


def latest_by_channel(snapshots: Iterable[ReviewSnapshot]) -> dict[Channel, ReviewSnapshot]:
    """Pick the most recent snapshot per channel; equal timestamps go to the later row."""
    latest: dict[Channel, ReviewSnapshot] = {}
    for snapshot in snapshots:
        current = latest.get(snapshot.channel)
        if current is None or snapshot.fetched_at >= current.fetched_at:
            latest[snapshot.channel] = snapshot
    return latest


def channel_scores(snapshots: Iterable[ReviewSnapshot]) -> dict[Channel, ChannelScore | None]:
    """Latest score per channel, with every channel present (None when never fetched)."""
    latest = latest_by_channel(snapshots)
    return {
        channel: ChannelScore.from_snapshot(latest[channel]) if channel in latest else None
        for channel in CHANNELS
    }


def group_average(hotel_averages: Iterable[float | None]) -> float | None:
    """Plain mean of member hotels' weighted averages; hotels without one are skipped."""
    values = [v for v in hotel_averages if v is not None]
    if not values:
        return None
    return round(sum(values) / len(values), 2)
