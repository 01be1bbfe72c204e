from datetime import datetime, timedelta, timezone

from reputation_monitor.mappers.review_text import extract_review_texts, score_summary
from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.hotels import ReviewSnapshot

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _snap(channel, raw, minutes_ago=0, score=None):
    return ReviewSnapshot(
        hotel_id="h1",
        channel=channel,
        normalized_score=score,
        total_reviews=10 if score is not None else None,
        fetched_at=NOW - timedelta(minutes=minutes_ago),
        raw_response=raw,
    )


def test_extract_per_channel_snippets():
    snapshots = [
        _snap(Channel.google, {"details": {"reviews": [
            {"rating": 5, "text": {"text": "Lovely stay"}},
            {"rating": 2, "originalText": {"text": "Noisy street"}},
        ]}}),
        _snap(Channel.tripadvisor, {"reviews": [{"rating": "4", "title": "Good value"}]}),
        _snap(Channel.booking, {"sample_reviews": [{"pros": "Breakfast", "cons": "Small rooms"}]}),
        _snap(Channel.airbnb, {"sample_reviews": [{"text": "Great host"}, {"text": ""}]}),
        _snap(Channel.expedia, {"overall_score": 8.6}),
    ]

    texts = extract_review_texts(snapshots)

    assert "[Google] Rating: 5/5 - Lovely stay" in texts
    assert "[Google] Rating: 2/5 - Noisy street" in texts
    assert "[TripAdvisor] Rating: 4/5 - Good value" in texts
    assert "[Booking.com] Positive: Breakfast" in texts
    assert "[Booking.com] Negative: Small rooms" in texts
    assert "[Airbnb] Great host" in texts
    assert len(texts) == 6


def test_extract_newest_first_and_capped():
    old = _snap(Channel.airbnb, {"sample_reviews": [{"text": "old"}] * 3}, minutes_ago=60)
    new = _snap(Channel.airbnb, {"sample_reviews": [{"text": "new"}] * 3}, minutes_ago=1)

    texts = extract_review_texts([old, new], limit=4)

    assert texts == ["[Airbnb] new"] * 3 + ["[Airbnb] old"]


def test_extract_tolerates_missing_raw():
    assert extract_review_texts([_snap(Channel.google, None), _snap(Channel.google, {"details": "x"})]) == []


def test_score_summary_skips_unscored():
    rows = score_summary("Grand Plaza (Austin)", [
        _snap(Channel.google, None, score=9.0),
        _snap(Channel.booking, None),
    ])
    assert rows == [{"hotel": "Grand Plaza (Austin)", "channel": "google", "score": 9.0, "reviews": 10}]
