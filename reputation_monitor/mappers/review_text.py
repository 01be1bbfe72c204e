from collections.abc import Iterable
from typing import Any

from reputation_monitor.schemas.channels import Channel
from reputation_monitor.schemas.hotels import ReviewSnapshot

MAX_SNIPPETS = 50


def _items(raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = raw.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _google_snippets(raw: dict[str, Any]) -> list[str]:
    details = raw.get("details")
    if not isinstance(details, dict):
        return []
    snippets = []
    for review in _items(details, "reviews"):
        text = (review.get("text") or {}).get("text") or (review.get("originalText") or {}).get("text")
        if text:
            snippets.append(f"[Google] Rating: {review.get('rating') or '?'}/5 - {text}")
    return snippets


def _tripadvisor_snippets(raw: dict[str, Any]) -> list[str]:
    snippets = []
    for review in _items(raw, "reviews"):
        text = review.get("text") or review.get("title")
        if text:
            snippets.append(f"[TripAdvisor] Rating: {review.get('rating') or '?'}/5 - {text}")
    return snippets


def _booking_snippets(raw: dict[str, Any]) -> list[str]:
    snippets = []
    for review in _items(raw, "sample_reviews"):
        if review.get("pros"):
            snippets.append(f"[Booking.com] Positive: {review['pros']}")
        if review.get("cons"):
            snippets.append(f"[Booking.com] Negative: {review['cons']}")
    return snippets


def _airbnb_snippets(raw: dict[str, Any]) -> list[str]:
    return [f"[Airbnb] {r['text']}" for r in _items(raw, "sample_reviews") if r.get("text")]


_EXTRACTORS = {
    Channel.google: _google_snippets,
    Channel.tripadvisor: _tripadvisor_snippets,
    Channel.booking: _booking_snippets,
    Channel.airbnb: _airbnb_snippets,
}


def extract_review_texts(
    snapshots: Iterable[ReviewSnapshot], limit: int = MAX_SNIPPETS
) -> list[str]:
    """Review snippets stored in snapshot raw responses, newest snapshot first."""
    texts: list[str] = []
    for snapshot in sorted(snapshots, key=lambda s: s.fetched_at, reverse=True):
        extractor = _EXTRACTORS.get(snapshot.channel)
        if extractor is None or not snapshot.raw_response:
            continue
        texts.extend(extractor(snapshot.raw_response))
        if len(texts) >= limit:
            break
    return texts[:limit]


def score_summary(hotel_label: str, snapshots: Iterable[ReviewSnapshot]) -> list[dict[str, Any]]:
    """Score rows used when no review text is available."""
    return [
        {
            "hotel": hotel_label,
            "channel": str(s.channel),
            "score": s.normalized_score,
            "reviews": s.total_reviews,
        }
        for s in snapshots
        if s.normalized_score is not None
    ]
