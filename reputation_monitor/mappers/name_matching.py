import re
import unicodedata

from reputation_monitor.schemas.channels import Confidence

# Words too generic to identify a property on their own
_STOP_WORDS = frozenset({
    # articles / connectors
    "the", "and", "for", "with", "near", "at", "by", "of", "de", "del", "la",
    "las", "los", "el", "le", "les",
    # lodging words
    "hotel", "hotels", "resort", "resorts", "inn", "inns", "suites", "suite",
    "lodge", "motel", "hostel", "boutique", "apartments", "apartment",
    "residence", "residences", "rooms", "spa", "collection", "house",
    # directionals
    "north", "south", "east", "west", "northeast", "northwest", "southeast",
    "southwest", "downtown", "uptown", "midtown", "central", "center",
    "centre", "airport",
    # common city-name words
    "city", "new", "san", "santa", "saint", "fort", "port", "beach", "lake",
    "springs", "park", "falls", "heights", "village",
})

_MIN_TOKEN_LENGTH = 3


def clean_name(text: str) -> str:
    """Remove bracketed/parenthesized codes like [C81] or (code)."""
    text = re.sub(r"\[.*?\]", "", text)
    text = re.sub(r"\(.*?\)", "", text)
    return text.strip()


def _normalize(text: str) -> str:
    """Lowercase, strip accents, and remove bracketed codes."""
    nfkd = unicodedata.normalize("NFKD", clean_name(text).lower())
    return "".join(c for c in nfkd if not unicodedata.combining(c))


def significant_tokens(name: str) -> set[str]:
    """Extract meaningful words from a name."""
    words = re.findall(r"[a-z0-9]+", _normalize(name))
    return {w for w in words if len(w) >= _MIN_TOKEN_LENGTH and w not in _STOP_WORDS}


def names_contain(query_name: str, candidate_name: str) -> bool:
    """Case-insensitive substring containment, either direction."""
    query = query_name.strip().lower()
    candidate = candidate_name.strip().lower()
    if not query or not candidate:
        return False
    return query in candidate or candidate in query


def shares_significant_token(query_name: str, candidate_name: str) -> bool:
    """True when at least one significant query token occurs inside the candidate name.

    Example: "The Grand Plaza Hotel" -> {"grand", "plaza"}; "Cozy Studio near
    Grand Plaza" contains "grand", so it passes. "Downtown Loft" does not.
    """
    candidate = _normalize(candidate_name)
    return any(token in candidate for token in significant_tokens(query_name))


def match_confidence(
    query_name: str,
    candidate_name: str,
    candidate_count: int,
    few_candidates: int = 3,
) -> Confidence:
    """Three-tier confidence that a search candidate is the queried hotel.

    high: names contain one another; medium: the search returned at most
    ``few_candidates`` results; low otherwise.
    """
    if names_contain(query_name, candidate_name):
        return Confidence.high
    if candidate_count <= few_candidates:
        return Confidence.medium
    return Confidence.low
