import json
import logging

from pydantic import ValidationError

from reputation_monitor.exceptions.custom import HotelNotFoundError, ThemeAnalysisError
from reputation_monitor.mappers.review_text import extract_review_texts, score_summary
from reputation_monitor.mappers.scoring import latest_by_channel
from reputation_monitor.schemas.hotels import Hotel
from reputation_monitor.schemas.themes import ReviewTheme, ThemeAnalysis
from reputation_monitor.services.claude import ClaudeService
from reputation_monitor.stores import HotelStore, SnapshotStore, ThemeStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a hospitality industry analyst. "
    "You MUST respond with ONLY valid JSON, no markdown, no code fences, no extra text."
)

_RESPONSE_SHAPE = (
    '{"positive_themes":[{"theme":"Theme Name","summary":"What guests say","mention_count":5}],'
    '"negative_themes":[{"theme":"Theme Name","summary":"What guests say","mention_count":3}]}'
)

_REVIEWS_PROMPT = """Analyze the following hotel reviews for {hotel} and extract the most common themes.

For each theme, provide:
- A short theme name (2-4 words)
- A brief summary explaining what guests say about this topic
- An estimated mention count based on how frequently this theme appears

Reviews ({count} total):
{reviews}

Respond with JSON of exactly this shape:
{shape}

Return exactly 5 positive themes and 5 negative themes, ordered by mention_count descending."""

_SCORES_PROMPT = """Based on the following review scores and your expertise in hospitality trends, generate the most likely review themes for: {hotel}.

Score data (normalized to a 0-10 scale):
{scores}

Generate plausible positive and negative themes typical for hotels with these rating profiles. Mark each summary with "(Inferred from scores)" at the end.

Respond with JSON of exactly this shape:
{shape}

Return exactly 5 positive themes and 5 negative themes."""


def hotel_label(hotel: Hotel) -> str:
    return f"{hotel.name} ({hotel.city})" if hotel.city else hotel.name


def build_prompt(hotel: Hotel, review_texts: list[str], scores: list[dict]) -> str:
    label = hotel_label(hotel)
    if review_texts:
        numbered = "\n".join(f"{i}. {text}" for i, text in enumerate(review_texts, start=1))
        return _REVIEWS_PROMPT.format(
            hotel=label, count=len(review_texts), reviews=numbered, shape=_RESPONSE_SHAPE,
        )
    return _SCORES_PROMPT.format(
        hotel=label, scores=json.dumps(scores, indent=2), shape=_RESPONSE_SHAPE,
    )


class ThemeService:
    """Send snapshot-derived review text to the LLM and store the themes it returns."""

    def __init__(
        self,
        claude: ClaudeService,
        hotels: HotelStore,
        snapshots: SnapshotStore,
        themes: ThemeStore,
    ):
        self._claude = claude
        self._hotels = hotels
        self._snapshots = snapshots
        self._themes = themes

    async def generate(self, hotel_id: str) -> ReviewTheme:
        hotel = self._hotels.get(hotel_id)
        if hotel is None:
            raise HotelNotFoundError(hotel_id)

        history = self._snapshots.query(hotel_id)
        review_texts = extract_review_texts(history)
        scores = score_summary(hotel_label(hotel), latest_by_channel(history).values())
        logger.info(
            "Generating themes for %s from %d review snippets",
            hotel.name, len(review_texts),
        )

        data = await self._claude.analyze(SYSTEM_PROMPT, build_prompt(hotel, review_texts, scores))
        if data is None:
            raise ThemeAnalysisError("Failed to parse AI response")

        try:
            analysis = ThemeAnalysis(**data)
        except ValidationError as exc:
            raise ThemeAnalysisError(f"Unexpected theme format: {exc.error_count()} errors") from exc

        theme = ReviewTheme(
            hotel_id=hotel_id,
            positive_themes=analysis.positive_themes,
            negative_themes=analysis.negative_themes,
            model_used=self._claude.model,
            review_count=len(review_texts),
        )
        return self._themes.insert(theme)
