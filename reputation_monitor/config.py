from dataclasses import dataclass, field

from pydantic_settings import BaseSettings

from reputation_monitor.schemas.channels import CHANNELS, Channel

GOOGLE_KEY = "GOOGLE_PLACES_API_KEY"
RAPIDAPI_KEY = "RAPIDAPI_KEY"
ANTHROPIC_KEY = "ANTHROPIC_API_KEY"

# Credential each channel depends on
CHANNEL_KEYS: dict[Channel, str] = {
    Channel.google: GOOGLE_KEY,
    Channel.tripadvisor: RAPIDAPI_KEY,
    Channel.expedia: RAPIDAPI_KEY,
    Channel.booking: RAPIDAPI_KEY,
    Channel.airbnb: RAPIDAPI_KEY,
}


@dataclass(frozen=True)
class ChannelCapabilities:
    """Which channels can be fetched, computed once from the settings."""

    available: frozenset[Channel]
    missing: dict[Channel, str] = field(default_factory=dict)

    def is_available(self, channel: Channel) -> bool:
        return channel in self.available

    @property
    def any_available(self) -> bool:
        return bool(self.available)

    @property
    def missing_keys(self) -> list[str]:
        return sorted(set(self.missing.values()))


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    google_places_api_key: str = ""
    rapidapi_key: str = ""
    anthropic_api_key: str = ""
    log_level: str = "INFO"
    http_timeout: float = 30.0
    cache_ttl_hours: float = 24.0
    cache_min_channels: int = 3
    batch_size: int = 5
    batch_delay_seconds: float = 1.0

    def key_status(self) -> dict[str, bool]:
        return {
            GOOGLE_KEY: bool(self.google_places_api_key),
            RAPIDAPI_KEY: bool(self.rapidapi_key),
            ANTHROPIC_KEY: bool(self.anthropic_api_key),
        }

    def capabilities(self) -> ChannelCapabilities:
        status = self.key_status()
        available = frozenset(c for c in CHANNELS if status[CHANNEL_KEYS[c]])
        missing = {c: CHANNEL_KEYS[c] for c in CHANNELS if c not in available}
        return ChannelCapabilities(available=available, missing=missing)
