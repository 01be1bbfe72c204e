class ChannelAPIError(Exception):
    """Upstream review channel returned an error or an unusable response."""

    label = "Channel"

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GooglePlacesError(ChannelAPIError):
    label = "Google Places"


class TripAdvisorError(ChannelAPIError):
    label = "TripAdvisor"


class ExpediaError(ChannelAPIError):
    label = "Expedia/Hotels.com"


class BookingError(ChannelAPIError):
    label = "Booking.com"


class AirbnbError(ChannelAPIError):
    label = "Airbnb"


class RateLimitError(Exception):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}")


class CredentialsMissingError(Exception):
    def __init__(self, missing_keys: list[str]):
        self.missing_keys = missing_keys
        super().__init__(
            "No API keys configured. Set "
            + " and ".join(missing_keys)
            + " in the environment and restart the server."
        )


class HotelNotFoundError(Exception):
    def __init__(self, hotel_id: str):
        self.hotel_id = hotel_id
        super().__init__(f"Hotel not found: {hotel_id}")


class ThemesNotConfiguredError(Exception):
    def __init__(self):
        super().__init__("Anthropic API key not configured")


class ThemeAnalysisError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GroupNotFoundError(Exception):
    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Group not found: {group_id}")
