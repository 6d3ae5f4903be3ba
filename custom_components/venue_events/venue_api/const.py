"""Constants for the venue site API client."""

__version__ = "0.1.0"

EVENTS_PATH = "/api/events"
SETTINGS_PATH = "/api/settings"

SETTING_TIMEZONE = "timezone"

DEFAULT_TIMEOUT_SECONDS = 15
DEFAULT_VENUE_AREA = "bar"
