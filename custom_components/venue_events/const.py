"""Constants for the Venue Events integration."""

from datetime import timedelta
from typing import Final

DOMAIN: Final = "venue_events"

CONF_BASE_URL: Final = "base_url"
CONF_TIMEZONE: Final = "business_timezone"

DEFAULT_TIMEZONE: Final = "America/Denver"
DEFAULT_UPDATE_INTERVAL_SECONDS: Final = 900  # 15 minutes

UPCOMING_LOOKAHEAD_DAYS: Final = 30
DEFAULT_EVENT_DURATION: Final = timedelta(hours=1)
