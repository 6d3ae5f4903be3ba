"""Constants for the occurrence engine."""

from datetime import timedelta
from typing import Final

from .rules import MonthDayPolicy

DEFAULT_MONTH_DAY_POLICY: Final = MonthDayPolicy.CLAMP

# Raw recurrence instants are searched this far outside the requested range;
# materialization can move an instant by up to a day.
ENGINE_WINDOW_PADDING: Final = timedelta(days=1)

# Months searched for the first month containing a BYMONTHDAY on or after
# the event start.
MAX_MONTH_SCAN: Final = 12
