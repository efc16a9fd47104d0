"""Weekly first-fit matcher.

Converts the pickup window into a weekday name and two clock times in the
configured timezone, then returns the first candidate (in store order) with
a slot on that weekday starting no later than the pickup start and ending no
earlier than the pickup end.

Only the weekday of the pickup start is considered. A window that crosses
midnight compares its early-morning end against a slot on the start's
weekday, so an evening slot that finishes before midnight is accepted even
though the pickup runs into the next day.
"""

from collections.abc import Iterable
from datetime import datetime

import pytz

from foodrescue.matching.port import AvailabilityMatcherPort


class WeeklyAvailabilityMatcher(AvailabilityMatcherPort):
    def __init__(self, timezone: str = "UTC"):
        if timezone not in pytz.all_timezones_set:
            raise ValueError(f"Invalid timezone: {timezone}")
        self.timezone = pytz.timezone(timezone)

    def find_available_volunteer(self, pickup_start: datetime, pickup_end: datetime, candidates: Iterable):
        start = pickup_start.astimezone(self.timezone)
        end = pickup_end.astimezone(self.timezone)
        day = start.strftime("%A")

        for volunteer in candidates:
            if volunteer.is_available_for(day, start.time(), end.time()):
                return volunteer
        return None
