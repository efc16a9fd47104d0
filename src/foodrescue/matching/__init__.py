"""Availability matcher selection — pluggable volunteer matching strategy."""

import os

from protean.utils.globals import current_domain

_matcher_instance = None


def get_availability_matcher():
    """Return the configured availability matcher (singleton).

    Uses the weekly first-fit matcher by default. Select another strategy via
    the AVAILABILITY_MATCHER environment variable.
    """
    global _matcher_instance
    if _matcher_instance is None:
        strategy = os.environ.get("AVAILABILITY_MATCHER", "weekly")
        if strategy == "weekly":
            from foodrescue.matching.weekly import WeeklyAvailabilityMatcher

            timezone = getattr(current_domain, "AVAILABILITY_TIMEZONE", "UTC")
            _matcher_instance = WeeklyAvailabilityMatcher(timezone=timezone)
        else:
            raise ValueError(f"Unknown availability matcher: {strategy}")
    return _matcher_instance


def reset_availability_matcher():
    """Reset the matcher singleton (useful for testing)."""
    global _matcher_instance
    _matcher_instance = None
