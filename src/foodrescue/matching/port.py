"""Availability matcher port — how the matching engine picks a volunteer.

The matching engine programs against this interface so that alternative
strategies (for example one that understands pickup windows crossing
midnight) can be swapped in through configuration.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime


class AvailabilityMatcherPort(ABC):
    """Abstract interface for availability matchers."""

    @abstractmethod
    def find_available_volunteer(self, pickup_start: datetime, pickup_end: datetime, candidates: Iterable):
        """Return the volunteer whose weekly availability covers the window.

        Returns:
            The matching ``User`` or ``None`` when nobody qualifies.
        """
        ...
