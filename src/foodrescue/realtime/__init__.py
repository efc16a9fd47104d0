"""Realtime publisher selection — pluggable push channel for live updates.

Uses the in-memory fake by default. A websocket or pub/sub backed adapter can
be selected through the REALTIME_PUBLISHER environment variable.
"""

import os

_publisher_instance = None


def get_publisher():
    """Return the configured realtime publisher (singleton)."""
    global _publisher_instance
    if _publisher_instance is None:
        adapter = os.environ.get("REALTIME_PUBLISHER", "fake")
        if adapter == "fake":
            from foodrescue.realtime.fake_adapter import FakePublisher

            _publisher_instance = FakePublisher()
        else:
            raise ValueError(f"Unknown realtime publisher: {adapter}")
    return _publisher_instance


def reset_publisher():
    """Reset the publisher singleton (useful for testing)."""
    global _publisher_instance
    _publisher_instance = None
