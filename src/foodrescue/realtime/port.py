"""Realtime publisher port — fire-and-forget fan-out to connected clients."""

from abc import ABC, abstractmethod


class RealtimePublisherPort(ABC):
    """Abstract interface for realtime publishers."""

    @abstractmethod
    def publish(self, event_name: str, payload: dict) -> dict:
        """Push ``payload`` to subscribers of ``event_name``.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (on failure)
        """
        ...
