"""Fake realtime publisher — records published messages for testing."""

from uuid import uuid4

from foodrescue.realtime.port import RealtimePublisherPort


class FakePublisher(RealtimePublisherPort):
    """Publisher that keeps messages in memory for test assertions."""

    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Realtime channel unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Realtime channel unavailable"):
        """Configure the fake publisher behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, event_name: str, payload: dict) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"rt-{uuid4().hex[:12]}"
        self.published.append({"message_id": message_id, "event": event_name, "payload": payload})
        return {"message_id": message_id, "status": "sent"}

    def messages_for(self, event_name: str) -> list[dict]:
        return [m["payload"] for m in self.published if m["event"] == event_name]

    def reset(self):
        """Clear published messages (useful between tests)."""
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Realtime channel unavailable"
