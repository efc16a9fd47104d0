"""Delivery aggregate — the hand-off of one food listing to one shelter.

A delivery references its food listing, volunteer, and shelter but lives on
independently: it stays on record after the listing is picked up or released.

State Machine:
    SCHEDULED → IN_PROGRESS → COMPLETED
    SCHEDULED → COMPLETED
    {SCHEDULED, IN_PROGRESS} → CANCELLED

COMPLETED and CANCELLED are terminal, so completing twice is rejected and
the volunteer's delivery count can only move once per delivery.
"""

from datetime import datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from foodrescue.delivery.events import (
    DeliveryCancelled,
    DeliveryRated,
    DeliveryScheduled,
    DeliveryStatusUpdated,
)
from foodrescue.domain import foodrescue

DEFAULT_ESTIMATED_DELIVERY_MINUTES = 30


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class DeliveryStatus(Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    DeliveryStatus.SCHEDULED: {DeliveryStatus.IN_PROGRESS, DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED},
    DeliveryStatus.IN_PROGRESS: {DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED},
    DeliveryStatus.COMPLETED: set(),  # terminal
    DeliveryStatus.CANCELLED: set(),  # terminal
}

_CANCELLABLE_STATUSES = {DeliveryStatus.SCHEDULED, DeliveryStatus.IN_PROGRESS}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@foodrescue.aggregate(limit=-1)
class Delivery:
    food_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    shelter_id = Identifier(required=True)
    status = String(max_length=20, choices=DeliveryStatus, default=DeliveryStatus.SCHEDULED.value)
    pickup_time = DateTime(required=True)
    estimated_delivery_time = DateTime(required=True)
    actual_delivery_time = DateTime()
    rating = Integer(min_value=1, max_value=5)
    feedback = Text()
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def delivered_at_only_when_completed(self):
        completed = self.status == DeliveryStatus.COMPLETED.value
        if completed != (self.actual_delivery_time is not None):
            raise ValidationError(
                {"actual_delivery_time": ["Actual delivery time is recorded only for completed deliveries"]}
            )

    @invariant.post
    def rating_only_when_completed(self):
        if (self.rating is not None or self.feedback) and self.status != DeliveryStatus.COMPLETED.value:
            raise ValidationError({"rating": ["Only completed deliveries can carry a rating"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def schedule(
        cls,
        food_id: str,
        volunteer_id: str,
        shelter_id: str,
        pickup_time: datetime,
        now: datetime,
        estimated_minutes: int = DEFAULT_ESTIMATED_DELIVERY_MINUTES,
        notes: str | None = None,
    ):
        """Schedule a delivery for a freshly matched listing.

        The estimated delivery time is a placeholder offset from the pickup
        time, computed once here and never revised.
        """
        estimated = pickup_time + timedelta(minutes=estimated_minutes)
        delivery = cls(
            food_id=food_id,
            volunteer_id=volunteer_id,
            shelter_id=shelter_id,
            status=DeliveryStatus.SCHEDULED.value,
            pickup_time=pickup_time,
            estimated_delivery_time=estimated,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        delivery.raise_(
            DeliveryScheduled(
                delivery_id=str(delivery.id),
                food_id=food_id,
                volunteer_id=volunteer_id,
                shelter_id=shelter_id,
                pickup_time=pickup_time,
                estimated_delivery_time=estimated,
                scheduled_at=now,
            )
        )
        return delivery

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: DeliveryStatus) -> None:
        current = DeliveryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError(f"Cannot move delivery from {current.value} to {target_status.value}")

    @property
    def is_completed(self) -> bool:
        return self.status == DeliveryStatus.COMPLETED.value

    # -------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------
    def advance(self, status: str, now: datetime) -> None:
        """Move the delivery to ``in-progress`` or ``completed``.

        Completion stamps the actual delivery time. Cancellation has its own
        entry point, :meth:`cancel`.
        """
        target = DeliveryStatus(status)
        if target == DeliveryStatus.CANCELLED:
            raise InvalidStateError("Use cancel() to cancel a delivery")

        self._assert_can_transition(target)
        previous = self.status

        with atomic_change(self):
            self.status = target.value
            if target == DeliveryStatus.COMPLETED:
                self.actual_delivery_time = now
            self.updated_at = now

        self.raise_(
            DeliveryStatusUpdated(
                delivery_id=str(self.id),
                food_id=str(self.food_id),
                volunteer_id=str(self.volunteer_id),
                previous_status=previous,
                status=self.status,
                actual_delivery_time=self.actual_delivery_time,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, now: datetime) -> None:
        """Call off the delivery (only before it completes)."""
        current = DeliveryStatus(self.status)
        if current not in _CANCELLABLE_STATUSES:
            raise InvalidStateError(f"Cannot cancel {current.value} delivery")

        self.status = DeliveryStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            DeliveryCancelled(
                delivery_id=str(self.id),
                food_id=str(self.food_id),
                volunteer_id=str(self.volunteer_id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Rating
    # -------------------------------------------------------------------
    def rate(self, rating: int, now: datetime, feedback: str | None = None) -> None:
        """Rate a completed delivery. Rating again replaces the earlier rating."""
        if not self.is_completed:
            raise InvalidStateError("Can only rate completed deliveries")
        if rating is None or not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        with atomic_change(self):
            self.rating = rating
            self.feedback = feedback
            self.updated_at = now

        self.raise_(
            DeliveryRated(
                delivery_id=str(self.id),
                volunteer_id=str(self.volunteer_id),
                rating=rating,
                feedback=feedback,
                rated_at=now,
            )
        )

    def to_payload(self) -> dict:
        return {
            "id": str(self.id),
            "food_id": str(self.food_id),
            "volunteer_id": str(self.volunteer_id),
            "shelter_id": str(self.shelter_id),
            "status": self.status,
            "pickup_time": self.pickup_time.isoformat(),
            "estimated_delivery_time": self.estimated_delivery_time.isoformat(),
            "actual_delivery_time": self.actual_delivery_time.isoformat() if self.actual_delivery_time else None,
            "rating": self.rating,
            "feedback": self.feedback,
            "notes": self.notes,
        }
