"""Tests for the Delivery state machine, cancellation, and rating rules."""

from datetime import UTC, datetime, timedelta

import pytest
from foodrescue.delivery.delivery import Delivery, DeliveryStatus
from foodrescue.delivery.events import DeliveryCancelled, DeliveryRated, DeliveryScheduled, DeliveryStatusUpdated
from protean.exceptions import InvalidStateError, ValidationError

NOW = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)
PICKUP = NOW.replace(hour=10)


def _schedule(**overrides):
    defaults = {
        "food_id": "food-001",
        "volunteer_id": "vol-001",
        "shelter_id": "shelter-001",
        "pickup_time": PICKUP,
        "now": NOW,
    }
    defaults.update(overrides)
    delivery = Delivery.schedule(**defaults)
    delivery._events.clear()
    return delivery


def _delivery_at_state(target_status):
    """Create a delivery and advance it to the desired state."""
    delivery = _schedule()

    if target_status == DeliveryStatus.SCHEDULED:
        return delivery

    if target_status == DeliveryStatus.IN_PROGRESS:
        delivery.advance("in-progress", now=NOW)
    elif target_status == DeliveryStatus.COMPLETED:
        delivery.advance("completed", now=NOW)
    elif target_status == DeliveryStatus.CANCELLED:
        delivery.cancel(now=NOW)
    else:
        raise ValueError(f"Cannot create delivery at state {target_status}")

    delivery._events.clear()
    return delivery


class TestScheduling:
    def test_schedule_defaults(self):
        delivery = _schedule()
        assert delivery.status == DeliveryStatus.SCHEDULED.value
        assert delivery.pickup_time == PICKUP
        assert delivery.estimated_delivery_time == PICKUP + timedelta(minutes=30)
        assert delivery.actual_delivery_time is None
        assert delivery.rating is None

    def test_custom_estimate_offset(self):
        delivery = _schedule(estimated_minutes=45)
        assert delivery.estimated_delivery_time == PICKUP + timedelta(minutes=45)

    def test_schedule_raises_event(self):
        delivery = Delivery.schedule(
            food_id="food-001",
            volunteer_id="vol-001",
            shelter_id="shelter-001",
            pickup_time=PICKUP,
            now=NOW,
        )
        event = delivery._events[0]
        assert isinstance(event, DeliveryScheduled)
        assert event.delivery_id == str(delivery.id)
        assert event.food_id == "food-001"


# ---------------------------------------------------------------
# Happy path transitions
# ---------------------------------------------------------------
class TestValidTransitions:
    def test_scheduled_to_in_progress(self):
        delivery = _delivery_at_state(DeliveryStatus.SCHEDULED)
        delivery.advance("in-progress", now=NOW)
        assert delivery.status == DeliveryStatus.IN_PROGRESS.value
        assert delivery.actual_delivery_time is None

    def test_in_progress_to_completed_stamps_time(self):
        delivery = _delivery_at_state(DeliveryStatus.IN_PROGRESS)
        finished = NOW + timedelta(hours=3)
        delivery.advance("completed", now=finished)
        assert delivery.status == DeliveryStatus.COMPLETED.value
        assert delivery.actual_delivery_time == finished

    def test_scheduled_straight_to_completed(self):
        delivery = _delivery_at_state(DeliveryStatus.SCHEDULED)
        delivery.advance("completed", now=NOW)
        assert delivery.is_completed

    def test_status_update_event(self):
        delivery = _delivery_at_state(DeliveryStatus.IN_PROGRESS)
        delivery.advance("completed", now=NOW)
        event = delivery._events[-1]
        assert isinstance(event, DeliveryStatusUpdated)
        assert event.previous_status == "in-progress"
        assert event.status == "completed"
        assert event.actual_delivery_time == NOW


# ---------------------------------------------------------------
# Invalid transitions
# ---------------------------------------------------------------
class TestInvalidTransitions:
    def test_completed_is_terminal(self):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        with pytest.raises(InvalidStateError, match="Cannot move delivery from completed to completed"):
            delivery.advance("completed", now=NOW)

    def test_cannot_go_back_to_in_progress(self):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        with pytest.raises(InvalidStateError):
            delivery.advance("in-progress", now=NOW)

    def test_cannot_reschedule(self):
        delivery = _delivery_at_state(DeliveryStatus.IN_PROGRESS)
        with pytest.raises(InvalidStateError):
            delivery.advance("scheduled", now=NOW)

    def test_cancelled_is_terminal(self):
        delivery = _delivery_at_state(DeliveryStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            delivery.advance("in-progress", now=NOW)

    def test_advance_does_not_cancel(self):
        delivery = _delivery_at_state(DeliveryStatus.SCHEDULED)
        with pytest.raises(InvalidStateError):
            delivery.advance("cancelled", now=NOW)
        assert delivery.status == "scheduled"

    def test_unknown_status(self):
        delivery = _delivery_at_state(DeliveryStatus.SCHEDULED)
        with pytest.raises(ValueError):
            delivery.advance("lost", now=NOW)

    def test_delivery_time_only_when_completed(self):
        delivery = _delivery_at_state(DeliveryStatus.SCHEDULED)
        with pytest.raises(ValidationError):
            delivery.actual_delivery_time = NOW


class TestCancellation:
    @pytest.mark.parametrize("state", [DeliveryStatus.SCHEDULED, DeliveryStatus.IN_PROGRESS])
    def test_cancel_before_completion(self, state):
        delivery = _delivery_at_state(state)
        delivery.cancel(now=NOW)
        assert delivery.status == DeliveryStatus.CANCELLED.value
        event = delivery._events[-1]
        assert isinstance(event, DeliveryCancelled)
        assert event.previous_status == state.value

    def test_cannot_cancel_completed(self):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        with pytest.raises(InvalidStateError, match="Cannot cancel completed delivery"):
            delivery.cancel(now=NOW)

    def test_cannot_cancel_twice(self):
        delivery = _delivery_at_state(DeliveryStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            delivery.cancel(now=NOW)


class TestRating:
    def test_rate_completed(self):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        delivery.rate(5, now=NOW, feedback="Right on time")
        assert delivery.rating == 5
        assert delivery.feedback == "Right on time"
        event = delivery._events[-1]
        assert isinstance(event, DeliveryRated)
        assert event.volunteer_id == "vol-001"

    def test_re_rating_overwrites(self):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        delivery.rate(2, now=NOW, feedback="Late")
        delivery.rate(4, now=NOW)
        assert delivery.rating == 4
        assert delivery.feedback is None

    @pytest.mark.parametrize("state", [DeliveryStatus.SCHEDULED, DeliveryStatus.IN_PROGRESS, DeliveryStatus.CANCELLED])
    def test_only_completed_can_be_rated(self, state):
        delivery = _delivery_at_state(state)
        with pytest.raises(InvalidStateError, match="Can only rate completed deliveries"):
            delivery.rate(5, now=NOW)

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_bounds(self, rating):
        delivery = _delivery_at_state(DeliveryStatus.COMPLETED)
        with pytest.raises(ValidationError):
            delivery.rate(rating, now=NOW)
        assert delivery.rating is None
