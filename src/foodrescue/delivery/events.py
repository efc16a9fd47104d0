"""Delivery domain events — immutable facts about a delivery's lifecycle.

Each carries the food, volunteer, and shelter references so that handlers
reacting to it (rating aggregation, realtime broadcasts) can load the
records they need without re-reading the delivery first.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from foodrescue.domain import foodrescue


@foodrescue.event(part_of="Delivery")
class DeliveryScheduled:
    """A food listing was matched and a delivery was scheduled for it."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    food_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    shelter_id = Identifier(required=True)
    pickup_time = DateTime(required=True)
    estimated_delivery_time = DateTime(required=True)
    scheduled_at = DateTime(required=True)


@foodrescue.event(part_of="Delivery")
class DeliveryStatusUpdated:
    """A delivery moved forward (in progress or completed)."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    food_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    actual_delivery_time = DateTime()
    updated_at = DateTime(required=True)


@foodrescue.event(part_of="Delivery")
class DeliveryCancelled:
    """A scheduled or in-progress delivery was called off."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    food_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@foodrescue.event(part_of="Delivery")
class DeliveryRated:
    """The shelter rated a completed delivery."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    rating = Integer(required=True)
    feedback = Text()
    rated_at = DateTime(required=True)
