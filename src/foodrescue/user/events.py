"""User domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from foodrescue.domain import foodrescue


@foodrescue.event(part_of="User")
class UserRegistered:
    """A donor, shelter, or volunteer joined the platform."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@foodrescue.event(part_of="User")
class AvailabilityUpdated:
    """A volunteer replaced their weekly availability."""

    __version__ = 1

    user_id = Identifier(required=True)
    slots = Text(required=True)  # JSON list of {day, start_time, end_time}
    updated_at = DateTime(required=True)


@foodrescue.event(part_of="User")
class VolunteerDeliveryCompleted:
    """A volunteer's completed-delivery count went up by one."""

    __version__ = 1

    user_id = Identifier(required=True)
    delivery_id = Identifier(required=True)
    completed_deliveries = Integer(required=True)
    completed_at = DateTime(required=True)


@foodrescue.event(part_of="User")
class VolunteerRatingRecomputed:
    """A volunteer's average rating was recalculated from their rated deliveries."""

    __version__ = 1

    user_id = Identifier(required=True)
    rating = Float(required=True)
    rated_deliveries = Integer(required=True)
    recomputed_at = DateTime(required=True)
