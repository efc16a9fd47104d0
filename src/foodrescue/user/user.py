"""User aggregate — donors, shelters, and volunteers.

Only the parts of a user the matching engine depends on live here: the role,
a volunteer's recurring weekly availability, and the running delivery
statistics that the delivery lifecycle and rating aggregator maintain.
"""

import json
from datetime import datetime, time
from enum import Enum

from protean import invariant
from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from foodrescue.domain import foodrescue
from foodrescue.user.events import (
    AvailabilityUpdated,
    UserRegistered,
    VolunteerDeliveryCompleted,
    VolunteerRatingRecomputed,
)


class UserRole(Enum):
    DONOR = "donor"
    SHELTER = "shelter"
    VOLUNTEER = "volunteer"


class Weekday(Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


def parse_clock_time(value: str) -> time:
    """Parse an ``HH:MM`` or ``HH:MM:SS`` string into a ``time``."""
    try:
        return time.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError({"time": [f"Invalid time of day: {value!r}"]}) from None


@foodrescue.entity(part_of="User")
class AvailabilitySlot:
    """A recurring weekly window during which a volunteer can drive."""

    day = String(required=True, max_length=10, choices=Weekday)
    start_time = String(required=True, max_length=8)
    end_time = String(required=True, max_length=8)

    @invariant.post
    def window_must_be_ordered(self):
        if parse_clock_time(self.start_time) >= parse_clock_time(self.end_time):
            raise ValidationError({"end_time": ["Availability must end after it starts"]})

    def covers(self, day: str, start: time, end: time) -> bool:
        return (
            self.day == day
            and parse_clock_time(self.start_time) <= start
            and parse_clock_time(self.end_time) >= end
        )

    def to_payload(self) -> dict:
        return {"day": self.day, "start_time": self.start_time, "end_time": self.end_time}


@foodrescue.aggregate(limit=-1)
class User:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    role = String(required=True, max_length=20, choices=UserRole)
    phone = String(max_length=20)
    availability = HasMany(AvailabilitySlot)
    completed_deliveries = Integer(default=0, min_value=0)
    rating = Float(min_value=0.0, max_value=5.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def only_volunteers_have_availability(self):
        if self.availability and self.role != UserRole.VOLUNTEER.value:
            raise ValidationError({"availability": ["Only volunteers can declare availability"]})

    @classmethod
    def register(cls, name, email, role, now: datetime, phone=None, availability=None):
        """Register a new platform user."""
        user = cls(
            name=name,
            email=email,
            role=role,
            phone=phone,
            completed_deliveries=0,
            created_at=now,
            updated_at=now,
        )
        for slot in availability or []:
            user.add_availability(AvailabilitySlot(**slot))

        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=name,
                email=email,
                role=role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_volunteer(self) -> bool:
        return self.role == UserRole.VOLUNTEER.value

    @property
    def is_shelter(self) -> bool:
        return self.role == UserRole.SHELTER.value

    @property
    def is_donor(self) -> bool:
        return self.role == UserRole.DONOR.value

    def is_available_for(self, day: str, start: time, end: time) -> bool:
        return any(slot.covers(day, start, end) for slot in self.availability or [])

    def replace_availability(self, slots: list[dict], now: datetime) -> None:
        """Replace the volunteer's weekly availability with ``slots``."""
        if not self.is_volunteer:
            raise InvalidStateError("Only volunteers can set availability")

        for existing in list(self.availability or []):
            self.remove_availability(existing)
        for slot in slots:
            self.add_availability(AvailabilitySlot(**slot))
        self.updated_at = now

        self.raise_(
            AvailabilityUpdated(
                user_id=str(self.id),
                slots=json.dumps([slot.to_payload() for slot in self.availability]),
                updated_at=now,
            )
        )

    def record_completed_delivery(self, delivery_id: str, now: datetime) -> None:
        self.completed_deliveries = (self.completed_deliveries or 0) + 1
        self.updated_at = now
        self.raise_(
            VolunteerDeliveryCompleted(
                user_id=str(self.id),
                delivery_id=delivery_id,
                completed_deliveries=self.completed_deliveries,
                completed_at=now,
            )
        )

    def record_average_rating(self, ratings: list[int], now: datetime) -> None:
        """Store the mean of ``ratings`` as the volunteer's rating.

        The mean is always recomputed from the full list so that re-rated
        deliveries are reflected. An empty list leaves the rating untouched.
        """
        if not ratings:
            return

        self.rating = round(sum(ratings) / len(ratings), 2)
        self.updated_at = now
        self.raise_(
            VolunteerRatingRecomputed(
                user_id=str(self.id),
                rating=self.rating,
                rated_deliveries=len(ratings),
                recomputed_at=now,
            )
        )
