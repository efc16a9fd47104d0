"""Food listing aggregate.

A donor posts a listing with a pickup window; the matching engine reserves it
for a shelter and a volunteer, and the delivery lifecycle then either picks it
up or releases it back to the pool.

State Machine:
    AVAILABLE → RESERVED → PICKED_UP
    RESERVED → AVAILABLE            (delivery cancelled)
    AVAILABLE → EXPIRED
"""

import json
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text, ValueObject

from foodrescue.domain import foodrescue
from foodrescue.food.events import (
    FoodExpired,
    FoodListed,
    FoodListingUpdated,
    FoodPickedUp,
    FoodReleased,
    FoodReserved,
)
from foodrescue.shared.location import GeoPoint


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class FoodStatus(Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    PICKED_UP = "picked-up"
    EXPIRED = "expired"


class FoodCategory(Enum):
    PREPARED = "prepared"
    PRODUCE = "produce"
    DAIRY = "dairy"
    MEAT = "meat"
    PANTRY = "pantry"
    OTHER = "other"


class QuantityUnit(Enum):
    SERVINGS = "servings"
    POUNDS = "pounds"
    ITEMS = "items"
    BOXES = "boxes"
    BAGS = "bags"


ALLERGENS = frozenset({"dairy", "eggs", "fish", "shellfish", "tree-nuts", "peanuts", "wheat", "soy", "sesame"})
DIETARY_RESTRICTIONS = frozenset({"vegetarian", "vegan", "halal", "kosher", "gluten-free"})

_EDITABLE_FIELDS = (
    "title",
    "description",
    "quantity",
    "unit",
    "category",
    "expiry_date",
    "pickup_start",
    "pickup_end",
    "location",
    "allergens",
    "dietary_restrictions",
)


def _encode_tags(values, allowed, field_name):
    values = list(values or [])
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ValidationError({field_name: [f"Unsupported values: {', '.join(unknown)}"]})
    return json.dumps(values)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@foodrescue.aggregate(limit=-1)
class Food:
    donor_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text()
    quantity = Integer(required=True, min_value=1)
    unit = String(required=True, max_length=20, choices=QuantityUnit)
    category = String(required=True, max_length=20, choices=FoodCategory)
    expiry_date = DateTime(required=True)
    pickup_start = DateTime(required=True)
    pickup_end = DateTime(required=True)
    location = ValueObject(GeoPoint)
    allergens = Text()  # JSON list
    dietary_restrictions = Text()  # JSON list
    status = String(max_length=20, choices=FoodStatus, default=FoodStatus.AVAILABLE.value)
    matched_shelter_id = Identifier()
    assigned_volunteer_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def pickup_window_must_be_ordered(self):
        if self.pickup_start and self.pickup_end and self.pickup_start >= self.pickup_end:
            raise ValidationError({"pickup_end": ["Pickup window must end after it starts"]})

    @invariant.post
    def shelter_and_volunteer_assigned_together(self):
        if bool(self.matched_shelter_id) != bool(self.assigned_volunteer_id):
            raise ValidationError(
                {"matched_shelter_id": ["Matched shelter and assigned volunteer must be set together"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def post(
        cls,
        donor_id,
        title,
        quantity,
        unit,
        category,
        expiry_date,
        pickup_start,
        pickup_end,
        now,
        description=None,
        location=None,
        allergens=None,
        dietary_restrictions=None,
        matching_alert_ids=None,
    ):
        """Post a new, available food listing."""
        food = cls(
            donor_id=donor_id,
            title=title,
            description=description,
            quantity=quantity,
            unit=unit,
            category=category,
            expiry_date=expiry_date,
            pickup_start=pickup_start,
            pickup_end=pickup_end,
            location=GeoPoint(**location) if isinstance(location, dict) else location,
            allergens=_encode_tags(allergens, ALLERGENS, "allergens"),
            dietary_restrictions=_encode_tags(dietary_restrictions, DIETARY_RESTRICTIONS, "dietary_restrictions"),
            status=FoodStatus.AVAILABLE.value,
            created_at=now,
            updated_at=now,
        )
        food.raise_(
            FoodListed(
                food_id=str(food.id),
                donor_id=str(donor_id),
                title=title,
                category=category,
                quantity=quantity,
                unit=unit,
                expiry_date=expiry_date,
                pickup_start=pickup_start,
                pickup_end=pickup_end,
                matching_alert_ids=json.dumps(matching_alert_ids or []),
                listed_at=now,
            )
        )
        return food

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_available(self) -> bool:
        return self.status == FoodStatus.AVAILABLE.value

    @property
    def allergen_list(self) -> list[str]:
        return json.loads(self.allergens) if self.allergens else []

    @property
    def dietary_restriction_list(self) -> list[str]:
        return json.loads(self.dietary_restrictions) if self.dietary_restrictions else []

    # -------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------
    def revise(self, now: datetime, **changes) -> None:
        """Edit listing details. Only allowed while the listing is available."""
        if not self.is_available:
            raise InvalidStateError("Only available food listings can be edited")

        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({"changes": [f"Fields cannot be edited: {', '.join(sorted(unknown))}"]})

        changed = [name for name, value in changes.items() if value is not None]
        if not changed:
            return

        with atomic_change(self):
            for name in changed:
                value = changes[name]
                if name == "location" and isinstance(value, dict):
                    value = GeoPoint(**value)
                elif name == "allergens":
                    value = _encode_tags(value, ALLERGENS, "allergens")
                elif name == "dietary_restrictions":
                    value = _encode_tags(value, DIETARY_RESTRICTIONS, "dietary_restrictions")
                setattr(self, name, value)
            self.updated_at = now

        self.raise_(
            FoodListingUpdated(
                food_id=str(self.id),
                changes=json.dumps(changed),
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Matching lifecycle
    # -------------------------------------------------------------------
    def reserve(self, shelter_id: str, volunteer_id: str, now: datetime) -> None:
        """Hold the listing for a shelter and the volunteer who will carry it."""
        if not self.is_available:
            raise InvalidStateError("Food is no longer available")

        with atomic_change(self):
            self.status = FoodStatus.RESERVED.value
            self.matched_shelter_id = shelter_id
            self.assigned_volunteer_id = volunteer_id
            self.updated_at = now

        self.raise_(
            FoodReserved(
                food_id=str(self.id),
                shelter_id=shelter_id,
                volunteer_id=volunteer_id,
                reserved_at=now,
            )
        )

    def mark_picked_up(self, now: datetime) -> None:
        self.status = FoodStatus.PICKED_UP.value
        self.updated_at = now
        self.raise_(
            FoodPickedUp(
                food_id=str(self.id),
                shelter_id=self.matched_shelter_id,
                volunteer_id=self.assigned_volunteer_id,
                picked_up_at=now,
            )
        )

    def keep_reserved(self, now: datetime) -> None:
        """Hold the listing as reserved while its delivery is under way."""
        self.status = FoodStatus.RESERVED.value
        self.updated_at = now

    def release(self, now: datetime) -> None:
        """Return the listing to the matchable pool and clear its match."""
        previous_shelter_id = self.matched_shelter_id
        previous_volunteer_id = self.assigned_volunteer_id

        with atomic_change(self):
            self.status = FoodStatus.AVAILABLE.value
            self.matched_shelter_id = None
            self.assigned_volunteer_id = None
            self.updated_at = now

        self.raise_(
            FoodReleased(
                food_id=str(self.id),
                previous_shelter_id=previous_shelter_id,
                previous_volunteer_id=previous_volunteer_id,
                released_at=now,
            )
        )

    def expire(self, now: datetime) -> None:
        if not self.is_available:
            raise InvalidStateError("Only available food listings can expire")

        self.status = FoodStatus.EXPIRED.value
        self.updated_at = now
        self.raise_(
            FoodExpired(
                food_id=str(self.id),
                expiry_date=self.expiry_date,
                expired_at=now,
            )
        )

    def ensure_removable(self) -> None:
        if self.status == FoodStatus.RESERVED.value:
            raise InvalidStateError("Reserved food listings cannot be deleted")

    def to_payload(self) -> dict:
        """Serializable view used by API responses and broadcasts."""
        return {
            "id": str(self.id),
            "donor_id": str(self.donor_id),
            "title": self.title,
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "expiry_date": self.expiry_date.isoformat(),
            "pickup_start": self.pickup_start.isoformat(),
            "pickup_end": self.pickup_end.isoformat(),
            "location": (
                {"lat": self.location.lat, "lng": self.location.lng, "address": self.location.address}
                if self.location
                else None
            ),
            "allergens": self.allergen_list,
            "dietary_restrictions": self.dietary_restriction_list,
            "status": self.status,
            "matched_shelter_id": self.matched_shelter_id,
            "assigned_volunteer_id": self.assigned_volunteer_id,
        }
