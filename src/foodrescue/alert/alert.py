"""EmergencyAlert aggregate — a shelter's urgent need for food by a deadline.

Responses are embedded children and can only be appended while the alert is
active. The status is set by the shelter; it is never derived from the
responses.
"""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from foodrescue.alert.events import AlertResponseRecorded, AlertStatusChanged, EmergencyAlertRaised
from foodrescue.domain import foodrescue
from foodrescue.food.food import FoodCategory, QuantityUnit
from foodrescue.shared.location import GeoPoint


class AlertPriority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NeedUrgency(Enum):
    IMMEDIATE = "immediate"
    TODAY = "today"
    THIS_WEEK = "this-week"


class AlertStatus(Enum):
    ACTIVE = "active"
    PARTIALLY_FULFILLED = "partially-fulfilled"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class ResponseStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


PRIORITY_RANK = {
    AlertPriority.HIGH.value: 0,
    AlertPriority.MEDIUM.value: 1,
    AlertPriority.LOW.value: 2,
}


@foodrescue.entity(part_of="EmergencyAlert")
class FoodNeed:
    """One line item of what the shelter needs."""

    category = String(required=True, max_length=20, choices=FoodCategory)
    quantity = Integer(required=True, min_value=1)
    unit = String(required=True, max_length=20, choices=QuantityUnit)
    urgency = String(required=True, max_length=20, choices=NeedUrgency)


@foodrescue.entity(part_of="EmergencyAlert")
class AlertResponse:
    """A donor's offer of a specific listing."""

    donor_id = Identifier(required=True)
    food_id = Identifier(required=True)
    status = String(max_length=20, choices=ResponseStatus, default=ResponseStatus.PENDING.value)
    response_time = DateTime(required=True)


@foodrescue.aggregate(limit=-1)
class EmergencyAlert:
    shelter_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    priority = String(max_length=10, choices=AlertPriority, default=AlertPriority.MEDIUM.value)
    food_needs = HasMany(FoodNeed)
    location = ValueObject(GeoPoint)
    deadline = DateTime(required=True)
    status = String(max_length=25, choices=AlertStatus, default=AlertStatus.ACTIVE.value)
    responses = HasMany(AlertResponse)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def issue(
        cls,
        shelter_id,
        title,
        description,
        food_needs,
        deadline,
        now,
        priority=AlertPriority.MEDIUM.value,
        location=None,
        matching_food_ids=None,
    ):
        """Open a new, active alert with no responses."""
        if not food_needs:
            raise ValidationError({"food_needs": ["An alert must list at least one food need"]})

        alert = cls(
            shelter_id=shelter_id,
            title=title,
            description=description,
            priority=priority,
            location=GeoPoint(**location) if isinstance(location, dict) else location,
            deadline=deadline,
            status=AlertStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        for need in food_needs:
            alert.add_food_needs(FoodNeed(**need))

        alert.raise_(
            EmergencyAlertRaised(
                alert_id=str(alert.id),
                shelter_id=str(shelter_id),
                title=title,
                priority=alert.priority,
                need_categories=json.dumps(alert.need_categories),
                deadline=deadline,
                matching_food_ids=json.dumps(matching_food_ids or []),
                raised_at=now,
            )
        )
        return alert

    @property
    def is_active(self) -> bool:
        return self.status == AlertStatus.ACTIVE.value

    @property
    def need_categories(self) -> list[str]:
        """Distinct need categories, in the order they were listed."""
        categories = []
        for need in self.food_needs or []:
            if need.category not in categories:
                categories.append(need.category)
        return categories

    def ensure_accepting_responses(self) -> None:
        if not self.is_active:
            raise InvalidStateError("Alert is no longer active")

    def record_response(self, donor_id: str, food_id: str, now: datetime) -> AlertResponse:
        """Append a pending response. The alert must still be active."""
        self.ensure_accepting_responses()

        response = AlertResponse(donor_id=donor_id, food_id=food_id, response_time=now)
        self.add_responses(response)
        self.updated_at = now
        self.raise_(
            AlertResponseRecorded(
                alert_id=str(self.id),
                response_id=str(response.id),
                donor_id=donor_id,
                food_id=food_id,
                response_count=len(self.responses),
                responded_at=now,
            )
        )
        return response

    def change_status(self, status: str, now: datetime) -> None:
        """Set the status directly; any of the four values is accepted."""
        previous = self.status
        if status not in {s.value for s in AlertStatus}:
            raise ValidationError({"status": [f"Unknown alert status: {status}"]})

        self.status = status
        self.updated_at = now
        self.raise_(
            AlertStatusChanged(
                alert_id=str(self.id),
                previous_status=previous,
                status=self.status,
                changed_at=now,
            )
        )

    def to_payload(self) -> dict:
        return {
            "id": str(self.id),
            "shelter_id": str(self.shelter_id),
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "food_needs": [
                {"category": n.category, "quantity": n.quantity, "unit": n.unit, "urgency": n.urgency}
                for n in self.food_needs or []
            ],
            "location": (
                {"lat": self.location.lat, "lng": self.location.lng, "address": self.location.address}
                if self.location
                else None
            ),
            "deadline": self.deadline.isoformat(),
            "status": self.status,
            "responses": [
                {
                    "id": str(r.id),
                    "donor_id": str(r.donor_id),
                    "food_id": str(r.food_id),
                    "status": r.status,
                    "response_time": r.response_time.isoformat(),
                }
                for r in self.responses or []
            ],
        }
