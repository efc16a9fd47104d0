"""Emergency alert creation — command and handler.

A new alert is matched against the food currently on offer: available
listings in one of the needed categories that will still be good at the
deadline (expiry strictly after it). Quantities are not allocated; the scan
is a plain filter.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from foodrescue.alert.alert import AlertPriority, EmergencyAlert
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food, FoodStatus
from foodrescue.user.user import User

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="EmergencyAlert")
class CreateEmergencyAlert:
    """Raise an urgent need on behalf of a shelter."""

    shelter_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    priority = String(max_length=10, choices=AlertPriority, default=AlertPriority.MEDIUM.value)
    food_needs = Text(required=True)  # JSON list of {category, quantity, unit, urgency}
    location = Text()  # JSON {lat, lng, address}
    deadline = DateTime(required=True)


def find_matching_food(categories: list[str], deadline) -> list[Food]:
    """Available listings in ``categories`` that expire after ``deadline``."""
    return (
        current_domain.repository_for(Food)
        ._dao.query.filter(
            status=FoodStatus.AVAILABLE.value,
            category__in=categories,
            expiry_date__gt=deadline,
        )
        .all()
        .items
    )


@foodrescue.command_handler(part_of=EmergencyAlert)
class CreateEmergencyAlertHandler:
    @handle(CreateEmergencyAlert)
    def create_alert(self, command):
        shelter = current_domain.repository_for(User).get_or_none(command.shelter_id)
        if shelter is None or not shelter.is_shelter:
            raise ObjectNotFoundError("Shelter not found")

        food_needs = json.loads(command.food_needs)
        categories = list(dict.fromkeys(need["category"] for need in food_needs))
        matching_food = find_matching_food(categories, command.deadline)

        alert = EmergencyAlert.issue(
            shelter_id=command.shelter_id,
            title=command.title,
            description=command.description,
            priority=command.priority,
            food_needs=food_needs,
            location=json.loads(command.location) if command.location else None,
            deadline=command.deadline,
            matching_food_ids=[str(food.id) for food in matching_food],
            now=current_domain.clock.now(),
        )
        current_domain.repository_for(EmergencyAlert).add(alert)

        logger.info(
            "Emergency alert raised",
            alert_id=str(alert.id),
            shelter_id=command.shelter_id,
            priority=alert.priority,
            matching_food=len(matching_food),
        )
        return {"alert": alert.to_payload(), "matching_food": [food.to_payload() for food in matching_food]}
