"""Food listing management — commands and handler.

Creating a listing also scans for active emergency alerts the listing could
serve. The scan is informational: it is recorded on the ``FoodListed`` event
and broadcast, but nothing is reserved.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from foodrescue.alert.alert import AlertStatus, EmergencyAlert
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food, FoodCategory, QuantityUnit
from foodrescue.user.user import User

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="Food")
class CreateFoodListing:
    """Post a new food donation."""

    donor_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text()
    quantity = Integer(required=True, min_value=1)
    unit = String(required=True, max_length=20, choices=QuantityUnit)
    category = String(required=True, max_length=20, choices=FoodCategory)
    expiry_date = DateTime(required=True)
    pickup_start = DateTime(required=True)
    pickup_end = DateTime(required=True)
    location = Text()  # JSON {lat, lng, address}
    allergens = Text()  # JSON list
    dietary_restrictions = Text()  # JSON list


@foodrescue.command(part_of="Food")
class UpdateFoodListing:
    """Revise an available listing. Omitted fields are left unchanged."""

    food_id = Identifier(required=True)
    title = String(max_length=200)
    description = Text()
    quantity = Integer(min_value=1)
    unit = String(max_length=20, choices=QuantityUnit)
    category = String(max_length=20, choices=FoodCategory)
    expiry_date = DateTime()
    pickup_start = DateTime()
    pickup_end = DateTime()
    location = Text()
    allergens = Text()
    dietary_restrictions = Text()


@foodrescue.command(part_of="Food")
class DeleteFoodListing:
    """Withdraw a listing that is not currently reserved."""

    food_id = Identifier(required=True)


def _decode(value):
    return json.loads(value) if value else None


def find_matching_alerts(category: str, expiry_date) -> list[EmergencyAlert]:
    """Active alerts needing ``category`` whose deadline falls after ``expiry_date``."""
    candidates = (
        current_domain.repository_for(EmergencyAlert)
        ._dao.query.filter(status=AlertStatus.ACTIVE.value, deadline__gt=expiry_date)
        .all()
        .items
    )
    return [alert for alert in candidates if category in alert.need_categories]


@foodrescue.command_handler(part_of=Food)
class FoodListingHandler:
    @handle(CreateFoodListing)
    def create_listing(self, command):
        donor = current_domain.repository_for(User).get_or_none(command.donor_id)
        if donor is None or not donor.is_donor:
            raise ObjectNotFoundError("Donor not found")

        matching_alerts = find_matching_alerts(command.category, command.expiry_date)
        food = Food.post(
            donor_id=command.donor_id,
            title=command.title,
            description=command.description,
            quantity=command.quantity,
            unit=command.unit,
            category=command.category,
            expiry_date=command.expiry_date,
            pickup_start=command.pickup_start,
            pickup_end=command.pickup_end,
            location=_decode(command.location),
            allergens=_decode(command.allergens),
            dietary_restrictions=_decode(command.dietary_restrictions),
            matching_alert_ids=[str(alert.id) for alert in matching_alerts],
            now=current_domain.clock.now(),
        )
        current_domain.repository_for(Food).add(food)

        logger.info(
            "Food listing created",
            food_id=str(food.id),
            category=food.category,
            matching_alerts=len(matching_alerts),
        )
        return {"food": food.to_payload(), "matching_alerts": [alert.to_payload() for alert in matching_alerts]}

    @handle(UpdateFoodListing)
    def update_listing(self, command):
        repo = current_domain.repository_for(Food)
        food = repo.get(command.food_id)
        food.revise(
            now=current_domain.clock.now(),
            title=command.title,
            description=command.description,
            quantity=command.quantity,
            unit=command.unit,
            category=command.category,
            expiry_date=command.expiry_date,
            pickup_start=command.pickup_start,
            pickup_end=command.pickup_end,
            location=_decode(command.location),
            allergens=_decode(command.allergens),
            dietary_restrictions=_decode(command.dietary_restrictions),
        )
        repo.add(food)
        return food.to_payload()

    @handle(DeleteFoodListing)
    def delete_listing(self, command):
        repo = current_domain.repository_for(Food)
        food = repo.get_or_none(command.food_id)
        if food is None:
            raise ObjectNotFoundError("Food listing not found")

        food.ensure_removable()
        repo._dao.delete(food)
        logger.info("Food listing deleted", food_id=command.food_id)
