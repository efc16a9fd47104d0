"""Food matching — pairs a listing with a shelter and an available volunteer.

Preconditions are checked in order: the listing exists, it is still
available, the shelter exists, and some volunteer's weekly availability
covers the pickup window. Any failure leaves every record untouched.

On success the new delivery and the reserved listing are added in the same
unit of work, so they commit together. When two matches race for the same
listing, the second commit fails its version check; the handler is retried,
sees the listing already reserved and raises ``InvalidStateError``.
"""

import structlog
from protean import handle
from protean.exceptions import InvalidStateError, ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from foodrescue.delivery.delivery import DEFAULT_ESTIMATED_DELIVERY_MINUTES, Delivery
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food
from foodrescue.matching import get_availability_matcher
from foodrescue.user.user import User, UserRole

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="Food")
class MatchFood:
    """Match an available listing to a shelter and schedule its delivery."""

    food_id = Identifier(required=True)
    shelter_id = Identifier(required=True)
    notes = Text()


@foodrescue.command_handler(part_of=Food)
class MatchFoodHandler:
    @handle(MatchFood)
    def match_food(self, command):
        food_repo = current_domain.repository_for(Food)
        user_repo = current_domain.repository_for(User)

        food = food_repo.get_or_none(command.food_id)
        if food is None:
            raise ObjectNotFoundError("Food listing not found")
        if not food.is_available:
            raise InvalidStateError("Food is no longer available")

        shelter = user_repo.get_or_none(command.shelter_id)
        if shelter is None or not shelter.is_shelter:
            raise ObjectNotFoundError("Shelter not found")

        candidates = user_repo._dao.query.filter(role=UserRole.VOLUNTEER.value).all().items
        volunteer = get_availability_matcher().find_available_volunteer(
            food.pickup_start, food.pickup_end, candidates
        )
        if volunteer is None:
            logger.info(
                "No volunteer available for pickup window",
                food_id=str(food.id),
                pickup_start=food.pickup_start.isoformat(),
            )
            raise ObjectNotFoundError("No available volunteers found")

        now = current_domain.clock.now()
        delivery = Delivery.schedule(
            food_id=str(food.id),
            volunteer_id=str(volunteer.id),
            shelter_id=str(shelter.id),
            pickup_time=food.pickup_start,
            estimated_minutes=getattr(
                current_domain, "ESTIMATED_DELIVERY_MINUTES", DEFAULT_ESTIMATED_DELIVERY_MINUTES
            ),
            notes=command.notes,
            now=now,
        )
        food.reserve(shelter_id=str(shelter.id), volunteer_id=str(volunteer.id), now=now)

        current_domain.repository_for(Delivery).add(delivery)
        food_repo.add(food)

        logger.info(
            "Food matched to shelter",
            food_id=str(food.id),
            delivery_id=str(delivery.id),
            shelter_id=str(shelter.id),
            volunteer_id=str(volunteer.id),
        )
        return {"food": food.to_payload(), "delivery": delivery.to_payload()}
