"""Delivery cancellation — command and handler.

Cancelling returns the listing to the matchable pool: it becomes available
again and its shelter and volunteer assignment is cleared.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from foodrescue.delivery.delivery import Delivery
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="Delivery")
class CancelDelivery:
    """Call off a scheduled or in-progress delivery."""

    delivery_id = Identifier(required=True)


def cancel_delivery(delivery: Delivery) -> dict:
    """Cancel ``delivery`` and release its listing within the current unit of work."""
    now = current_domain.clock.now()
    food_repo = current_domain.repository_for(Food)
    food = food_repo.get(delivery.food_id)

    delivery.cancel(now=now)
    food.release(now=now)

    current_domain.repository_for(Delivery).add(delivery)
    food_repo.add(food)

    logger.info("Delivery cancelled", delivery_id=str(delivery.id), food_id=str(food.id))
    return {"delivery": delivery.to_payload(), "food": food.to_payload()}


@foodrescue.command_handler(part_of=Delivery)
class CancelDeliveryHandler:
    @handle(CancelDelivery)
    def cancel(self, command):
        delivery = current_domain.repository_for(Delivery).get(command.delivery_id)
        return cancel_delivery(delivery)
