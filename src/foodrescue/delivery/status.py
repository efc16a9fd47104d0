"""Delivery status updates — command and handler.

Completing a delivery marks its listing picked up and counts the delivery
towards the volunteer's total; any other forward move keeps the listing
reserved. A move to ``cancelled`` follows the cancellation rules.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from foodrescue.delivery.cancellation import cancel_delivery
from foodrescue.delivery.delivery import Delivery, DeliveryStatus
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food
from foodrescue.user.user import User

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="Delivery")
class UpdateDeliveryStatus:
    """Move a delivery to a new status."""

    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=20, choices=DeliveryStatus)


@foodrescue.command_handler(part_of=Delivery)
class UpdateDeliveryStatusHandler:
    @handle(UpdateDeliveryStatus)
    def update_status(self, command):
        delivery_repo = current_domain.repository_for(Delivery)
        delivery = delivery_repo.get(command.delivery_id)

        if command.status == DeliveryStatus.CANCELLED.value:
            return cancel_delivery(delivery)

        now = current_domain.clock.now()
        food_repo = current_domain.repository_for(Food)
        food = food_repo.get(delivery.food_id)

        delivery.advance(command.status, now=now)
        if delivery.is_completed:
            food.mark_picked_up(now=now)

            user_repo = current_domain.repository_for(User)
            volunteer = user_repo.get(delivery.volunteer_id)
            volunteer.record_completed_delivery(str(delivery.id), now=now)
            user_repo.add(volunteer)
        else:
            food.keep_reserved(now=now)

        delivery_repo.add(delivery)
        food_repo.add(food)

        logger.info(
            "Delivery status updated",
            delivery_id=str(delivery.id),
            status=delivery.status,
            food_status=food.status,
        )
        return {"delivery": delivery.to_payload(), "food": food.to_payload()}
