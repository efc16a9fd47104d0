"""Delivery rating — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from foodrescue.delivery.delivery import Delivery
from foodrescue.domain import foodrescue


@foodrescue.command(part_of="Delivery")
class RateDelivery:
    """Rate a completed delivery from 1 to 5, with optional feedback."""

    delivery_id = Identifier(required=True)
    rating = Integer(required=True)
    feedback = Text()


@foodrescue.command_handler(part_of=Delivery)
class RateDeliveryHandler:
    @handle(RateDelivery)
    def rate_delivery(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.rate(command.rating, now=current_domain.clock.now(), feedback=command.feedback)
        repo.add(delivery)
        return delivery.to_payload()
