"""Food expiry sweep — command and handler.

Meant to be triggered periodically by an external scheduler. Available
listings whose expiry date has passed are marked expired so they drop out of
matching and alert scans. Reserved listings are left to their delivery.
"""

import structlog
from protean import handle
from protean.fields import DateTime
from protean.utils.globals import current_domain

from foodrescue.domain import foodrescue
from foodrescue.food.food import Food, FoodStatus

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="Food")
class ExpireFoodListings:
    """Expire available listings past their expiry date."""

    as_of = DateTime()  # Optional: defaults to now


@foodrescue.command_handler(part_of=Food)
class ExpireFoodListingsHandler:
    @handle(ExpireFoodListings)
    def expire_food_listings(self, command):
        now = current_domain.clock.now()
        as_of = command.as_of or now

        repo = current_domain.repository_for(Food)
        stale = repo._dao.query.filter(status=FoodStatus.AVAILABLE.value, expiry_date__lte=as_of).all().items
        if not stale:
            logger.info("No expired food listings found", as_of=as_of.isoformat())
            return 0

        for food in stale:
            food.expire(now=now)
            repo.add(food)

        logger.info("Expired food listings", count=len(stale), as_of=as_of.isoformat())
        return len(stale)
