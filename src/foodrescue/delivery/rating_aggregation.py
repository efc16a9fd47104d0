"""Volunteer rating aggregation — event handler.

Recomputes a volunteer's average rating from every rated delivery they have
made whenever one of their deliveries is rated. The recompute runs in its own
unit of work after the rating commits; when two ratings for the same
volunteer land together, whichever recompute commits last wins.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain

from foodrescue.delivery.delivery import Delivery
from foodrescue.delivery.events import DeliveryRated
from foodrescue.domain import foodrescue
from foodrescue.user.user import User

logger = structlog.get_logger(__name__)


def recompute_average(volunteer_id: str) -> float | None:
    """Store the mean rating over all of the volunteer's rated deliveries."""
    deliveries = (
        current_domain.repository_for(Delivery)
        ._dao.query.filter(volunteer_id=volunteer_id, rating__isnull=False)
        .all()
        .items
    )
    ratings = [d.rating for d in deliveries]

    user_repo = current_domain.repository_for(User)
    volunteer = user_repo.get(volunteer_id)
    volunteer.record_average_rating(ratings, now=current_domain.clock.now())
    user_repo.add(volunteer)

    logger.info(
        "Volunteer rating recomputed",
        volunteer_id=volunteer_id,
        rating=volunteer.rating,
        rated_deliveries=len(ratings),
    )
    return volunteer.rating


@foodrescue.event_handler(part_of=Delivery)
class VolunteerRatingAggregator:
    @handle(DeliveryRated)
    def on_delivery_rated(self, event):
        recompute_average(event.volunteer_id)
