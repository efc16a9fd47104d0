"""Food listing search — filtered reads over the listing repository."""

from datetime import datetime

from protean.utils.globals import current_domain

from foodrescue.food.food import Food
from foodrescue.geo import get_locator
from foodrescue.shared.location import GeoPoint


def search_food_listings(
    status: str | None = None,
    category: str | None = None,
    expiry_from: datetime | None = None,
    expiry_to: datetime | None = None,
    near: GeoPoint | None = None,
    radius_km: float | None = None,
) -> list[Food]:
    """Listings matching every given filter, newest first.

    ``near`` and ``radius_km`` only apply together.
    """
    criteria = {}
    if status:
        criteria["status"] = status
    if category:
        criteria["category"] = category
    if expiry_from:
        criteria["expiry_date__gte"] = expiry_from
    if expiry_to:
        criteria["expiry_date__lte"] = expiry_to
    if near is not None and radius_km:
        criteria["id__in"] = get_locator(Food).find_near(near, radius_km * 1000)
        if not criteria["id__in"]:
            return []

    query = current_domain.repository_for(Food)._dao.query
    if criteria:
        query = query.filter(**criteria)
    return query.order_by("-created_at").all().items
