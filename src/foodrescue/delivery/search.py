"""Delivery search — a volunteer's or shelter's deliveries by pickup time."""

from datetime import datetime

from protean.utils.globals import current_domain

from foodrescue.delivery.delivery import Delivery


def search_deliveries(
    status: str | None = None,
    volunteer_id: str | None = None,
    shelter_id: str | None = None,
    pickup_from: datetime | None = None,
    pickup_to: datetime | None = None,
) -> list[Delivery]:
    criteria = {}
    if status:
        criteria["status"] = status
    if volunteer_id:
        criteria["volunteer_id"] = volunteer_id
    if shelter_id:
        criteria["shelter_id"] = shelter_id
    if pickup_from:
        criteria["pickup_time__gte"] = pickup_from
    if pickup_to:
        criteria["pickup_time__lte"] = pickup_to

    query = current_domain.repository_for(Delivery)._dao.query
    if criteria:
        query = query.filter(**criteria)
    return query.order_by("pickup_time").all().items
