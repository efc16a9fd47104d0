"""Emergency alert search — filtered reads, most urgent first."""

from datetime import datetime

from protean.utils.globals import current_domain

from foodrescue.alert.alert import PRIORITY_RANK, EmergencyAlert
from foodrescue.geo import get_locator
from foodrescue.shared.location import GeoPoint


def search_alerts(
    status: str | None = None,
    priority: str | None = None,
    deadline_from: datetime | None = None,
    deadline_to: datetime | None = None,
    near: GeoPoint | None = None,
    radius_km: float | None = None,
) -> list[EmergencyAlert]:
    """Alerts matching every given filter, by priority (high first) then deadline."""
    criteria = {}
    if status:
        criteria["status"] = status
    if priority:
        criteria["priority"] = priority
    if deadline_from:
        criteria["deadline__gte"] = deadline_from
    if deadline_to:
        criteria["deadline__lte"] = deadline_to
    if near is not None and radius_km:
        criteria["id__in"] = get_locator(EmergencyAlert).find_near(near, radius_km * 1000)
        if not criteria["id__in"]:
            return []

    query = current_domain.repository_for(EmergencyAlert)._dao.query
    if criteria:
        query = query.filter(**criteria)
    alerts = query.all().items
    return sorted(alerts, key=lambda alert: (PRIORITY_RANK[alert.priority], alert.deadline))
