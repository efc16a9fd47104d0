"""Tests for emergency alert search."""

import json
from datetime import UTC, datetime, timedelta

from foodrescue.alert.search import search_alerts
from foodrescue.geo import reset_locators
from foodrescue.shared.location import GeoPoint

MONDAY = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)


def _ids(alerts):
    return [str(a.id) for a in alerts]


class TestSearchAlerts:
    def test_high_priority_first_then_earliest_deadline(self, raise_alert):
        low = raise_alert(priority="low", deadline=MONDAY + timedelta(hours=2))["alert"]["id"]
        high_late = raise_alert(priority="high", deadline=MONDAY + timedelta(days=2))["alert"]["id"]
        medium = raise_alert(priority="medium", deadline=MONDAY + timedelta(hours=4))["alert"]["id"]
        high_soon = raise_alert(priority="high", deadline=MONDAY + timedelta(hours=6))["alert"]["id"]

        assert _ids(search_alerts()) == [high_soon, high_late, medium, low]

    def test_filter_by_status_and_priority(self, raise_alert):
        from foodrescue.alert.status import UpdateAlertStatus
        from protean import current_domain

        active = raise_alert(priority="high")["alert"]["id"]
        closed = raise_alert(priority="high")["alert"]["id"]
        raise_alert(priority="low")
        current_domain.process(UpdateAlertStatus(alert_id=closed, status="fulfilled"), asynchronous=False)

        assert _ids(search_alerts(status="active", priority="high")) == [active]
        assert _ids(search_alerts(status="fulfilled")) == [closed]

    def test_filter_by_deadline_range(self, raise_alert):
        soon = raise_alert(deadline=MONDAY + timedelta(hours=3))["alert"]["id"]
        raise_alert(deadline=MONDAY + timedelta(days=5))
        assert _ids(search_alerts(deadline_from=MONDAY, deadline_to=MONDAY + timedelta(days=1))) == [soon]

    def test_radius(self, raise_alert):
        reset_locators()
        nearby = raise_alert(location=json.dumps({"lat": 40.7128, "lng": -74.0060}))["alert"]["id"]
        raise_alert(location=json.dumps({"lat": 39.9526, "lng": -75.1652}))
        raise_alert()

        near = GeoPoint(lat=40.72, lng=-74.0)
        assert _ids(search_alerts(near=near, radius_km=5)) == [nearby]
