"""Geodesic locator — brute-force radius search through the repository.

Loads every record with a location and keeps those within the radius, nearest
first. Good enough for the memory provider and small deployments.
"""

from protean.utils.globals import current_domain

from foodrescue.geo.port import GeoLocatorPort


class GeodesicLocator(GeoLocatorPort):
    def __init__(self, aggregate_cls):
        self.aggregate_cls = aggregate_cls

    def find_near(self, point, radius_meters: float) -> list[str]:
        records = current_domain.repository_for(self.aggregate_cls)._dao.query.all().items
        radius_km = radius_meters / 1000.0

        distances = []
        for record in records:
            if record.location is None:
                continue
            distance = point.distance_km(record.location)
            if distance <= radius_km:
                distances.append((distance, str(record.id)))

        distances.sort(key=lambda pair: pair[0])
        return [record_id for _, record_id in distances]
