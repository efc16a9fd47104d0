"""Geo locator port — radius search over records that carry a GeoPoint.

Search helpers program against this interface; a spatial index (PostGIS,
Elasticsearch geo queries) can replace the default scan via configuration.
"""

from abc import ABC, abstractmethod


class GeoLocatorPort(ABC):
    """Abstract interface for radius search."""

    @abstractmethod
    def find_near(self, point, radius_meters: float) -> list[str]:
        """Return ids of records located within ``radius_meters`` of ``point``.

        Returns:
            list of identifiers, nearest first
        """
        ...
