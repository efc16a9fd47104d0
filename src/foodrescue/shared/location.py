"""GeoPoint value object shared by food listings and emergency alerts."""

from geopy.distance import geodesic
from protean.fields import Float, String

from foodrescue.domain import foodrescue


@foodrescue.value_object
class GeoPoint:
    """A WGS84 coordinate pair with an optional street address."""

    lat: Float(required=True, min_value=-90.0, max_value=90.0)
    lng: Float(required=True, min_value=-180.0, max_value=180.0)
    address: String(max_length=500)

    def distance_km(self, other: "GeoPoint") -> float:
        """Geodesic distance to another point on the WGS84 ellipsoid."""
        return geodesic((self.lat, self.lng), (other.lat, other.lng)).km
