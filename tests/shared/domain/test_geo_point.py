"""Tests for the GeoPoint value object."""

import pytest
from foodrescue.shared.location import GeoPoint
from protean.exceptions import ValidationError


class TestGeoPoint:
    def test_valid_point(self):
        point = GeoPoint(lat=40.7128, lng=-74.0060, address="City Hall")
        assert point.lat == 40.7128
        assert point.lng == -74.0060
        assert point.address == "City Hall"

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError):
            GeoPoint(lat=91.0, lng=0.0)

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError):
            GeoPoint(lat=0.0, lng=-181.0)

    def test_latitude_required(self):
        with pytest.raises(ValidationError):
            GeoPoint(lng=0.0)


class TestDistance:
    def test_distance_to_self_is_zero(self):
        point = GeoPoint(lat=51.5, lng=-0.12)
        assert point.distance_km(point) == pytest.approx(0.0)

    def test_one_degree_of_latitude(self):
        a = GeoPoint(lat=0.0, lng=0.0)
        b = GeoPoint(lat=1.0, lng=0.0)
        assert a.distance_km(b) == pytest.approx(110.57, abs=0.01)

    def test_distance_is_symmetric(self):
        a = GeoPoint(lat=40.7128, lng=-74.0060)
        b = GeoPoint(lat=40.7306, lng=-73.9352)
        assert a.distance_km(b) == pytest.approx(b.distance_km(a))
        assert 5 < a.distance_km(b) < 7
