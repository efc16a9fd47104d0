"""Geo locator selection — pluggable radius search."""

import os

_locators = {}


def get_locator(aggregate_cls):
    """Return the configured locator for ``aggregate_cls`` (one per aggregate).

    Uses the geodesic scan by default. Configure via the GEO_LOCATOR
    environment variable.
    """
    name = aggregate_cls.__name__
    if name not in _locators:
        adapter = os.environ.get("GEO_LOCATOR", "geodesic")
        if adapter == "geodesic":
            from foodrescue.geo.geodesic import GeodesicLocator

            _locators[name] = GeodesicLocator(aggregate_cls)
        else:
            raise ValueError(f"Unknown geo locator: {adapter}")
    return _locators[name]


def reset_locators():
    """Forget cached locators (useful for testing)."""
    _locators.clear()
