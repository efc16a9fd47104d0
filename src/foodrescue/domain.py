"""FoodRescue bounded context — donation matching and fulfillment.

Pairs donated food listings with shelters and volunteers, drives each
delivery through its lifecycle, and tracks shelters' emergency alerts.
Commands and events are processed synchronously (see domain.toml) so that
each handler runs to a single atomic commit before returning to the caller.
"""

import structlog
from protean.domain import Domain

from foodrescue.utils.logging import configure_logging

configure_logging()

logger = structlog.get_logger(__name__)

foodrescue = Domain(name="foodrescue")
