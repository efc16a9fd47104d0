"""Realtime broadcasts — event handlers that push state changes to clients.

Each successful operation is announced exactly once, after its unit of work
has committed. Publishing is fire-and-forget: a failing or unreachable
publisher is logged and never undoes the change being announced.

    DeliveryScheduled      → food-matched            {food, delivery}
    DeliveryStatusUpdated  → delivery-status-update  {delivery, food}
    DeliveryCancelled      → delivery-cancelled      {delivery, food}
    EmergencyAlertRaised   → new-emergency-alert     {alert, matching_food}
    AlertResponseRecorded  → alert-response          {alert, food}
    AlertStatusChanged     → alert-status-update     {alert}
    FoodListed             → new-food-listing        {food, matching_alerts}  (only when alerts match)
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from foodrescue.alert.alert import EmergencyAlert
from foodrescue.alert.events import AlertResponseRecorded, AlertStatusChanged, EmergencyAlertRaised
from foodrescue.delivery.delivery import Delivery
from foodrescue.delivery.events import DeliveryCancelled, DeliveryScheduled, DeliveryStatusUpdated
from foodrescue.domain import foodrescue
from foodrescue.food.events import FoodListed
from foodrescue.food.food import Food
from foodrescue.realtime import get_publisher

logger = structlog.get_logger(__name__)

FOOD_MATCHED = "food-matched"
DELIVERY_STATUS_UPDATE = "delivery-status-update"
DELIVERY_CANCELLED = "delivery-cancelled"
NEW_EMERGENCY_ALERT = "new-emergency-alert"
ALERT_RESPONSE = "alert-response"
ALERT_STATUS_UPDATE = "alert-status-update"
NEW_FOOD_LISTING = "new-food-listing"


def _broadcast(event_name: str, build_payload) -> None:
    """Build the payload and publish it, logging instead of raising on failure."""
    try:
        result = get_publisher().publish(event_name, build_payload())
    except Exception as exc:
        logger.error("Realtime broadcast failed", event_name=event_name, error=str(exc))
        return

    if result.get("status") != "sent":
        logger.warning("Realtime broadcast rejected", event_name=event_name, error=result.get("error"))


def _load_payloads(aggregate_cls, ids) -> list[dict]:
    repo = current_domain.repository_for(aggregate_cls)
    return [record.to_payload() for record in (repo.get_or_none(i) for i in ids) if record is not None]


def _delivery_and_food(event) -> dict:
    delivery = current_domain.repository_for(Delivery).get(event.delivery_id)
    food = current_domain.repository_for(Food).get(event.food_id)
    return {"delivery": delivery.to_payload(), "food": food.to_payload()}


@foodrescue.event_handler(part_of=Delivery)
class DeliveryBroadcaster:
    @handle(DeliveryScheduled)
    def on_delivery_scheduled(self, event: DeliveryScheduled) -> None:
        _broadcast(FOOD_MATCHED, lambda: _delivery_and_food(event))

    @handle(DeliveryStatusUpdated)
    def on_delivery_status_updated(self, event: DeliveryStatusUpdated) -> None:
        _broadcast(DELIVERY_STATUS_UPDATE, lambda: _delivery_and_food(event))

    @handle(DeliveryCancelled)
    def on_delivery_cancelled(self, event: DeliveryCancelled) -> None:
        _broadcast(DELIVERY_CANCELLED, lambda: _delivery_and_food(event))


@foodrescue.event_handler(part_of=EmergencyAlert)
class AlertBroadcaster:
    @handle(EmergencyAlertRaised)
    def on_alert_raised(self, event: EmergencyAlertRaised) -> None:
        def payload():
            alert = current_domain.repository_for(EmergencyAlert).get(event.alert_id)
            return {
                "alert": alert.to_payload(),
                "matching_food": _load_payloads(Food, json.loads(event.matching_food_ids)),
            }

        _broadcast(NEW_EMERGENCY_ALERT, payload)

    @handle(AlertResponseRecorded)
    def on_response_recorded(self, event: AlertResponseRecorded) -> None:
        def payload():
            alert = current_domain.repository_for(EmergencyAlert).get(event.alert_id)
            food = current_domain.repository_for(Food).get(event.food_id)
            return {"alert": alert.to_payload(), "food": food.to_payload()}

        _broadcast(ALERT_RESPONSE, payload)

    @handle(AlertStatusChanged)
    def on_status_changed(self, event: AlertStatusChanged) -> None:
        def payload():
            alert = current_domain.repository_for(EmergencyAlert).get(event.alert_id)
            return {"alert": alert.to_payload()}

        _broadcast(ALERT_STATUS_UPDATE, payload)


@foodrescue.event_handler(part_of=Food)
class FoodListingBroadcaster:
    @handle(FoodListed)
    def on_food_listed(self, event: FoodListed) -> None:
        alert_ids = json.loads(event.matching_alert_ids) if event.matching_alert_ids else []
        if not alert_ids:
            return

        def payload():
            food = current_domain.repository_for(Food).get(event.food_id)
            return {"food": food.to_payload(), "matching_alerts": _load_payloads(EmergencyAlert, alert_ids)}

        _broadcast(NEW_FOOD_LISTING, payload)
