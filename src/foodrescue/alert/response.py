"""Alert responses — a donor offers a listing against an alert.

The alert's status is checked before the offered food, so an inactive alert
is reported as such whatever the food's state. Recording a response changes
neither the alert's status nor the food's.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from foodrescue.alert.alert import EmergencyAlert
from foodrescue.domain import foodrescue
from foodrescue.food.food import Food


@foodrescue.command(part_of="EmergencyAlert")
class RespondToAlert:
    """Offer a specific food listing against an active alert."""

    alert_id = Identifier(required=True)
    donor_id = Identifier(required=True)
    food_id = Identifier(required=True)


@foodrescue.command_handler(part_of=EmergencyAlert)
class RespondToAlertHandler:
    @handle(RespondToAlert)
    def respond(self, command):
        repo = current_domain.repository_for(EmergencyAlert)
        alert = repo.get_or_none(command.alert_id)
        if alert is None:
            raise ObjectNotFoundError("Alert not found")
        alert.ensure_accepting_responses()

        food = current_domain.repository_for(Food).get_or_none(command.food_id)
        if food is None or not food.is_available:
            raise ObjectNotFoundError("Food not available")

        alert.record_response(command.donor_id, command.food_id, now=current_domain.clock.now())
        repo.add(alert)
        return alert.to_payload()
