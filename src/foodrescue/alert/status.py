"""Alert status updates — command and handler.

The shelter sets the status directly. Any of the four statuses is accepted
from any other; fulfilment is never inferred from the responses.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from foodrescue.alert.alert import AlertStatus, EmergencyAlert
from foodrescue.domain import foodrescue


@foodrescue.command(part_of="EmergencyAlert")
class UpdateAlertStatus:
    """Set an alert's status."""

    alert_id = Identifier(required=True)
    status = String(required=True, max_length=25, choices=AlertStatus)


@foodrescue.command_handler(part_of=EmergencyAlert)
class UpdateAlertStatusHandler:
    @handle(UpdateAlertStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(EmergencyAlert)
        alert = repo.get(command.alert_id)
        alert.change_status(command.status, now=current_domain.clock.now())
        repo.add(alert)
        return alert.to_payload()
