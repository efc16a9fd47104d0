"""Alert removal — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from foodrescue.alert.alert import EmergencyAlert
from foodrescue.domain import foodrescue

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="EmergencyAlert")
class DeleteEmergencyAlert:
    """Remove an alert together with its needs and responses."""

    alert_id = Identifier(required=True)


@foodrescue.command_handler(part_of=EmergencyAlert)
class DeleteEmergencyAlertHandler:
    @handle(DeleteEmergencyAlert)
    def delete_alert(self, command):
        repo = current_domain.repository_for(EmergencyAlert)
        alert = repo.get_or_none(command.alert_id)
        if alert is None:
            raise ObjectNotFoundError("Alert not found")

        repo._dao.delete(alert)
        logger.info("Emergency alert deleted", alert_id=command.alert_id)
