"""Emergency alert domain events."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from foodrescue.domain import foodrescue


@foodrescue.event(part_of="EmergencyAlert")
class EmergencyAlertRaised:
    """A shelter posted an urgent need for food."""

    __version__ = 1

    alert_id = Identifier(required=True)
    shelter_id = Identifier(required=True)
    title = String(required=True)
    priority = String(required=True)
    need_categories = Text(required=True)  # JSON list
    deadline = DateTime(required=True)
    matching_food_ids = Text(required=True)  # JSON list of listings that could serve the alert
    raised_at = DateTime(required=True)


@foodrescue.event(part_of="EmergencyAlert")
class AlertResponseRecorded:
    """A donor offered one of their listings against an alert."""

    __version__ = 1

    alert_id = Identifier(required=True)
    response_id = Identifier(required=True)
    donor_id = Identifier(required=True)
    food_id = Identifier(required=True)
    response_count = Integer(required=True)
    responded_at = DateTime(required=True)


@foodrescue.event(part_of="EmergencyAlert")
class AlertStatusChanged:
    """A shelter moved its alert to a new status."""

    __version__ = 1

    alert_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)
