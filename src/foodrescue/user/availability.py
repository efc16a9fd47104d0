"""Volunteer availability — command and handler."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from foodrescue.domain import foodrescue
from foodrescue.user.user import User


@foodrescue.command(part_of="User")
class UpdateAvailability:
    """Replace a volunteer's recurring weekly availability."""

    user_id = Identifier(required=True)
    availability = Text(required=True)  # JSON list of {day, start_time, end_time}


@foodrescue.command_handler(part_of=User)
class UpdateAvailabilityHandler:
    @handle(UpdateAvailability)
    def update_availability(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.replace_availability(json.loads(command.availability), now=current_domain.clock.now())
        repo.add(user)
