"""User registration — command and handler."""

import json

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from foodrescue.domain import foodrescue
from foodrescue.user.user import User, UserRole

logger = structlog.get_logger(__name__)


@foodrescue.command(part_of="User")
class RegisterUser:
    """Register a donor, shelter, or volunteer."""

    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    role = String(required=True, max_length=20, choices=UserRole)
    phone = String(max_length=20)
    availability = Text()  # JSON list of {day, start_time, end_time}


@foodrescue.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        availability = json.loads(command.availability) if command.availability else []
        user = User.register(
            name=command.name,
            email=command.email,
            role=command.role,
            phone=command.phone,
            availability=availability,
            now=current_domain.clock.now(),
        )
        current_domain.repository_for(User).add(user)
        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
