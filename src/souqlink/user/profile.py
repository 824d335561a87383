"""User profile editing — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.user.user import User


@souqlink.command(part_of="User")
class UpdateUserProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    phone: String(max_length=30)


@souqlink.command_handler(part_of=User)
class UpdateUserProfileHandler:
    @handle(UpdateUserProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(name=command.name, phone=command.phone)
        repo.add(user)
