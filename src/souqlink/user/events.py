"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from souqlink.domain import souqlink


@souqlink.event(part_of="User")
class UserRegistered:
    """A new customer, courier or admin account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    name: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@souqlink.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    phone: String()
