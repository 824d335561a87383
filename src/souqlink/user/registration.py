"""User registration and login — commands and handler.

Login is an upsert keyed by email: an unknown email creates a passwordless
account, a known one is returned as long as the requested role matches (and
the password, when the account has one).
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from souqlink.domain import souqlink
from souqlink.shared.exceptions import EmailAlreadyRegistered, InvalidCredentials
from souqlink.user.user import User
from souqlink.utils.logging import get_logger

logger = get_logger(__name__)


@souqlink.command(part_of="User")
class LoginUser:
    email: String(required=True, max_length=254)
    name: String(max_length=100)
    phone: String(max_length=30)
    role: String(max_length=20)
    password: String(max_length=128)


@souqlink.command(part_of="User")
class RegisterUser:
    email: String(required=True, max_length=254)
    name: String(required=True, max_length=100)
    password: String(required=True, max_length=128)
    phone: String(max_length=30)
    role: String(max_length=20)


@souqlink.command_handler(part_of=User)
class UserAccessHandler:
    @handle(LoginUser)
    def login_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)

        if user is None:
            if command.password:
                raise InvalidCredentials("Invalid email or password")
            if not command.name:
                raise ValidationError({"name": ["is required to create an account"]})

            user = User.register(
                email=command.email,
                name=command.name,
                phone=command.phone,
                role=command.role,
            )
            repo.add(user)
            logger.info("user_created_on_login", user_id=str(user.id), role=user.role)
            return str(user.id)

        if user.has_password and not user.verify_password(command.password):
            raise InvalidCredentials("Invalid email or password")

        user.ensure_role(command.role)
        return str(user.id)

    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise EmailAlreadyRegistered("Email already registered")

        user = User.register(
            email=command.email,
            name=command.name,
            phone=command.phone,
            role=command.role,
            password=command.password,
        )
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return str(user.id)
