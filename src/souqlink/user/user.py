"""User aggregate — identity records for customers, couriers and admins."""

from datetime import UTC, datetime
from enum import Enum

import bcrypt
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from souqlink.domain import souqlink
from souqlink.shared.email import normalize_email, validate_email
from souqlink.utils.settings import admin_email

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class UserRole(Enum):
    ADMIN = "admin"
    COURIER = "courier"
    CUSTOMER = "customer"


def _utcnow():
    return datetime.now(UTC)


def _hash_password(password):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError({"password": [f"Password must be at most {MAX_PASSWORD_BYTES} bytes"]})
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


@souqlink.aggregate
class User:
    """A person known to the platform, identified by a surrogate id.

    The email is unique and stored lower-case so that lookups are
    case-insensitive. The role is fixed at creation: an existing user asking
    to act under another role is refused (admins excepted).
    """

    email: String(required=True, max_length=254, unique=True)
    name: String(required=True, max_length=100)
    phone: String(max_length=30)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    password_hash: String(max_length=128)
    created_at: DateTime(default=_utcnow)

    @classmethod
    def register(cls, email, name, phone=None, role=None, password=None):
        from souqlink.user.events import UserRegistered

        email = validate_email(email)
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["is required"]})

        effective_role = role or UserRole.CUSTOMER.value
        if email == admin_email():
            effective_role = UserRole.ADMIN.value

        user = cls(
            email=email,
            name=name,
            phone=(phone or "").strip() or None,
            role=effective_role,
            password_hash=_hash_password(password) if password else None,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                name=user.name,
                role=user.role,
                registered_at=user.created_at,
            )
        )
        return user

    @property
    def has_password(self):
        return bool(self.password_hash)

    def verify_password(self, password):
        if not self.password_hash or not password:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash.encode("utf-8"))

    def ensure_role(self, requested_role):
        """Refuse to act under a role other than the stored one."""
        if not requested_role or self.role == UserRole.ADMIN.value:
            return
        if requested_role != self.role:
            raise ValidationError(
                {"role": [f"This account already exists as {self.role}. Use another email or the matching role."]}
            )

    def update_profile(self, name=None, phone=None):
        from souqlink.user.events import UserProfileUpdated

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": ["cannot be blank"]})
            self.name = name
        if phone is not None:
            self.phone = phone.strip() or None

        self.raise_(UserProfileUpdated(user_id=self.id, name=self.name, phone=self.phone))

    def matches_email(self, email):
        return self.email == normalize_email(email)
