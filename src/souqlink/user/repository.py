"""Repository for the User aggregate."""

from souqlink.domain import souqlink
from souqlink.shared.email import normalize_email
from souqlink.user.user import User, UserRole


@souqlink.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Find a user by email, ignoring case."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self._dao.query.filter(email=normalized).all().first

    def list_all(self) -> list[User]:
        return self._dao.query.order_by("name").limit(None).all().items

    def list_couriers(self) -> list[User]:
        """Couriers, newest first."""
        return self._dao.query.filter(role=UserRole.COURIER.value).order_by("-created_at").limit(None).all().items
