"""EmailAddress value object, plus the normalisation shared by users and orders.

Emails are stored lower-case and compared exactly, so every email that
enters the domain goes through ``validate_email`` (or ``normalize_email`` for
lookups).
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from souqlink.domain import souqlink

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@souqlink.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts, a dotted domain, no
    whitespace, no consecutive dots and none of the characters RFC 5322 only
    allows in quoted form.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        invalid = ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid

        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise invalid

        if ".." in email or any(ch in email for ch in _FORBIDDEN):
            raise invalid


def normalize_email(value: str | None) -> str | None:
    """Trim and lower-case an email address; blank values become None."""
    if value is None:
        return None
    email = str(value).strip().lower()
    return email or None


def validate_email(email: str, field: str = "email") -> str:
    """Return the normalised email, raising ValidationError keyed by ``field`` if it is malformed."""
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError({field: ["is required"]})

    try:
        return EmailAddress(address=normalized).address
    except ValidationError as exc:
        messages = exc.messages if isinstance(exc.messages, dict) else {}
        raise ValidationError({field: messages.get("address") or [f"Invalid email address: {email!r}"]}) from None
