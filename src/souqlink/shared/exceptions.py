"""Domain errors that are not covered by Protean's own exception types.

Validation problems use ``protean.exceptions.ValidationError`` and missing
records use ``protean.exceptions.ObjectNotFoundError``; the classes below
carry the conflict and credential cases, each with the HTTP status the API
maps it to.
"""


class SouqLinkError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(SouqLinkError):
    status_code = 409


class OrderAlreadyClaimed(ConflictError):
    """Another courier already holds the order."""

    status_code = 400


class EmailAlreadyRegistered(ConflictError):
    status_code = 409


class InvalidCredentials(SouqLinkError):
    status_code = 401
