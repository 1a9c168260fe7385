"""
Error taxonomy shared by all myFlix modules.

Modules raise these exceptions; the API layer translates them to HTTP
responses at the route boundary. Nothing below carries driver objects or
stack details meant for the client.
"""

from dataclasses import dataclass
from typing import Any, Dict, List


class MyFlixError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class FieldError:
    """A single violated input field."""

    param: str
    msg: str
    location: str = "body"

    def to_dict(self) -> Dict[str, Any]:
        return {"param": self.param, "msg": self.msg, "location": self.location}


class ValidationError(MyFlixError):
    """Client input is malformed. Carries every violated field, not just the first."""

    status_code = 422

    def __init__(self, errors: List[FieldError]):
        super().__init__("; ".join(f"{e.param}: {e.msg}" for e in errors))
        self.errors = errors


class DuplicateUsername(MyFlixError):
    """A user with this username already exists."""

    def __init__(self, username: str):
        super().__init__(f"{username} already exists")
        self.username = username


class NotFound(MyFlixError):
    """The requested user or movie does not exist."""

    def __init__(self, name: str):
        super().__init__(f"{name} was not found")
        self.name = name


class AuthenticationError(MyFlixError):
    """
    Base for token failures.

    Subclasses record the precise cause for server-side logs. Clients only
    ever see the uniform message so they cannot tell the causes apart.
    """

    status_code = 401
    public_message = "Unauthorized"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidToken(AuthenticationError):
    """Token is missing, malformed or carries a bad signature."""


class TokenExpired(AuthenticationError):
    """Token signature is valid but its expiry has passed."""


class StaleIdentity(AuthenticationError):
    """Token is valid but the user it names no longer exists."""


class InvalidCredentials(AuthenticationError):
    """Login failed: unknown username or wrong password."""

    public_message = "Incorrect username or password"


class Forbidden(MyFlixError):
    """Authenticated identity may not act on the requested user."""

    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


__all__ = [
    "MyFlixError",
    "FieldError",
    "ValidationError",
    "DuplicateUsername",
    "NotFound",
    "AuthenticationError",
    "InvalidToken",
    "TokenExpired",
    "StaleIdentity",
    "InvalidCredentials",
    "Forbidden",
]
