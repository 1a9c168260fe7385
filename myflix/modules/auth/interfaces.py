"""Authentication interfaces following Black Box Design principles."""
from datetime import datetime
from typing import Any, Callable, Dict, Protocol

Clock = Callable[[], datetime]


class UserDirectory(Protocol):
    """What the auth stack needs to know about users."""

    async def user_exists(self, username: str) -> bool:
        """Return True if a user with this exact username exists."""
        ...

    async def verify_password(self, username: str, raw_password: str) -> bool:
        """
        Check a password.

        Raises:
            NotFound: If the user does not exist
        """
        ...

    async def get_user(self, username: str) -> Dict[str, Any]:
        """Return the public record for a user."""
        ...


class TokenValidator(Protocol):
    """Protocol for token validation - allows swappable implementations."""

    async def verify(self, token: str) -> str:
        """
        Validate a token and resolve the identity it names.

        Args:
            token: Raw token string (no scheme prefix)

        Returns:
            Username of an existing user

        Raises:
            AuthenticationError: InvalidToken, TokenExpired or StaleIdentity
        """
        ...
