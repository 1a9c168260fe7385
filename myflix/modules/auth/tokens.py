"""
Signed access tokens.

Tokens are HS256 JWTs carrying ``sub`` (username), ``iat`` and ``exp``.
They are stateless: nothing is stored server-side and nothing is revoked
before expiry.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Optional

import jwt

from ...config.provider import AuthConfig
from ..errors import InvalidToken, StaleIdentity, TokenExpired
from .interfaces import Clock, UserDirectory

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class IssuedToken:
    """A freshly signed token and its validity window."""
    token: str
    username: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """Exchanges an already-verified username for a signed token."""

    def __init__(self, config: AuthConfig, clock: Optional[Clock] = None):
        """
        Initialize token issuer.

        Args:
            config: Signing secret, algorithm and token lifetime
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.config = config
        self.clock = clock or utc_now
        self.ttl = timedelta(seconds=config.token_ttl_seconds)

    def issue_token(self, username: str) -> IssuedToken:
        """
        Sign a token for ``username`` valid for the configured lifetime.

        Args:
            username: Identity to embed

        Returns:
            IssuedToken with the encoded token and its expiry
        """
        # JWT timestamps have one-second resolution
        issued_at = self.clock().replace(microsecond=0)
        expires_at = issued_at + self.ttl
        claims = {
            "sub": username,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)
        return IssuedToken(
            token=token,
            username=username,
            issued_at=issued_at,
            expires_at=expires_at,
        )


class TokenVerifier:
    """
    Validates tokens and resolves them to existing users.

    Expiry is checked here against the injected clock rather than inside
    PyJWT so that a token expiring at ``t`` is valid for every instant
    strictly before ``t`` and invalid for every instant after it.
    """

    def __init__(self, config: AuthConfig, users: UserDirectory, clock: Optional[Clock] = None):
        """
        Initialize token verifier.

        Args:
            config: Signing secret and algorithm
            users: Directory used to reject tokens naming deleted users
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.config = config
        self.users = users
        self.clock = clock or utc_now

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Check signature, required claims and expiry.

        Returns:
            Verified claims

        Raises:
            InvalidToken: Bad signature, malformed token or bad claims
            TokenExpired: ``exp`` is not after the current instant
        """
        try:
            claims = jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}") from e

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidToken("Token exp claim is not a timestamp")
        if not isinstance(claims.get("sub"), str) or not claims["sub"]:
            raise InvalidToken("Token sub claim is not a username")

        if exp <= self.clock().timestamp():
            raise TokenExpired(f"Token for {claims['sub']} expired at {exp}")

        return claims

    async def verify(self, token: str) -> str:
        """
        Resolve a token to the username of an existing user.

        Raises:
            InvalidToken, TokenExpired: See decode()
            StaleIdentity: The named user no longer exists
        """
        claims = self.decode(token)
        username = claims["sub"]
        if not await self.users.user_exists(username):
            raise StaleIdentity(f"Token names unknown user {username}")
        return username
