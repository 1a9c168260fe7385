"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- A clean interface for login and per-request authentication
- Standardized authentication results
- A single place where token failure causes are logged and then hidden
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from ..errors import AuthenticationError, InvalidCredentials, InvalidToken, NotFound
from .interfaces import TokenValidator, UserDirectory
from .tokens import IssuedToken, TokenIssuer

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass
class AuthResult:
    """Standardized authentication result."""
    ok: bool
    identity: Optional[str]
    failure: Optional[AuthenticationError] = None

    @property
    def error(self) -> Optional[str]:
        """Client-safe message; identical for every failure cause."""
        return self.failure.public_message if self.failure else None


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        InvalidToken: Header missing, wrong scheme or empty token
    """
    if not authorization:
        raise InvalidToken("No Authorization header")
    if not authorization.startswith(BEARER_PREFIX):
        raise InvalidToken("Authorization header is not a Bearer token")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise InvalidToken("Empty Bearer token")
    return token


class AuthenticationService(Protocol):
    """Protocol for authentication services."""

    async def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """Authenticate a request from its Authorization header."""
        ...

    async def login(self, username: str, password: str) -> Tuple[Dict[str, Any], IssuedToken]:
        """Exchange credentials for a token."""
        ...


class DefaultAuthenticationService:
    """
    Default implementation of AuthenticationService.

    This facade hides the issuer, verifier and user directory behind two
    calls: login() at the start of a client's session and authenticate()
    on every protected request.
    """

    def __init__(self, issuer: TokenIssuer, validator: TokenValidator, users: UserDirectory):
        """
        Initialize with injected dependencies.

        Args:
            issuer: Signs tokens after a successful login
            validator: Verifies presented tokens
            users: Directory used to check passwords
        """
        self._issuer = issuer
        self._validator = validator
        self._users = users

    async def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """
        Run the per-request state machine.

        Unauthenticated -> Rejected (InvalidToken | TokenExpired | StaleIdentity)
        Unauthenticated -> Authenticated (identity resolved)

        Args:
            authorization: Authorization header value

        Returns:
            AuthResult; on failure ``failure`` holds the precise cause
        """
        try:
            token = extract_bearer_token(authorization)
            identity = await self._validator.verify(token)
        except AuthenticationError as e:
            logger.debug(f"Authentication rejected ({type(e).__name__}): {e.reason}")
            return AuthResult(ok=False, identity=None, failure=e)

        return AuthResult(ok=True, identity=identity)

    async def login(self, username: str, password: str) -> Tuple[Dict[str, Any], IssuedToken]:
        """
        Verify credentials and issue a token.

        Returns:
            Tuple of (public user record, issued token)

        Raises:
            InvalidCredentials: Unknown user or wrong password, indistinguishably
        """
        if not username or not password:
            raise InvalidCredentials("Missing username or password")

        try:
            matches = await self._users.verify_password(username, password)
        except NotFound:
            raise InvalidCredentials(f"Login for unknown user {username}") from None

        if not matches:
            raise InvalidCredentials(f"Wrong password for {username}")

        user = await self._users.get_user(username)
        issued = self._issuer.issue_token(username)
        logger.info(f"Issued token for {username}, expires {issued.expires_at.isoformat()}")
        return user, issued
