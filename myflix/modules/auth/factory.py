"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack from configuration
- Wires dependencies together
- Returns only the service facade (hiding implementation)
"""

import logging
from typing import Optional

from ...config.provider import AuthConfig
from .interfaces import Clock, UserDirectory
from .service import AuthenticationService, DefaultAuthenticationService
from .tokens import TokenIssuer, TokenVerifier

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates the token issuer and verifier
    - Wires them to the user directory via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build(
        auth_config: AuthConfig,
        users: UserDirectory,
        clock: Optional[Clock] = None,
    ) -> AuthenticationService:
        """
        Build the complete authentication stack.

        Args:
            auth_config: Token signing configuration
            users: User directory (normally the CredentialStore)
            clock: Optional clock shared by issuer and verifier

        Returns:
            AuthenticationService facade
        """
        issuer = TokenIssuer(auth_config, clock=clock)
        verifier = TokenVerifier(auth_config, users, clock=clock)
        logger.info(
            f"Authentication stack built ({auth_config.jwt_algorithm}, "
            f"token lifetime {auth_config.token_ttl_seconds}s)"
        )
        return DefaultAuthenticationService(issuer, verifier, users)
