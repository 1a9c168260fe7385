"""
Authentication Module - Black Box Interface

Purpose: Issue and verify access tokens
Interface: AuthFactory.build(), AuthenticationService.login(), .authenticate()
Hidden: JWT claims layout, signing algorithm, expiry arithmetic

This module can be replaced with any other token scheme without affecting
other modules.
"""

from .factory import AuthFactory
from .service import AuthenticationService, AuthResult, DefaultAuthenticationService
from .tokens import IssuedToken, TokenIssuer, TokenVerifier

__all__ = [
    "AuthFactory",
    "AuthenticationService",
    "AuthResult",
    "DefaultAuthenticationService",
    "IssuedToken",
    "TokenIssuer",
    "TokenVerifier",
]
