"""
Authentication Middleware Module - Black Box Interface

Purpose: Gate every non-public request on a valid Bearer token
Interface: AuthMiddleware, create_bearer_token_middleware()
Hidden: Header extraction, skip rules, error formatting

Runs before any route handler. A rejected request never reaches a handler,
so no side effect can happen on its behalf.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ..auth.service import AuthenticationService

logger = logging.getLogger(__name__)

ServiceResolver = Callable[[Request], Optional[AuthenticationService]]

DEFAULT_SKIP_PATHS: Dict[str, list] = {
    "/": ["GET"],
    "/healthz": ["GET"],
    "/health": ["GET"],
    "/docs": ["GET"],
    "/docs/oauth2-redirect": ["GET"],
    "/redoc": ["GET"],
    "/openapi.json": ["GET"],
    "/users": ["POST"],
    "/login": ["POST"],
}


class AuthMiddleware:
    """
    Bearer token authentication middleware for FastAPI applications.

    On success the resolved username is stored on ``request.state.identity``.
    Every failure cause gets the same 401 body; the cause is only logged.
    """

    def __init__(
        self,
        service_resolver: ServiceResolver,
        skip_paths: Optional[Dict[str, list]] = None,
        log_attempts: bool = True
    ):
        """
        Initialize authentication middleware.

        Args:
            service_resolver: Returns the AuthenticationService for a request
                (looked up per request because services are built at startup)
            skip_paths: Dict of {path: [methods]} to skip authentication
            log_attempts: Whether to log authentication attempts
        """
        self.service_resolver = service_resolver
        self.skip_paths = skip_paths if skip_paths is not None else dict(DEFAULT_SKIP_PATHS)
        self.log_attempts = log_attempts

    def should_skip_auth(self, request: Request) -> bool:
        """Check if authentication should be skipped for this request."""
        method = request.method.upper()
        # CORS preflight never carries credentials
        if method == "OPTIONS":
            return True

        path = str(request.url.path)
        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    @staticmethod
    def format_error(status_code: int, message: str) -> Dict[str, Any]:
        return {
            "error": message,
            "status": status_code
        }

    async def __call__(self, request: Request, call_next):
        """Process the request through authentication middleware."""
        if self.should_skip_auth(request):
            return await call_next(request)

        auth_service = self.service_resolver(request)
        if auth_service is None:
            return JSONResponse(
                status_code=503,
                content=self.format_error(503, "Service not initialized")
            )

        try:
            result = await auth_service.authenticate(request.headers.get("Authorization"))
        except Exception:
            logger.exception(f"Error during authentication of {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error during authentication")
            )

        if not result.ok:
            if self.log_attempts:
                logger.warning(
                    f"Rejected {request.method} {request.url.path}: "
                    f"{type(result.failure).__name__}"
                )
            return JSONResponse(
                status_code=401,
                content=self.format_error(401, result.error),
                headers={"WWW-Authenticate": "Bearer"},
            )

        if self.log_attempts:
            logger.debug(f"Request authenticated for user: {result.identity}")

        # Store identity for downstream use
        request.state.identity = result.identity

        return await call_next(request)


def create_bearer_token_middleware(
    service_resolver: ServiceResolver,
    skip_paths: Optional[Dict[str, list]] = None,
) -> AuthMiddleware:
    """
    Factory function to create Bearer token authentication middleware.

    Args:
        service_resolver: Returns the AuthenticationService for a request
        skip_paths: Extra public paths, merged over the defaults

    Returns:
        Configured AuthMiddleware instance
    """
    paths = dict(DEFAULT_SKIP_PATHS)
    if skip_paths:
        paths.update(skip_paths)

    return AuthMiddleware(service_resolver=service_resolver, skip_paths=paths)


__all__ = [
    "AuthMiddleware",
    "DEFAULT_SKIP_PATHS",
    "create_bearer_token_middleware",
]
