"""FastAPI dependencies shared by the routers."""

from fastapi import HTTPException, Path, Request

from ..errors import Forbidden, InvalidToken


def get_services(request: Request):
    """Return the Services object built during startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(503, "Service not initialized")
    return services


def current_identity(request: Request) -> str:
    """Username resolved by AuthMiddleware for this request."""
    identity = getattr(request.state, "identity", None)
    if not identity:
        # Route was reached without passing through the auth gate
        raise InvalidToken("No authenticated identity on request")
    return identity


def authorized_username(request: Request, Username: str = Path(...)) -> str:
    """
    Path username, once the caller is known to be that user.

    A token only grants access to its own user's resources.

    Raises:
        Forbidden: Token identity differs from the path username
    """
    identity = current_identity(request)
    if identity != Username:
        raise Forbidden()
    return Username
