"""
API Module - Black Box Interface

Purpose: HTTP routing and request/response shapes
Interface: create_users_router(), create_movies_router(), request/response models
Hidden: Path parameter authorization, dependency lookup

The API module only orchestrates - it contains no business logic.
All logic is delegated to appropriate modules.
"""

from .models import (
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    MovieDocument,
    UpdateUserRequest,
    UserResponse,
)
from .routes import create_movies_router, create_users_router

__all__ = [
    "CreateUserRequest",
    "LoginRequest",
    "LoginResponse",
    "MovieDocument",
    "UpdateUserRequest",
    "UserResponse",
    "create_movies_router",
    "create_users_router",
]
