"""
HTTP routes for users, favorites and movies.

Handlers only translate between HTTP and module calls. Domain errors
propagate to the exception handlers registered in main.
"""

from typing import List

from fastapi import APIRouter, Depends

from .dependencies import authorized_username, get_services
from .models import (
    CreateUserRequest,
    DirectorInfo,
    GenreInfo,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    MovieDocument,
    UpdateUserRequest,
    UserResponse,
)


def create_users_router() -> APIRouter:
    """
    Create the users router.

    Returns:
        FastAPI router with registration, login, profile and favorites endpoints
    """
    router = APIRouter(tags=["users"])

    @router.post("/users", response_model=UserResponse, status_code=201)
    async def create_user(body: CreateUserRequest, services=Depends(get_services)):
        """
        Register a new user.

        Returns:
            201: Created user
            400: Username already exists
            422: Field validation failed
        """
        return await services.users.create_user(
            body.Username, body.Password, body.Email, body.Birthday
        )

    @router.post("/login", response_model=LoginResponse)
    async def login(body: LoginRequest, services=Depends(get_services)):
        """
        Exchange credentials for a Bearer token.

        Returns:
            200: User and token
            401: Incorrect username or password
        """
        user, issued = await services.auth.login(body.Username, body.Password)
        return LoginResponse(user=user, token=issued.token, expiresAt=issued.expires_at)

    @router.get("/users/{Username}", response_model=UserResponse)
    async def get_user(
        username: str = Depends(authorized_username),
        services=Depends(get_services),
    ):
        """Get the caller's own profile."""
        return await services.users.get_user(username)

    @router.put("/users/{Username}", response_model=UserResponse)
    async def update_user(
        body: UpdateUserRequest,
        username: str = Depends(authorized_username),
        services=Depends(get_services),
    ):
        """
        Update the caller's profile.

        Returns:
            200: Updated user
            400: New username already exists, or user not found
            403: Token belongs to another user
            422: Field validation failed
        """
        return await services.favorites.update_user(
            username, body.model_dump(exclude_unset=True)
        )

    @router.delete("/users/{Username}", response_model=MessageResponse)
    async def delete_user(
        username: str = Depends(authorized_username),
        services=Depends(get_services),
    ):
        """
        Delete the caller's account.

        Returns:
            200: Deleted
            400: User not found
            403: Token belongs to another user
        """
        await services.favorites.delete_user(username)
        return MessageResponse(message=f"{username} was deleted.")

    @router.post("/users/{Username}/movies/{MovieID}", response_model=UserResponse)
    async def add_favorite(
        MovieID: str,
        username: str = Depends(authorized_username),
        services=Depends(get_services),
    ):
        """Add a movie to the caller's favorites (idempotent)."""
        return await services.favorites.add_favorite(username, MovieID)

    @router.delete("/users/{Username}/movies/{MovieID}", response_model=UserResponse)
    async def remove_favorite(
        MovieID: str,
        username: str = Depends(authorized_username),
        services=Depends(get_services),
    ):
        """Remove a movie from the caller's favorites (idempotent)."""
        return await services.favorites.remove_favorite(username, MovieID)

    return router


def create_movies_router() -> APIRouter:
    """
    Create the read-only movies router. All routes require authentication.
    """
    router = APIRouter(prefix="/movies", tags=["movies"])

    @router.get("", response_model=List[MovieDocument])
    async def list_movies(services=Depends(get_services)):
        return await services.movies.list_movies()

    @router.get("/genres/{Name}", response_model=GenreInfo)
    async def get_genre(Name: str, services=Depends(get_services)):
        return await services.movies.get_genre(Name)

    @router.get("/directors/{Name}", response_model=DirectorInfo)
    async def get_director(Name: str, services=Depends(get_services)):
        return await services.movies.get_director(Name)

    @router.get("/{Title}", response_model=MovieDocument)
    async def get_movie(Title: str, services=Depends(get_services)):
        """Get a single movie by exact title."""
        return await services.movies.get_movie_by_title(Title)

    return router
