"""
myFlix request and response models.

Request bodies reject unknown fields. User field rules (length, charset,
email grammar) are enforced by the users module so that a single 422 can
list every violated field; the models here only pin down shape and types.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    """Base for request bodies: unknown fields are an error."""

    model_config = ConfigDict(extra="forbid")


# Request Models (API Input)


class CreateUserRequest(StrictModel):
    """Registration body."""

    Username: Optional[str] = Field(None, description="Alphanumeric, at least 5 characters")
    Password: Optional[str] = Field(None, description="Plaintext password, never stored")
    Email: Optional[str] = Field(None, description="Email address")
    Birthday: Optional[date] = Field(None, description="Birthday (YYYY-MM-DD)")


class UpdateUserRequest(StrictModel):
    """Profile update body. Omitted fields are left unchanged."""

    Username: Optional[str] = None
    Password: Optional[str] = None
    Email: Optional[str] = None
    Birthday: Optional[date] = None


class LoginRequest(StrictModel):
    """Login body."""

    Username: str = Field(..., min_length=1)
    Password: str = Field(..., min_length=1)


# Response Models (API Output)


class UserResponse(BaseModel):
    """Public view of a user; the password hash is never part of it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    Username: str
    Email: str
    Birthday: Optional[date] = None
    FavoriteMovies: List[str] = Field(default_factory=list)


class LoginResponse(BaseModel):
    """Successful login."""

    user: UserResponse
    token: str
    expiresAt: datetime


class MessageResponse(BaseModel):
    message: str


# Movie documents


class GenreInfo(StrictModel):
    Name: str
    Description: Optional[str] = None


class DirectorInfo(StrictModel):
    Name: str
    Bio: Optional[str] = None
    Birth: Optional[str] = None
    Death: Optional[str] = None


class MovieDocument(StrictModel):
    """A movie as stored and served. Used to validate seed files too."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    Title: str = Field(..., min_length=1)
    Description: Optional[str] = None
    Genre: Optional[GenreInfo] = None
    Director: Optional[DirectorInfo] = None
    ImagePath: Optional[str] = None
    Featured: bool = False


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status", pattern="^(healthy|unhealthy)$")
    redis: str = Field(..., description="Redis connection status")
    version: str = Field(default="1.0.0", description="API version")
