"""
Shared pytest fixtures for myFlix tests.

This module provides common fixtures including:
- AsyncMock Redis clients for call-shape tests
- fakeredis clients for behavioural tests (atomic set semantics, indexes)
- A controllable clock for token expiry tests
- Wired module instances
"""

import os
import sys
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import fakeredis
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from myflix.config.provider import AuthConfig
from myflix.modules.movies import MovieCatalog
from myflix.modules.users import CredentialStore, FavoritesMutator

TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789abcdef"
FAST_BCRYPT_ROUNDS = 4

SAMPLE_MOVIES = [
    {
        "_id": "m42",
        "Title": "Silence of the Lambs",
        "Description": "An FBI trainee seeks help from a manipulative killer.",
        "Genre": {"Name": "Thriller", "Description": "Suspense and tension."},
        "Director": {"Name": "Jonathan Demme", "Bio": "American director.", "Birth": "1944"},
        "ImagePath": "silenceofthelambs.png",
        "Featured": True,
    },
    {
        "_id": "m7",
        "Title": "Alien",
        "Description": "The crew of a spacecraft meets a deadly lifeform.",
        "Genre": {"Name": "Horror", "Description": "Meant to frighten."},
        "Director": {"Name": "Ridley Scott", "Bio": "English director.", "Birth": "1937"},
        "ImagePath": "alien.png",
        "Featured": False,
    },
]


class FrozenClock:
    """Clock whose current instant is set by the test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Clock frozen at a whole second."""
    return FrozenClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def auth_config():
    """Token config with the default 7 day lifetime."""
    return AuthConfig(jwt_secret=TEST_SECRET)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.hget = AsyncMock(return_value=None)
    redis.hset = AsyncMock()
    redis.hsetnx = AsyncMock(return_value=1)
    redis.hdel = AsyncMock(return_value=1)
    redis.hexists = AsyncMock(return_value=False)
    redis.sadd = AsyncMock(return_value=1)
    redis.srem = AsyncMock(return_value=1)
    redis.sismember = AsyncMock(return_value=True)
    redis.delete = AsyncMock()
    return redis


@pytest.fixture
def fake_redis():
    """fakeredis client with a private server per test."""
    server = fakeredis.FakeServer()
    return fakeredis.FakeAsyncRedis(server=server, decode_responses=True)


@pytest.fixture
def credential_store(fake_redis):
    return CredentialStore(fake_redis, bcrypt_rounds=FAST_BCRYPT_ROUNDS)


@pytest.fixture
def catalog(fake_redis):
    return MovieCatalog(fake_redis)


@pytest.fixture
def favorites(fake_redis, credential_store, catalog):
    return FavoritesMutator(fake_redis, credential_store, movie_lookup=catalog)
