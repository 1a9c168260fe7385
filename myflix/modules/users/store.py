"""
Credential store for myFlix users.

User records live in Redis:

    users:by_username      hash   Username -> _id   (uniqueness index)
    user:{_id}             hash   _id, Username, Password, Email, Birthday
    user:{_id}:favorites   set    movie ids

The username index is the single source of truth for existence. Claims and
releases on it are atomic (HSETNX / HDEL), which is what serializes concurrent
creates, renames and deletes of the same username.
"""

import asyncio
import logging
import uuid
from datetime import date
from typing import Any, Dict, Optional

import bcrypt

from ..errors import DuplicateUsername, NotFound
from .validation import ensure_valid

logger = logging.getLogger(__name__)

USERNAME_INDEX = "users:by_username"
DEFAULT_BCRYPT_ROUNDS = 12


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def favorites_key(user_id: str) -> str:
    return f"user:{user_id}:favorites"


def format_birthday(birthday: Optional[date]) -> str:
    return birthday.isoformat() if birthday else ""


class CredentialStore:
    """
    Owns persisted user records and password hashing.

    Outward-facing records never include the password hash.
    """

    def __init__(self, redis_client, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """
        Initialize credential store.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            bcrypt_rounds: bcrypt cost factor used for new hashes
        """
        self.redis = redis_client
        self.bcrypt_rounds = bcrypt_rounds

    async def hash_password(self, raw_password: str) -> str:
        """Salt and hash a password off the event loop."""
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        hashed = await asyncio.to_thread(bcrypt.hashpw, raw_password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    async def create_user(
        self,
        username: str,
        raw_password: str,
        email: str,
        birthday: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Create a new user.

        Args:
            username: Unique, case-sensitive username
            raw_password: Plaintext password, hashed before storage
            email: Email address
            birthday: Optional birthday

        Returns:
            Public user record (no password)

        Raises:
            ValidationError: If any field breaks its rules
            DuplicateUsername: If the username is already taken
        """
        ensure_valid({"Username": username, "Password": raw_password, "Email": email})

        password_hash = await self.hash_password(raw_password)
        user_id = uuid.uuid4().hex

        # Atomic claim on the username; loses cleanly to a concurrent create
        claimed = await self.redis.hsetnx(USERNAME_INDEX, username, user_id)
        if not claimed:
            raise DuplicateUsername(username)

        record = {
            "_id": user_id,
            "Username": username,
            "Password": password_hash,
            "Email": email,
            "Birthday": format_birthday(birthday),
        }
        try:
            await self.redis.hset(user_key(user_id), mapping=record)
        except Exception:
            # Release the claim so the username is not stranded
            await self.redis.hdel(USERNAME_INDEX, username)
            raise

        logger.info(f"Created user {username}")
        return self.to_public(record, set())

    async def verify_password(self, username: str, raw_password: str) -> bool:
        """
        Check a password against the stored hash.

        Raises:
            NotFound: If the user does not exist
        """
        user_id = await self.resolve_id(username)
        stored_hash = await self.redis.hget(user_key(user_id), "Password")
        if not stored_hash:
            raise NotFound(username)

        # bcrypt.checkpw compares in constant time
        return await asyncio.to_thread(
            bcrypt.checkpw, raw_password.encode("utf-8"), stored_hash.encode("utf-8")
        )

    async def resolve_id(self, username: str) -> str:
        """Map a username to its record id, or raise NotFound."""
        user_id = await self.redis.hget(USERNAME_INDEX, username)
        if not user_id:
            raise NotFound(username)
        return user_id

    async def user_exists(self, username: str) -> bool:
        return bool(await self.redis.hexists(USERNAME_INDEX, username))

    async def get_user(self, username: str) -> Dict[str, Any]:
        """Return the public record for ``username``."""
        user_id = await self.resolve_id(username)
        return await self.read_user(user_id, username)

    async def read_user(self, user_id: str, name_hint: Optional[str] = None) -> Dict[str, Any]:
        """
        Read a record and its favorites in one MULTI/EXEC round trip.

        Args:
            user_id: Record id
            name_hint: Name used in the NotFound message if the record is gone
        """
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(user_key(user_id))
            pipe.smembers(favorites_key(user_id))
            data, favorites = await pipe.execute()

        # A hash without _id is a fragment left by a write racing a delete
        if not data or "_id" not in data:
            raise NotFound(name_hint or user_id)
        return self.to_public(data, favorites)

    @staticmethod
    def to_public(data: Dict[str, str], favorites) -> Dict[str, Any]:
        """Build the outward-facing record, dropping the password hash."""
        return {
            "_id": data["_id"],
            "Username": data["Username"],
            "Email": data["Email"],
            "Birthday": data.get("Birthday") or None,
            "FavoriteMovies": sorted(favorites),
        }
