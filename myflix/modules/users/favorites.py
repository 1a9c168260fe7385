"""
Favorites mutator: per-user changes applied as atomic Redis primitives.

Set changes are single SADD/SREM commands. Profile updates and renames are
a MULTI/EXEC block guarded by WATCH on the username index, so a write only
lands while the username still names the record it was resolved to.
Concurrent add and remove of the same movie have no defined order;
whichever command reaches Redis last wins.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional, Protocol

from redis.exceptions import WatchError

from ..errors import DuplicateUsername, FieldError, NotFound, ValidationError
from .store import (
    USERNAME_INDEX,
    CredentialStore,
    favorites_key,
    format_birthday,
    user_key,
)
from .validation import ensure_valid

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("Username", "Password", "Email", "Birthday")


class MovieLookup(Protocol):
    """Anything that can say whether a movie id is in the catalog."""

    async def movie_exists(self, movie_id: str) -> bool:
        ...


class FavoritesMutator:
    """Applies favorites changes, updates and deletes to user records."""

    def __init__(
        self,
        redis_client,
        credential_store: CredentialStore,
        movie_lookup: Optional[MovieLookup] = None,
    ):
        """
        Initialize favorites mutator.

        Args:
            redis_client: Async Redis client
            credential_store: Store used for lookups and password hashing
            movie_lookup: Catalog used to reject unknown movie ids. When None,
                movie ids are accepted without checking.
        """
        self.redis = redis_client
        self.users = credential_store
        self.movies = movie_lookup

    async def add_favorite(self, username: str, movie_id: str) -> Dict[str, Any]:
        """
        Add a movie to the user's favorites. Adding a present movie is a no-op.

        Returns:
            Updated public user record

        Raises:
            NotFound: If the user or the movie does not exist
        """
        if self.movies is not None and not await self.movies.movie_exists(movie_id):
            raise NotFound(f"Movie {movie_id}")

        user_id = await self.users.resolve_id(username)
        added = await self.redis.sadd(favorites_key(user_id), movie_id)
        if added:
            logger.info(f"Added movie {movie_id} to favorites of {username}")
        return await self.users.read_user(user_id, username)

    async def remove_favorite(self, username: str, movie_id: str) -> Dict[str, Any]:
        """
        Remove a movie from the user's favorites. Removing an absent movie is a no-op.

        Returns:
            Updated public user record

        Raises:
            NotFound: If the user does not exist
        """
        user_id = await self.users.resolve_id(username)
        removed = await self.redis.srem(favorites_key(user_id), movie_id)
        if removed:
            logger.info(f"Removed movie {movie_id} from favorites of {username}")
        return await self.users.read_user(user_id, username)

    async def delete_user(self, username: str) -> None:
        """
        Delete a user and their favorites. Irreversible.

        Raises:
            NotFound: If no such user exists, including when a concurrent
                delete got there first
        """
        user_id = await self.users.resolve_id(username)

        # HDEL decides the winner between concurrent deletes
        released = await self.redis.hdel(USERNAME_INDEX, username)
        if not released:
            raise NotFound(username)

        await self.redis.delete(user_key(user_id), favorites_key(user_id))
        logger.info(f"Deleted user {username}")

    async def update_user(self, username: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update a user's fields.

        Only the fields present (and not None) in ``fields`` change. A new
        password is re-hashed. A rename moves the username index entry in the
        same transaction as the record write.

        Args:
            username: Current username
            fields: Subset of Username, Password, Email, Birthday

        Returns:
            Updated public user record

        Raises:
            ValidationError: On unknown fields or values breaking their rules
            DuplicateUsername: If the new username is taken
            NotFound: If the user does not exist, including when a concurrent
                delete or rename got there first
        """
        unknown = [name for name in fields if name not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(
                [FieldError(param=name, msg="Unknown field") for name in unknown]
            )

        changes = {name: value for name, value in fields.items() if value is not None}
        ensure_valid({k: v for k, v in changes.items() if k != "Birthday"})

        user_id = await self.users.resolve_id(username)

        mapping: Dict[str, str] = {}
        if "Password" in changes:
            mapping["Password"] = await self.users.hash_password(changes["Password"])
        if "Email" in changes:
            mapping["Email"] = changes["Email"]
        if "Birthday" in changes:
            birthday = changes["Birthday"]
            mapping["Birthday"] = (
                format_birthday(birthday) if isinstance(birthday, date) else str(birthday)
            )

        new_username = changes.get("Username")
        renaming = new_username is not None and new_username != username
        if renaming:
            mapping["Username"] = new_username

        if mapping:
            await self._apply_update(username, user_id, mapping, new_username if renaming else None)

        if renaming:
            logger.info(f"Renamed user {username} to {new_username}")
        else:
            logger.info(f"Updated user {username}")
        return await self.users.read_user(user_id, new_username if renaming else username)

    async def _apply_update(
        self,
        username: str,
        user_id: str,
        mapping: Dict[str, str],
        new_username: Optional[str],
    ) -> None:
        """
        Write ``mapping`` only while ``username`` still maps to ``user_id``.

        The username index is WATCHed, so a concurrent delete or rename of
        the same user between the read and the MULTI/EXEC aborts the write
        and the check is repeated.

        Raises:
            NotFound: The username no longer belongs to this record
            DuplicateUsername: ``new_username`` is held by another record
        """
        async with self.redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(USERNAME_INDEX)
                    if await pipe.hget(USERNAME_INDEX, username) != user_id:
                        raise NotFound(username)
                    if new_username is not None and await pipe.hexists(USERNAME_INDEX, new_username):
                        raise DuplicateUsername(new_username)

                    pipe.multi()
                    pipe.hset(user_key(user_id), mapping=mapping)
                    if new_username is not None:
                        pipe.hset(USERNAME_INDEX, new_username, user_id)
                        pipe.hdel(USERNAME_INDEX, username)
                    await pipe.execute()
                    return
                except WatchError:
                    logger.debug(f"Username index changed while updating {username}, retrying")
