"""
Read-only movie catalog backed by Redis.

    movies             set     movie ids
    movie:{_id}        string  movie JSON document
    movies:by_title    hash    Title -> _id
"""

import json
import logging
import uuid
from typing import Any, Dict, Iterable, List

from ..errors import NotFound

logger = logging.getLogger(__name__)

MOVIE_INDEX = "movies"
TITLE_INDEX = "movies:by_title"


def movie_key(movie_id: str) -> str:
    return f"movie:{movie_id}"


class MovieCatalog:
    """Lookups over the movies collection."""

    def __init__(self, redis_client):
        self.redis = redis_client

    async def movie_exists(self, movie_id: str) -> bool:
        return bool(await self.redis.sismember(MOVIE_INDEX, movie_id))

    async def list_movies(self) -> List[Dict[str, Any]]:
        """Return every movie, ordered by title."""
        movie_ids = await self.redis.smembers(MOVIE_INDEX)
        if not movie_ids:
            return []

        documents = await self.redis.mget([movie_key(movie_id) for movie_id in movie_ids])
        movies = [json.loads(doc) for doc in documents if doc]
        movies.sort(key=lambda movie: movie.get("Title", ""))
        return movies

    async def get_movie(self, movie_id: str) -> Dict[str, Any]:
        data = await self.redis.get(movie_key(movie_id))
        if not data:
            raise NotFound(f"Movie {movie_id}")
        return json.loads(data)

    async def get_movie_by_title(self, title: str) -> Dict[str, Any]:
        movie_id = await self.redis.hget(TITLE_INDEX, title)
        if not movie_id:
            raise NotFound(title)
        return await self.get_movie(movie_id)

    async def get_genre(self, name: str) -> Dict[str, Any]:
        """Return the Genre block of the first movie in that genre."""
        for movie in await self.list_movies():
            genre = movie.get("Genre") or {}
            if genre.get("Name") == name:
                return genre
        raise NotFound(name)

    async def get_director(self, name: str) -> Dict[str, Any]:
        """Return the Director block of the first movie by that director."""
        for movie in await self.list_movies():
            director = movie.get("Director") or {}
            if director.get("Name") == name:
                return director
        raise NotFound(name)

    async def load_movies(self, documents: Iterable[Dict[str, Any]]) -> int:
        """
        Upsert movie documents.

        Documents without an ``_id`` get a generated one. A document whose
        Title is already indexed replaces the existing movie under its id.

        Args:
            documents: Movie documents (Title required)

        Returns:
            Number of documents written
        """
        count = 0
        for document in documents:
            title = document.get("Title")
            if not title:
                raise ValueError("Movie document is missing a Title")

            existing_id = await self.redis.hget(TITLE_INDEX, title)
            movie_id = str(document.get("_id") or existing_id or uuid.uuid4().hex)
            stored = dict(document, _id=movie_id)

            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(movie_key(movie_id), json.dumps(stored))
                pipe.sadd(MOVIE_INDEX, movie_id)
                pipe.hset(TITLE_INDEX, title, movie_id)
                await pipe.execute()
            count += 1

        logger.info(f"Loaded {count} movies into the catalog")
        return count
