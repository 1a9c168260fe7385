"""
Storage Module - Black Box Interface

Purpose: Own the Redis connection used as the document store
Interface: StorageModule.connect(), StorageModule.disconnect()
Hidden: Redis URL building, password handling, response decoding

Can be replaced with any storage backend without affecting other modules.
"""

import logging
from typing import Optional

import redis.asyncio as redis

from ...config.provider import StorageConfig

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self, config: StorageConfig):
        """Initialize storage with connection settings."""
        self.config = config
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            # Password passed separately to avoid URL encoding issues
            self._client = redis.from_url(
                self.config.url,
                password=self.config.password,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info(f"Connected to Redis at {self.config.host}:{self.config.port}/{self.config.db}")
        return self._client

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = ["StorageModule"]
