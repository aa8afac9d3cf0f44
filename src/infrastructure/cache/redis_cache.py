"""Redis-backed cache, shared by every API instance"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import redis.asyncio as redis

from src.infrastructure.config.settings import get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Async Redis cache service with TTL support

    Used for permission sets when more than one API instance runs
    (settings.redis_enabled). Values are stored as JSON.
    """

    def __init__(self, redis_client: redis.Redis | None = None):
        """
        Initialize cache service

        Args:
            redis_client: Optional Redis client (for testing/DI)
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None
        self._locks: dict[str, asyncio.Lock] = {}

    async def connect(self):
        """Establish Redis connection (call on app startup)"""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password
                    if self.settings.redis_password
                    else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                # Test connection
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis cache connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis connection failed: %s. Shared cache disabled.", e)
                self._connected = False
                self.redis = None

    async def disconnect(self):
        """Close Redis connection (call on app shutdown)"""
        if self.redis:
            await self.redis.aclose()
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Check if Redis is connected and available"""
        return self._connected and self.redis is not None

    def lock(self, key: str) -> asyncio.Lock:
        """
        Process-local lock for a key's check-then-fill sequence.

        Other instances may still fill the same key concurrently; both write the
        same value, so the duplicate work is harmless.
        """
        return self._locks.setdefault(key, asyncio.Lock())

    async def get(self, key: str) -> Any | None:
        """
        Get value from cache

        Returns:
            Cached value (deserialized from JSON) or None if not found/unavailable
        """
        if not self.is_available() or self.redis is None:
            return None

        redis_client = self.redis  # Local variable for type narrowing
        try:
            value = await redis_client.get(key)
            if value:
                logger.debug("Cache HIT: %s", key)
                return json.loads(value)
            logger.debug("Cache MISS: %s", key)
            return None
        except (redis.RedisError, ValueError) as e:
            logger.error("Cache get error for key %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """
        Set value in cache with TTL

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time-to-live in seconds (default: 300 = 5 minutes)

        Returns:
            True if successful, False otherwise
        """
        if not self.is_available() or self.redis is None:
            return False

        redis_client = self.redis  # Local variable for type narrowing
        try:
            serialized = json.dumps(value)
            await redis_client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.error("Cache set error for key %s: %s", key, e)
            return False
