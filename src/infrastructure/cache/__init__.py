from src.infrastructure.cache.local_cache import LocalTTLCache
from src.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService", "LocalTTLCache"]
