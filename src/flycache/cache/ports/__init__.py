"""Cache ports: protocols the cache front-end programs against."""

from flycache.cache.ports.outbound import CacheBackend, ExtendedCacheBackend

__all__ = ["CacheBackend", "ExtendedCacheBackend"]
