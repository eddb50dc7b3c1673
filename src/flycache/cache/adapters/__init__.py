"""Cache adapters: concrete cache backend implementations."""

from flycache.cache.adapters.redis import RedisCacheBackend, create_redis_client, disconnect_persistent_pools

__all__ = ["RedisCacheBackend", "create_redis_client", "disconnect_persistent_pools"]
