"""flycache cache: Redis-backed implementation of the cache backend contract."""

from flycache.cache.adapters.redis import RedisCacheBackend
from flycache.cache.codec import StoredRecord
from flycache.cache.factory import create_cache_backend
from flycache.cache.ports.outbound import CacheBackend, ExtendedCacheBackend
from flycache.cache.properties import RedisBackendProperties
from flycache.cache.types import (
    DEFAULT_LIFETIME,
    NEVER_EXPIRES,
    UNSUPPORTED_FEATURE_POLICY,
    BackendCapabilities,
    CleaningMode,
    FeaturePolicy,
    RecordMetadata,
    UnsupportedFeature,
)

__all__ = [
    "DEFAULT_LIFETIME",
    "NEVER_EXPIRES",
    "UNSUPPORTED_FEATURE_POLICY",
    "BackendCapabilities",
    "CacheBackend",
    "CleaningMode",
    "ExtendedCacheBackend",
    "FeaturePolicy",
    "RecordMetadata",
    "RedisBackendProperties",
    "RedisCacheBackend",
    "StoredRecord",
    "UnsupportedFeature",
    "create_cache_backend",
]
