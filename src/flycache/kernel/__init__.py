"""flycache kernel: exception hierarchy and lifecycle protocol."""

from flycache.kernel.exceptions import (
    BusinessException,
    CacheConnectionException,
    CacheException,
    FlyCacheException,
    InfrastructureException,
    InvalidCleaningModeException,
    UnsupportedFeatureException,
    ValidationException,
)
from flycache.kernel.lifecycle import Lifecycle

__all__ = [
    "BusinessException",
    "CacheConnectionException",
    "CacheException",
    "FlyCacheException",
    "InfrastructureException",
    "InvalidCleaningModeException",
    "Lifecycle",
    "UnsupportedFeatureException",
    "ValidationException",
]
