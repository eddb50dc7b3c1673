"""Unified exception hierarchy for flycache.

All exceptions inherit from FlyCacheException, so callers can catch one base
type or target a specific subclass.

Categories:
- BusinessException: caller mistakes, such as an unknown cleaning mode
- InfrastructureException: store connectivity and backend capability failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyCacheException(Exception):
    """Base exception for all flycache errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_CONNECTION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(FlyCacheException):
    """Contract violations by the caller."""


class ValidationException(BusinessException):
    """Argument or configuration validation failures."""


class InvalidCleaningModeException(ValidationException):
    """clean() was called with a mode the backend does not recognise."""

    def __init__(self, mode: object) -> None:
        super().__init__(
            f"Invalid mode for clean() method: {mode!r}",
            code="CACHE_INVALID_MODE",
            context={"mode": mode},
        )


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyCacheException):
    """Infrastructure failures: store connectivity, transport, capabilities."""


class CacheException(InfrastructureException):
    """Base for cache backend failures."""


class CacheConnectionException(CacheException):
    """The backend could not reach, select, or talk to the key/value store."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CACHE_CONNECTION", context=context)


class UnsupportedFeatureException(CacheException):
    """The backend cannot honour the requested operation at all."""

    def __init__(self, message: str, feature: str) -> None:
        super().__init__(message, code="CACHE_UNSUPPORTED", context={"feature": feature})
        self.feature = feature
