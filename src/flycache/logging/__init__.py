"""flycache logging: logging port and structlog adapter."""

from flycache.logging.port import LoggingPort
from flycache.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
