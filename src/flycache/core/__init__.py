"""flycache core: configuration."""

from flycache.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
