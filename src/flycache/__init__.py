"""flycache: a Redis cache backend for generic cache front-ends."""

__version__ = "0.1.0"
