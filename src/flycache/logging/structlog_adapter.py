# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""StructlogAdapter: default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from flycache.core.config import Config

CACHE_BACKEND_LOGGER = "flycache.cache.redis"


def mark_cache_notifications(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Flag unsupported-feature notifications so log pipelines can filter them."""
    if "feature" in event_dict and "policy" in event_dict:
        event_dict.setdefault("notification", "unsupported_feature")
    return event_dict


class StructlogAdapter:
    """Default logging adapter backed by structlog.

    ``get_logger`` works without ``configure``; structlog then falls back to
    its own defaults. ``configure`` routes output through stdlib logging with
    the levels from ``flycache.logging.level`` and the format from
    ``flycache.logging.format``. When ``flycache.cache.redis.logging`` is
    off, the backend logger is raised to ERROR so its notifications are
    dropped even if another component logs through it.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        level_section = dict(config.get_section("flycache.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("flycache.logging.format", "console")).lower()

        notifications = str(config.get("flycache.cache.redis.logging", True)).lower()
        if notifications in ("false", "0", "no"):
            self._module_levels.setdefault(CACHE_BACKEND_LOGGER, "ERROR")

        self._setup_structlog()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            mark_cache_notifications,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
