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
"""Build cache backends from configuration."""

from __future__ import annotations

from flycache.cache.adapters.redis import ClientFactory, RedisCacheBackend
from flycache.cache.properties import RedisBackendProperties
from flycache.core.config import Config
from flycache.logging.port import LoggingPort


def create_cache_backend(
    config: Config,
    *,
    logging_port: LoggingPort | None = None,
    client_factory: ClientFactory | None = None,
) -> RedisCacheBackend:
    """Create a Redis cache backend from the flycache.cache.redis section.

    The backend is returned unconnected; it connects on first use.
    """
    properties = config.bind(RedisBackendProperties)
    return RedisCacheBackend(properties, logging_port=logging_port, client_factory=client_factory)
