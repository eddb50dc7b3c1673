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
"""Redis cache backend configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from flycache.core.config import config_properties


@config_properties(prefix="flycache.cache.redis")
@dataclass(frozen=True)
class RedisBackendProperties:
    """Configuration for the Redis cache backend (flycache.cache.redis.*).

    ``socket`` takes precedence over ``host``/``port``. A ``timeout`` of 0
    leaves the transport default in place, which waits indefinitely; set a
    positive value for anything exposed to a flaky network. ``lifetime`` is
    the default record lifetime in seconds, with ``None`` or ``0`` meaning
    records never expire.
    """

    host: str = "127.0.0.1"
    port: int = 6379
    socket: str | None = None
    timeout: float = 0
    persistent: bool = False
    db: int = 0
    prefix: str = ""
    lifetime: int | None = 3600
    logging: bool = True
