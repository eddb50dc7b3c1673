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
"""Fixtures for cache backend tests: a FakeRedis stub and a controllable clock."""

from __future__ import annotations

import re
from typing import Any

import pytest

from flycache.cache.adapters.redis import RedisCacheBackend
from flycache.cache.properties import RedisBackendProperties


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts), re.DOTALL)


class FakeRedis:
    """Minimal in-memory stub matching the redis.asyncio.Redis interface.

    Records the TTL passed with each SET so tests can check expiry handling
    without waiting for it.
    """

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}
        self.set_calls: list[dict[str, Any]] = []
        self.pings = 0
        self.closed = False

    async def ping(self) -> bool:
        self.pings += 1
        return True

    async def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    async def set(self, key: str, value: bytes | str, ex: int | None = None) -> bool:
        self.set_calls.append({"key": key, "value": value, "ex": ex})
        self._store[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        count = 0
        for k in keys:
            if k in self._store:
                del self._store[k]
                self.ttls.pop(k, None)
                count += 1
        return count

    async def flushdb(self) -> bool:
        self._store.clear()
        self.ttls.clear()
        return True

    async def scan_iter(self, match: str | None = None, count: int | None = None):
        regex = _glob_to_regex(match or "*")
        for key in list(self._store):
            if regex.fullmatch(key):
                yield key.encode()

    async def aclose(self) -> None:
        self.closed = True

    def raw(self, key: str) -> bytes | None:
        return self._store.get(key)

    def put_raw(self, key: str, value: bytes | str) -> None:
        self._store[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = None


class FakeClock:
    """Callable clock returning a settable UNIX timestamp."""

    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_backend(fake_redis: FakeRedis, clock: FakeClock):
    """Factory for backends wired to the shared FakeRedis and FakeClock."""

    def _make(**options: Any) -> RedisCacheBackend:
        return RedisCacheBackend(
            RedisBackendProperties(**options),
            client_factory=lambda props: fake_redis,
            clock=clock,
        )

    return _make


@pytest.fixture
def backend(make_backend) -> RedisCacheBackend:
    return make_backend()
