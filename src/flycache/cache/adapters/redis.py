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
"""Redis-backed cache backend."""

from __future__ import annotations

import contextlib
import time
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any, NoReturn

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from flycache.cache import codec
from flycache.cache.properties import RedisBackendProperties
from flycache.cache.types import (
    DEFAULT_LIFETIME,
    NEVER_EXPIRES,
    TAG_CLEANING_MODES,
    UNSUPPORTED_FEATURE_POLICY,
    BackendCapabilities,
    CleaningMode,
    FeaturePolicy,
    RecordMetadata,
    UnsupportedFeature,
)
from flycache.kernel.exceptions import (
    CacheConnectionException,
    InvalidCleaningModeException,
    UnsupportedFeatureException,
)
from flycache.logging.port import LoggingPort
from flycache.logging.structlog_adapter import StructlogAdapter

TAGS_UNSUPPORTED_BY_SAVE = "RedisCacheBackend.save(): tags are unsupported by the Redis backend"
TAGS_UNSUPPORTED_BY_CLEAN = "RedisCacheBackend.clean(): tags are unsupported by the Redis backend"
TAGS_UNSUPPORTED_BY_LOOKUP = "RedisCacheBackend: tag lookups are unsupported by the Redis backend"
CLEANING_MODE_OLD_UNSUPPORTED = "RedisCacheBackend.clean(): CleaningMode.OLD is unsupported by the Redis backend"
FILLING_PERCENTAGE_UNSUPPORTED = (
    "RedisCacheBackend.get_filling_percentage(): method unsupported by the Redis backend"
)

REDIS_CAPABILITIES = BackendCapabilities(
    automatic_cleaning=False,
    tags=False,
    expired_read=False,
    priority=False,
    infinite_lifetime=True,
    get_list=True,
)

ClientFactory = Callable[[RedisBackendProperties], Any]

# Shared pools for ``persistent`` backends, keyed by (target, db, timeout).
_persistent_pools: dict[tuple[str, int, float], aioredis.ConnectionPool] = {}


def describe_target(props: RedisBackendProperties) -> str:
    if props.socket:
        return f"unix://{props.socket}"
    return f"{props.host}:{props.port}"


def create_redis_client(props: RedisBackendProperties) -> aioredis.Redis:
    """Build a ``redis.asyncio`` client for *props*.

    The database index is part of the connection settings, so every
    connection the client opens selects it before use. Persistent backends
    draw from a process-wide pool per target instead of owning one.
    """
    kwargs: dict[str, Any] = {"db": props.db}
    if props.timeout > 0:
        kwargs["socket_timeout"] = props.timeout
        kwargs["socket_connect_timeout"] = props.timeout
    if props.socket:
        kwargs["connection_class"] = aioredis.UnixDomainSocketConnection
        kwargs["path"] = props.socket
    else:
        kwargs["host"] = props.host
        kwargs["port"] = props.port

    if props.persistent:
        key = (describe_target(props), props.db, float(props.timeout))
        pool = _persistent_pools.get(key)
        if pool is None:
            pool = aioredis.ConnectionPool(**kwargs)
            _persistent_pools[key] = pool
        return aioredis.Redis(connection_pool=pool)

    return aioredis.Redis.from_pool(aioredis.ConnectionPool(**kwargs))


async def disconnect_persistent_pools() -> None:
    """Close every shared pool opened for persistent backends."""
    while _persistent_pools:
        _, pool = _persistent_pools.popitem()
        await pool.disconnect()


class RedisCacheBackend:
    """Cache backend storing each record as one Redis key.

    Records are encoded by :mod:`flycache.cache.codec`. Expiry is left to
    Redis: finite lifetimes become the key's TTL, infinite ones are stored
    without one, and nothing here sweeps old keys. Tags are not supported;
    see ``UNSUPPORTED_FEATURE_POLICY`` for how each tag call degrades.

    The connection is opened on first use and kept for the life of the
    instance. A failed attempt leaves the backend disconnected, so the next
    call tries again from scratch. Nothing is retried within a call.

    ``touch`` reads, recomputes and rewrites the record in separate round
    trips; two concurrent touches of the same id can lose one extension.
    """

    def __init__(
        self,
        properties: RedisBackendProperties | None = None,
        *,
        client_factory: ClientFactory | None = None,
        logging_port: LoggingPort | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._props = properties or RedisBackendProperties()
        self._client_factory = client_factory or create_redis_client
        self._logger = (logging_port or StructlogAdapter()).get_logger("flycache.cache.redis")
        self._clock = clock or time.time
        self._client: Any = None
        self._connected = False

    @property
    def properties(self) -> RedisBackendProperties:
        return self._props

    @property
    def connected(self) -> bool:
        return self._connected

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        """Connect now instead of on the first operation."""
        await self._ensure_connected()

    async def stop(self) -> None:
        """Drop the connection. Shared persistent pools stay open."""
        client, self._client, self._connected = self._client, None, False
        if client is not None and not self._props.persistent:
            await client.aclose()

    async def __aenter__(self) -> RedisCacheBackend:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def _ensure_connected(self) -> Any:
        if self._connected:
            return self._client

        target = describe_target(self._props)
        client = None
        try:
            client = self._client_factory(self._props)
            await client.ping()
        except (RedisError, OSError) as exc:
            if client is not None and not self._props.persistent:
                with contextlib.suppress(RedisError, OSError):
                    await client.aclose()
            self._logger.error("redis_connect_failed", target=target, db=self._props.db, error=str(exc))
            raise CacheConnectionException(
                f"Connection failed: {exc}",
                context={"target": target, "db": self._props.db},
            ) from exc

        self._client = client
        self._connected = True
        self._logger.debug(
            "redis_connected", target=target, db=self._props.db, persistent=self._props.persistent
        )
        return client

    @contextlib.asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[Any]:
        client = await self._ensure_connected()
        try:
            yield client
        except (RedisError, OSError) as exc:
            raise CacheConnectionException(
                f"Redis {operation} failed: {exc}",
                context={"operation": operation, "target": describe_target(self._props)},
            ) from exc

    # -- helpers -----------------------------------------------------------

    def _key(self, id: str) -> str:
        return f"{self._props.prefix}{id}"

    def _now(self) -> int:
        return int(self._clock())

    def _unsupported(self, feature: UnsupportedFeature, message: str, **context: Any) -> None:
        """Apply the policy for an unsupported feature: raise or notify."""
        policy = UNSUPPORTED_FEATURE_POLICY[feature]
        if policy is FeaturePolicy.FAIL:
            self._reject(feature, message)
        if self._props.logging:
            self._logger.warning(message, feature=feature.value, policy=policy.value, backend="redis", **context)

    def _reject(self, feature: UnsupportedFeature, message: str) -> NoReturn:
        raise UnsupportedFeatureException(message, feature=feature.value)

    async def _read(self, id: str) -> codec.StoredRecord | None:
        async with self._session("get") as client:
            raw = await client.get(self._key(id))
        return codec.decode(raw)

    async def _write(self, id: str, record: codec.StoredRecord, ttl: int | None) -> bool:
        async with self._session("set") as client:
            if ttl is not None and ttl > 0:
                result = await client.set(self._key(id), record.dumps(), ex=ttl)
            else:
                result = await client.set(self._key(id), record.dumps())
        return bool(result)

    def get_lifetime(self, specific_lifetime: Any = DEFAULT_LIFETIME) -> int | None:
        """Resolve the lifetime for a save, ``None`` meaning infinite."""
        if specific_lifetime is DEFAULT_LIFETIME:
            specific_lifetime = self._props.lifetime
        if specific_lifetime is None or int(specific_lifetime) <= 0:
            return None
        return int(specific_lifetime)

    # -- backend contract --------------------------------------------------

    async def load(self, id: str, skip_validity_check: bool = False) -> codec.Payload | None:
        """Return the cached payload for *id*, or None.

        *skip_validity_check* is accepted for contract compatibility and
        ignored: Redis drops expired keys itself, so there is never an
        expired record left to read.
        """
        record = await self._read(id)
        if record is None:
            return None
        return record.payload

    async def test(self, id: str) -> int | None:
        """Return the write timestamp of *id*, or None if it is not cached."""
        record = await self._read(id)
        if record is None:
            return None
        return record.stored_at

    async def save(
        self,
        payload: codec.Payload,
        id: str,
        tags: Sequence[str] = (),
        specific_lifetime: Any = DEFAULT_LIFETIME,
    ) -> bool:
        """Store *payload* (text or bytes, never inspected) under *id*.

        *specific_lifetime* overrides the configured default lifetime;
        ``None`` or ``0`` stores the record without expiry.
        """
        lifetime = self.get_lifetime(specific_lifetime)
        record = codec.encode(payload, self._now(), lifetime)
        result = await self._write(id, record, lifetime)

        if tags:
            self._unsupported(UnsupportedFeature.SAVE_TAGS, TAGS_UNSUPPORTED_BY_SAVE, id=id, tags=list(tags))

        return result

    async def remove(self, id: str) -> bool:
        """Delete *id*. Returns True if a key was removed."""
        async with self._session("delete") as client:
            count = await client.delete(self._key(id))
        return bool(count)

    async def clean(self, mode: CleaningMode | str = CleaningMode.ALL, tags: Sequence[str] = ()) -> bool:
        """Clean cache records.

        ``CleaningMode.ALL`` flushes the whole selected database, including
        keys outside this backend's prefix. Every other mode is unsupported
        and only logs a notification.
        """
        try:
            mode = CleaningMode(mode)
        except (ValueError, TypeError):
            raise InvalidCleaningModeException(mode) from None

        if mode is CleaningMode.ALL:
            async with self._session("flushdb") as client:
                await client.flushdb()
            return True

        if mode is CleaningMode.OLD:
            self._unsupported(UnsupportedFeature.CLEAN_OLD, CLEANING_MODE_OLD_UNSUPPORTED, mode=mode.value)
        elif mode in TAG_CLEANING_MODES:
            self._unsupported(
                UnsupportedFeature.CLEAN_TAGS, TAGS_UNSUPPORTED_BY_CLEAN, mode=mode.value, tags=list(tags)
            )
        return True

    def is_automatic_cleaning_available(self) -> bool:
        return False

    async def get_ids(self) -> list[str]:
        """Return every cache id stored under this backend's prefix."""
        prefix = self._props.prefix
        ids: list[str] = []
        async with self._session("scan") as client:
            async for key in client.scan_iter(match=f"{_glob_escape(prefix)}*"):
                # binary keys written by other clients must not break enumeration
                name = key.decode(errors="surrogateescape") if isinstance(key, bytes) else key
                ids.append(name[len(prefix):])
        return ids

    async def get_tags(self) -> list[str]:
        self._unsupported(UnsupportedFeature.TAG_LOOKUP, TAGS_UNSUPPORTED_BY_LOOKUP, call="get_tags")
        return []

    async def get_ids_matching_tags(self, tags: Sequence[str] = ()) -> list[str]:
        self._unsupported(
            UnsupportedFeature.TAG_LOOKUP, TAGS_UNSUPPORTED_BY_LOOKUP, call="get_ids_matching_tags", tags=list(tags)
        )
        return []

    async def get_ids_not_matching_tags(self, tags: Sequence[str] = ()) -> list[str]:
        self._unsupported(
            UnsupportedFeature.TAG_LOOKUP,
            TAGS_UNSUPPORTED_BY_LOOKUP,
            call="get_ids_not_matching_tags",
            tags=list(tags),
        )
        return []

    async def get_ids_matching_any_tags(self, tags: Sequence[str] = ()) -> list[str]:
        self._unsupported(
            UnsupportedFeature.TAG_LOOKUP,
            TAGS_UNSUPPORTED_BY_LOOKUP,
            call="get_ids_matching_any_tags",
            tags=list(tags),
        )
        return []

    async def get_filling_percentage(self) -> int:
        """Always raises: Redis has no fixed capacity to measure against."""
        self._reject(UnsupportedFeature.FILLING_PERCENTAGE, FILLING_PERCENTAGE_UNSUPPORTED)

    async def get_metadatas(self, id: str) -> RecordMetadata | None:
        """Return expiry and modification time of *id*.

        Legacy records have no lifetime and are reported as missing.
        """
        record = await self._read(id)
        if record is None or codec.is_legacy(record):
            return None
        if record.is_infinite:
            expire_at = NEVER_EXPIRES
        else:
            expire_at = record.stored_at + int(record.lifetime_seconds or 0)
        return RecordMetadata(expire_at=expire_at, mtime=record.stored_at, tags=[])

    async def touch(self, id: str, extra_lifetime: int) -> bool:
        """Give *id* another *extra_lifetime* seconds on top of what it has left.

        Returns False for missing and legacy records, and for records whose
        remaining lifetime plus the extension is not positive; those are not
        rewritten. Records without expiry are left as they are.
        """
        record = await self._read(id)
        if record is None or codec.is_legacy(record):
            return False
        if record.is_infinite:
            return True

        now = self._now()
        new_lifetime = codec.remaining_lifetime(record, now, extra_lifetime)
        if new_lifetime <= 0:
            return False
        return await self._write(id, codec.encode(record.payload, now, new_lifetime), new_lifetime)

    def get_capabilities(self) -> BackendCapabilities:
        return REDIS_CAPABILITIES


def _glob_escape(value: str) -> str:
    """Escape Redis glob metacharacters so *value* matches literally."""
    for char in ("\\", "*", "?", "[", "]"):
        value = value.replace(char, f"\\{char}")
    return value
