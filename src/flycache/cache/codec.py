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
"""Wire format for cache records and the lifetime arithmetic around it.

A record is stored under its cache id as a JSON array::

    [payload, stored_at, lifetime_seconds]   # current records
    [payload, stored_at]                     # legacy records

``lifetime_seconds`` of ``0`` means the record never expires. Legacy records
predate the lifetime field; they can still be loaded but carry no lifetime,
so anything that needs one treats them as missing.

Text payloads are stored as JSON strings, ASCII-escaped so lone surrogates
survive. Byte payloads are stored as ``{"b64": "<base64>"}`` and come back
as ``bytes``.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any

LEGACY_RECORD_VERSION = 1
RECORD_VERSION = 2

INFINITE_LIFETIME = 0

_BYTES_MARKER = "b64"

Payload = str | bytes


@dataclass(frozen=True)
class StoredRecord:
    """One decoded cache entry."""

    payload: Payload
    stored_at: int
    lifetime_seconds: int | None = INFINITE_LIFETIME
    version: int = RECORD_VERSION

    @property
    def is_infinite(self) -> bool:
        return self.version == RECORD_VERSION and not self.lifetime_seconds

    def dumps(self) -> bytes:
        """Serialize to the wire format."""
        payload = _pack_payload(self.payload)
        if self.version == LEGACY_RECORD_VERSION:
            row: list[Any] = [payload, self.stored_at]
        else:
            row = [payload, self.stored_at, self.lifetime_seconds]
        return json.dumps(row).encode()


def encode(payload: Payload, write_time: int, lifetime_seconds: int | None) -> StoredRecord:
    """Build a current-version record. ``None`` lifetime is stored as infinite."""
    if not isinstance(payload, (str, bytes)):
        raise TypeError(f"payload must be str or bytes, got {type(payload).__name__}")
    return StoredRecord(
        payload=payload,
        stored_at=int(write_time),
        lifetime_seconds=int(lifetime_seconds) if lifetime_seconds else INFINITE_LIFETIME,
    )


def decode(raw: bytes | str | None) -> StoredRecord | None:
    """Decode a raw store value, or return None if it is not a record.

    Missing keys, foreign values written by other clients, and corrupt blobs
    all come back as None.
    """
    if raw is None:
        return None
    try:
        row = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        return None
    if not isinstance(row, list):
        return None

    if len(row) == 3:
        packed, stored_at, lifetime = row
        if not _is_timestamp(lifetime):
            return None
        version = RECORD_VERSION
    elif len(row) == 2:
        packed, stored_at = row
        lifetime = None
        version = LEGACY_RECORD_VERSION
    else:
        return None

    payload = _unpack_payload(packed)
    if payload is None or not _is_timestamp(stored_at):
        return None
    return StoredRecord(payload=payload, stored_at=stored_at, lifetime_seconds=lifetime, version=version)


def is_legacy(record: StoredRecord) -> bool:
    return record.version == LEGACY_RECORD_VERSION


def remaining_lifetime(record: StoredRecord, now: int, extra: int = 0) -> int:
    """Seconds the record has left at ``now``, plus ``extra``.

    A result <= 0 means the record is already past its lifetime.
    """
    if is_legacy(record):
        raise ValueError("legacy records carry no lifetime")
    return int(record.lifetime_seconds or 0) - (int(now) - record.stored_at) + int(extra)


def _pack_payload(payload: Payload) -> Any:
    if isinstance(payload, bytes):
        return {_BYTES_MARKER: base64.b64encode(payload).decode("ascii")}
    return payload


def _unpack_payload(packed: Any) -> Payload | None:
    if isinstance(packed, str):
        return packed
    if isinstance(packed, dict) and set(packed) == {_BYTES_MARKER} and isinstance(packed[_BYTES_MARKER], str):
        try:
            return base64.b64decode(packed[_BYTES_MARKER], validate=True)
        except (binascii.Error, ValueError):
            return None
    return None


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
