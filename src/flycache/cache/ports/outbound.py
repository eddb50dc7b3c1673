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
"""Cache backend protocols consumed by cache front-ends."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from flycache.cache.types import BackendCapabilities, CleaningMode, RecordMetadata


@runtime_checkable
class CacheBackend(Protocol):
    """Minimal backend contract.

    Payloads are opaque text or bytes; the front-end owns serialization. "Not
    found" is always ``None``.
    """

    async def load(self, id: str, skip_validity_check: bool = False) -> str | bytes | None: ...

    async def test(self, id: str) -> int | None: ...

    async def save(
        self,
        payload: str | bytes,
        id: str,
        tags: Sequence[str] = (),
        specific_lifetime: Any = ...,
    ) -> bool: ...

    async def remove(self, id: str) -> bool: ...

    async def clean(self, mode: CleaningMode | str = CleaningMode.ALL, tags: Sequence[str] = ()) -> bool: ...

    def is_automatic_cleaning_available(self) -> bool: ...


@runtime_checkable
class ExtendedCacheBackend(CacheBackend, Protocol):
    """Backend contract with enumeration, metadata, and touch support."""

    async def get_ids(self) -> list[str]: ...

    async def get_tags(self) -> list[str]: ...

    async def get_ids_matching_tags(self, tags: Sequence[str] = ()) -> list[str]: ...

    async def get_ids_not_matching_tags(self, tags: Sequence[str] = ()) -> list[str]: ...

    async def get_ids_matching_any_tags(self, tags: Sequence[str] = ()) -> list[str]: ...

    async def get_filling_percentage(self) -> int: ...

    async def get_metadatas(self, id: str) -> RecordMetadata | None: ...

    async def touch(self, id: str, extra_lifetime: int) -> bool: ...

    def get_capabilities(self) -> BackendCapabilities: ...
