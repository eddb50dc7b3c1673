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
"""Lifecycle protocol for adapters that own a store connection."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Lifecycle(Protocol):
    """Standard lifecycle for infrastructure adapters.

    Backends connect lazily, so calling start() is optional; it only moves
    connection failures to a point of the caller's choosing. stop() releases
    whatever start() (or the first operation) acquired.
    """

    async def start(self) -> None:
        """Establish the connection and validate connectivity.

        Raises CacheConnectionException when the store is unreachable.
        """
        ...

    async def stop(self) -> None:
        """Release the connection. The next operation reconnects."""
        ...
