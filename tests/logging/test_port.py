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
"""Tests for LoggingPort protocol."""

from typing import Any

import pytest
import structlog
from structlog.testing import capture_logs

from flycache.cache.adapters.redis import RedisCacheBackend
from flycache.logging.port import LoggingPort


class RecordingLogging:
    def __init__(self) -> None:
        self.names: list[str] = []

    def configure(self, config: Any) -> None:
        pass

    def get_logger(self, name: str) -> Any:
        self.names.append(name)
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        pass


class TestLoggingPortProtocol:
    def test_conforming_class_is_instance(self):
        assert isinstance(RecordingLogging(), LoggingPort)

    def test_non_conforming_class_is_not_instance(self):
        class Incomplete:
            def get_logger(self, name: str) -> Any:
                pass

        assert not isinstance(Incomplete(), LoggingPort)

    @pytest.mark.asyncio
    async def test_backend_logs_through_injected_port(self):
        port = RecordingLogging()
        backend = RedisCacheBackend(logging_port=port)
        assert port.names == ["flycache.cache.redis"]
        with capture_logs() as logs:
            assert await backend.get_tags() == []
        assert logs[0]["feature"] == "tag_lookup"
