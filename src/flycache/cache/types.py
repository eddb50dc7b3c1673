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
"""Value types shared by cache backends and their callers."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from types import MappingProxyType

NEVER_EXPIRES = None
"""``RecordMetadata.expire_at`` value for records with an infinite lifetime."""


class _DefaultLifetime:
    """Marker for "use the backend's configured default lifetime"."""

    _instance: _DefaultLifetime | None = None

    def __new__(cls) -> _DefaultLifetime:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT_LIFETIME"


DEFAULT_LIFETIME = _DefaultLifetime()


class CleaningMode(str, enum.Enum):
    ALL = "all"
    OLD = "old"
    MATCHING_TAG = "matchingTag"
    NOT_MATCHING_TAG = "notMatchingTag"
    MATCHING_ANY_TAG = "matchingAnyTag"


TAG_CLEANING_MODES = frozenset(
    {CleaningMode.MATCHING_TAG, CleaningMode.NOT_MATCHING_TAG, CleaningMode.MATCHING_ANY_TAG}
)


class UnsupportedFeature(str, enum.Enum):
    SAVE_TAGS = "save_tags"
    CLEAN_OLD = "clean_old"
    CLEAN_TAGS = "clean_tags"
    TAG_LOOKUP = "tag_lookup"
    FILLING_PERCENTAGE = "filling_percentage"


class FeaturePolicy(str, enum.Enum):
    """How a backend reacts when asked for something it cannot do.

    NOTIFY_AND_CONTINUE: log a notification, finish the rest of the operation.
    NOTIFY_AND_NOOP: log a notification, do nothing, report success/empty.
    FAIL: raise UnsupportedFeatureException.
    """

    NOTIFY_AND_CONTINUE = "notify_and_continue"
    NOTIFY_AND_NOOP = "notify_and_noop"
    FAIL = "fail"


UNSUPPORTED_FEATURE_POLICY: Mapping[UnsupportedFeature, FeaturePolicy] = MappingProxyType(
    {
        UnsupportedFeature.SAVE_TAGS: FeaturePolicy.NOTIFY_AND_CONTINUE,
        UnsupportedFeature.CLEAN_OLD: FeaturePolicy.NOTIFY_AND_NOOP,
        UnsupportedFeature.CLEAN_TAGS: FeaturePolicy.NOTIFY_AND_NOOP,
        UnsupportedFeature.TAG_LOOKUP: FeaturePolicy.NOTIFY_AND_NOOP,
        UnsupportedFeature.FILLING_PERCENTAGE: FeaturePolicy.FAIL,
    }
)


@dataclass(frozen=True)
class BackendCapabilities:
    """What a backend can do. Callers check this before tag or priority work."""

    automatic_cleaning: bool
    tags: bool
    expired_read: bool
    priority: bool
    infinite_lifetime: bool
    get_list: bool

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


@dataclass(frozen=True)
class RecordMetadata:
    """Freshness metadata for one record.

    ``expire_at`` is a UNIX timestamp, or ``NEVER_EXPIRES`` (None) for
    records saved with an infinite lifetime.
    """

    expire_at: int | None
    mtime: int
    tags: list[str] = field(default_factory=list)
