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
"""Type-safe configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
import types
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, Union, cast, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__flycache_config_prefix__"

_NULL_STRINGS = ("", "none", "null")


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="flycache.cache.redis")
        @dataclass(frozen=True)
        class RedisBackendProperties:
            host: str = "127.0.0.1"
            port: int = 6379
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (FLYCACHE_SECTION_KEY format)
    2. Configuration dict / YAML file values
    3. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load and merge config from multiple sources.

        Merge order (later wins):
        1. Package defaults (flycache-defaults.yaml)
        2. config/flycache.yaml or config/flycache.toml
        3. flycache.yaml or flycache.toml in base_dir
        4. Profile overlays: config/flycache-{profile}.yaml, flycache-{profile}.yaml
        5. Environment variables (handled at read time in get())
        """
        base_dir = Path(base_dir)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_package_defaults()
            sources.append("flycache-defaults.yaml (package defaults)")

        for search_dir in (base_dir / "config", base_dir):
            for ext in (".yaml", ".toml"):
                candidate = search_dir / f"flycache{ext}"
                if candidate.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(candidate))
                    sources.append(str(candidate))

        for profile in active_profiles or []:
            for search_dir in (base_dir / "config", base_dir):
                for ext in (".yaml", ".toml"):
                    candidate = search_dir / f"flycache-{profile}{ext}"
                    if candidate.is_file():
                        data = cls._deep_merge(data, cls._load_config_data(candidate))
                        sources.append(f"{candidate} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load configuration from a YAML or TOML file.

        A file named flycache.* delegates to :meth:`from_sources` for the
        full multi-source merge. Any other file is loaded on its own, with
        ``{stem}-{profile}{suffix}`` overlays next to it.
        """
        path = Path(path)

        if path.stem == "flycache" or path.stem.startswith("flycache-"):
            return cls.from_sources(
                base_dir=path.parent,
                active_profiles=active_profiles,
                load_defaults=load_defaults,
            )

        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_package_defaults()
            sources.append("flycache-defaults.yaml (package defaults)")

        if path.exists():
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

            for profile in active_profiles or []:
                profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
                if profile_path.exists():
                    data = cls._deep_merge(data, cls._load_config_data(profile_path))
                    sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_package_defaults() -> dict[str, Any]:
        """Load built-in defaults from flycache.resources."""
        defaults_file = importlib.resources.files("flycache.resources").joinpath("flycache-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def _env_key(key: str) -> str:
        # flycache.cache.redis.host -> FLYCACHE_CACHE_REDIS_HOST
        env_base = key.removeprefix("flycache.")
        return "FLYCACHE_" + env_base.upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values containing ``${...}`` placeholders are resolved:
        - ``${ENV_VAR}``: resolved from environment variables
        - ``${config.key}``: resolved from other config values
        - ``${key:default}``: uses default if key/env not found
        """
        env_val = os.environ.get(self._env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if isinstance(current, dict):
                current = current.get(part)
                if current is None:
                    return default
            else:
                return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)

        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        """Resolve ``${...}`` placeholders in a string value."""
        if _depth > 10:
            raise ValueError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)

            if ":" in inner:
                ref_key, default_val = inner.split(":", 1)
            else:
                ref_key, default_val = inner, None

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current: Any = self._data
            for part in ref_key.split("."):
                if isinstance(current, dict):
                    current = current.get(part)
                    if current is None:
                        break
                else:
                    current = None
                    break

            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if default_val is not None:
                return cast(str, default_val)

            raise ValueError(f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        current: Any = self._data
        for part in prefix.split("."):
            if isinstance(current, dict):
                current = current.get(part, {})
            else:
                return {}
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Fields are looked up through :meth:`get`, so env var overrides and
        placeholders apply. Keys in the section that the dataclass does not
        declare are ignored.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)
        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            key = f"{prefix}.{field.name}"
            if field.name not in section and os.environ.get(self._env_key(key)) is None:
                continue
            value = self.get(key, section.get(field.name))
            kwargs[field.name] = _coerce(value, hints.get(field.name))

        return config_cls(**kwargs)


def _coerce(value: Any, expected_type: Any) -> Any:
    """Coerce string values (env vars, placeholders) to the declared field type."""
    if not isinstance(value, str):
        return value

    origin = get_origin(expected_type)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(expected_type) if arg is not type(None)]
        if len(args) < len(get_args(expected_type)) and value.strip().lower() in _NULL_STRINGS:
            return None
        expected_type = args[0] if len(args) == 1 else None

    if expected_type is int:
        return int(value)
    if expected_type is float:
        return float(value)
    if expected_type is bool:
        return value.lower() in ("true", "1", "yes")
    return value
