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
"""Filter configuration: YAML/TOML files, env vars, and pydantic model binding."""

from __future__ import annotations

import importlib.resources
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_CONFIG_PROPERTIES_ATTR = "__sessionless_config_prefix__"

DEFAULTS_RESOURCE = "sessionless-defaults.yaml"


def _env_key(key: str) -> str:
    # sessionless.web.locale.param_name -> SESSIONLESS_WEB_LOCALE_PARAM_NAME
    env_base = key.removeprefix("sessionless.")
    return "SESSIONLESS_" + env_base.upper().replace(".", "_").replace("-", "_")


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a pydantic model as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="sessionless.web.locale")
        class LocaleProperties(BaseModel):
            param_name: str = "hl"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Nested configuration read with dotted keys.

    Priority (highest wins):
    1. Environment variables (``SESSIONLESS_WEB_LOCALE_PARAM_NAME``)
    2. The configuration dict or file
    3. Packaged defaults (through :meth:`from_file` and :meth:`defaults`)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, in merge order."""
        return list(self._loaded_sources)

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Read a ``.yaml``/``.yml`` or ``.toml`` file over the packaged defaults.

        A missing *path* is not an error; the defaults still apply.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append(f"{DEFAULTS_RESOURCE} (packaged defaults)")

        if path.exists():
            data = _deep_merge(data, cls._load_file(path))
            sources.append(str(path))

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the packaged defaults."""
        instance = cls(cls._load_packaged_defaults())
        instance._loaded_sources = [f"{DEFAULTS_RESOURCE} (packaged defaults)"]
        return instance

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_packaged_defaults() -> dict[str, Any]:
        resource = importlib.resources.files("sessionless.resources").joinpath(DEFAULTS_RESOURCE)
        return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dotted *key*; a matching environment variable wins."""
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or current.get(part) is None:
                return default
            current = current[part]
        return current

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The mapping under dotted *prefix*, empty when absent."""
        current: Any = self._data
        for part in prefix.split("."):
            if not isinstance(current, dict):
                return {}
            current = current.get(part, {})
        return current if isinstance(current, dict) else {}

    def bind(self, model: type[M]) -> M:
        """Validate the section of a ``@config_properties`` model into an instance.

        Environment variables override individual fields.

        Raises:
            ValueError: *model* is undecorated, or the values do not validate.
        """
        prefix = getattr(model, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{model.__name__} is not decorated with @config_properties")

        section = dict(self.get_section(prefix))
        for name in model.model_fields:
            env_val = os.environ.get(_env_key(f"{prefix}.{name}"))
            if env_val is not None:
                section[name] = env_val
        try:
            return model.model_validate(section)
        except ValidationError as exc:
            raise ValueError(
                f"Configuration validation failed for '{model.__name__}' (prefix='{prefix}'):\n{exc}"
            ) from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
