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
"""Supported locales read from a YAML file, reloaded when it changes.

File format::

    locales: [en, en-GB, fr]
    default: en
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from sessionless.i18n.adapters.base import DefaultLocaleSupport
from sessionless.i18n.locale import Locale, supported_locale_map
from sessionless.kernel.exceptions import LocaleSourceException

logger = structlog.get_logger("sessionless.i18n")


class FileLocaleSupport(DefaultLocaleSupport):
    """Caches the locales of a YAML file, guarded by an asyncio.Lock.

    Each lookup compares the file's modification time with the cached copy
    and reloads on change. A missing or invalid file raises
    :class:`LocaleSourceException`; stale data is never served after a
    failed reload.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._mtime_ns: int | None = None
        self._supported: dict[str, Locale] = {}
        self._default: Locale | None = None

    @property
    def path(self) -> Path:
        return self._path

    async def get_supported_locales(self, request: Any) -> Mapping[str, Locale]:  # noqa: ARG002
        async with self._lock:
            self._reload_if_modified()
            return self._supported

    def get_default_locale(self, request: Any, supported: Mapping[str, Locale]) -> Locale:
        if self._default is not None and self.to_locale_string(self._default) in supported:
            return self._default
        return super().get_default_locale(request, supported)

    def _reload_if_modified(self) -> None:
        try:
            mtime_ns = os.stat(self._path).st_mtime_ns
        except OSError as exc:
            self._invalidate()
            raise LocaleSourceException(
                f"Supported locales file not readable: {self._path}",
                code="LOCALE_SOURCE_MISSING",
                context={"path": str(self._path)},
            ) from exc

        if mtime_ns == self._mtime_ns:
            return

        try:
            with open(self._path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            self._invalidate()
            raise LocaleSourceException(
                f"Unable to load supported locales from {self._path}",
                code="LOCALE_SOURCE_INVALID",
                context={"path": str(self._path)},
            ) from exc

        if not isinstance(data, dict) or not isinstance(data.get("locales", []), list):
            self._invalidate()
            raise LocaleSourceException(
                f"Expected a mapping with a 'locales' list in {self._path}",
                code="LOCALE_SOURCE_INVALID",
                context={"path": str(self._path)},
            )

        supported = supported_locale_map(
            (str(tag) for tag in data.get("locales", [])), self.to_locale_string
        )
        default_tag = data.get("default")
        default = None
        if default_tag is not None:
            default = supported.get(self.to_locale_string(Locale.parse(str(default_tag))))
            if default is None:
                self._invalidate()
                raise LocaleSourceException(
                    f"Default locale '{default_tag}' is not listed in {self._path}",
                    code="LOCALE_SOURCE_INVALID",
                    context={"path": str(self._path), "default": default_tag},
                )

        self._supported = supported
        self._default = default
        self._mtime_ns = mtime_ns
        logger.info("supported_locales_loaded", path=str(self._path), locales=list(supported))

    def _invalidate(self) -> None:
        self._mtime_ns = None
        self._supported = {}
        self._default = None
