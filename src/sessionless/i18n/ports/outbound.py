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
"""LocaleSupport protocol — what the locale filter needs from the application."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from sessionless.i18n.locale import Locale


@runtime_checkable
class LocaleSupport(Protocol):
    """Capabilities injected into :class:`~sessionless.i18n.resolver.LocaleResolver`.

    Implementations decide which resources are localized, how locales are
    written in URLs, which locales a request may use, and the fallback when
    negotiation finds nothing.
    """

    def is_localized_path(self, url: str) -> bool:
        """Whether the locale parameter belongs on *url*."""
        ...

    def to_locale_string(self, locale: Locale) -> str:
        """The string written to, and expected in, the locale parameter."""
        ...

    async def get_supported_locales(self, request: Any) -> Mapping[str, Locale]:
        """The supported locales for *request*, keyed by :meth:`to_locale_string`.

        An empty mapping leaves responses in the server's default locale.
        With fewer than two entries URLs are never rewritten.
        """
        ...

    def get_default_locale(self, request: Any, supported: Mapping[str, Locale]) -> Locale:
        """Fallback locale; must be one of *supported*.

        Never called when *supported* is empty.
        """
        ...
