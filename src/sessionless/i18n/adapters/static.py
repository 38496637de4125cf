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
"""Fixed list of supported locales."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sessionless.i18n.adapters.base import DefaultLocaleSupport
from sessionless.i18n.locale import Locale, supported_locale_map
from sessionless.kernel.exceptions import ConfigurationException


class StaticLocaleSupport(DefaultLocaleSupport):
    """Supports the same locales for every request.

    Args:
        locales: Locales or locale strings, in preference order.
        default_locale: Fallback locale; defaults to the first locale.
    """

    def __init__(
        self,
        locales: Iterable[Locale | str] = (),
        default_locale: Locale | str | None = None,
    ) -> None:
        self._supported = supported_locale_map(locales, self.to_locale_string)
        self._default: Locale | None = None
        if default_locale is not None:
            key = (
                self.to_locale_string(Locale.parse(default_locale))
                if isinstance(default_locale, str)
                else self.to_locale_string(default_locale)
            )
            if key not in self._supported:
                raise ConfigurationException(
                    f"Default locale '{key}' is not one of the supported locales",
                    code="LOCALE_DEFAULT",
                    context={"supported": list(self._supported)},
                )
            self._default = self._supported[key]

    async def get_supported_locales(self, request: Any) -> Mapping[str, Locale]:  # noqa: ARG002
        return self._supported

    def get_default_locale(self, request: Any, supported: Mapping[str, Locale]) -> Locale:
        if self._default is not None:
            return self._default
        return super().get_default_locale(request, supported)
