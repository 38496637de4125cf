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
"""Shared behaviour for LocaleSupport implementations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sessionless.i18n.locale import Locale, to_locale_string
from sessionless.net.extensions import is_localized_path


class DefaultLocaleSupport:
    """Extension-based localization test and canonical locale strings.

    Subclasses supply :meth:`get_supported_locales` and may override the
    rest.
    """

    def is_localized_path(self, url: str) -> bool:
        return is_localized_path(url)

    def to_locale_string(self, locale: Locale) -> str:
        return to_locale_string(locale)

    def get_default_locale(self, request: Any, supported: Mapping[str, Locale]) -> Locale:  # noqa: ARG002
        """First supported locale."""
        return next(iter(supported.values()))
