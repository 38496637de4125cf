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
"""Sessionless I18n — locale negotiation and locale support sources.

Import concrete sources from the adapter package::

    from sessionless.i18n.adapters import FileLocaleSupport, StaticLocaleSupport
"""

from sessionless.i18n.current import bind_locale, get_current_locale
from sessionless.i18n.locale import (
    Locale,
    MatchedLocale,
    get_best_match,
    supported_locale_map,
    to_locale_string,
)
from sessionless.i18n.negotiation import AcceptLanguageEntry, negotiate, parse_accept_language
from sessionless.i18n.ports.outbound import LocaleSupport
from sessionless.i18n.resolver import (
    DEFAULT_PARAM_NAME,
    LocaleRequest,
    LocaleResolution,
    LocaleResolver,
    ResolutionState,
)

__all__ = [
    "AcceptLanguageEntry",
    "DEFAULT_PARAM_NAME",
    "Locale",
    "LocaleRequest",
    "LocaleResolution",
    "LocaleResolver",
    "LocaleSupport",
    "MatchedLocale",
    "ResolutionState",
    "bind_locale",
    "get_best_match",
    "get_current_locale",
    "negotiate",
    "parse_accept_language",
    "supported_locale_map",
    "to_locale_string",
]
