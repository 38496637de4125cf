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
"""Locale negotiation state machine.

Given the supported locales, the locale parameter, and the ``Accept-Language``
headers of a request, :class:`LocaleResolver` decides whether to redirect
(to strip or canonicalize the parameter) or which locale to apply, and
whether outgoing URLs must carry the parameter.

The resolver is framework-agnostic; the Starlette glue lives in
:mod:`sessionless.web.adapters.starlette.filters.locale_filter`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from sessionless.i18n.locale import Locale, MatchedLocale, get_best_match
from sessionless.i18n.negotiation import negotiate
from sessionless.i18n.ports.outbound import LocaleSupport
from sessionless.net.rewriter import Augmenter
from sessionless.net.uri import add_parameter, has_parameter, remove_parameter, replace_parameter

logger = structlog.get_logger("sessionless.i18n")

DEFAULT_PARAM_NAME = "hl"

METHOD_GET = "GET"


class ResolutionState(str, Enum):
    """Outcome of :meth:`LocaleResolver.resolve`."""

    NO_LOCALES = "no_locales"
    SINGLE_LOCALE = "single_locale"
    NEGOTIATED = "negotiated"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class LocaleRequest:
    """The parts of a request that locale negotiation looks at.

    Attributes:
        method: HTTP method, upper case.
        query: Raw (still percent-encoded) query string, without ``?``.
        param_value: First value of the locale parameter, ``None`` if absent.
        accept_language: Every ``Accept-Language`` header occurrence.
        is_localized: Whether the requested resource is localized at all.
        error_dispatch: Whether this is an error-page dispatch.
    """

    method: str
    query: str = ""
    param_value: str | None = None
    accept_language: Sequence[str] = field(default_factory=tuple)
    is_localized: bool = True
    error_dispatch: bool = False

    @property
    def may_redirect(self) -> bool:
        return self.method == METHOD_GET and not self.error_dispatch


@dataclass(frozen=True)
class LocaleResolution:
    """Decision for one request.

    ``redirect_query`` is the complete raw query for the redirect target
    when ``state`` is :attr:`ResolutionState.REDIRECT`.
    """

    state: ResolutionState
    locale: Locale | None = None
    redirect_query: str | None = None

    @property
    def rewrite_urls(self) -> bool:
        """Only a negotiated locale is propagated through URLs."""
        return self.state is ResolutionState.NEGOTIATED


class LocaleResolver:
    """Chooses the locale of a request against a :class:`LocaleSupport`.

    Rules, first match wins:

    1. GET with the parameter on a non-localized path, or with fewer than
       two supported locales: redirect without the parameter.
    2. Non-localized path, or no supported locales: no locale.
    3. One supported locale: use it, without URL rewriting.
    4. Otherwise the parameter (exact, then best match), then the
       ``Accept-Language`` headers, then the default locale. A GET whose
       parameter differs from the result is redirected to carry the
       canonical parameter.
    """

    def __init__(self, support: LocaleSupport, param_name: str = DEFAULT_PARAM_NAME) -> None:
        self._support = support
        self._param_name = param_name

    @property
    def param_name(self) -> str:
        return self._param_name

    @property
    def support(self) -> LocaleSupport:
        return self._support

    def resolve(
        self,
        request: LocaleRequest,
        supported: Mapping[str, Locale],
        default: Callable[[], Locale],
    ) -> LocaleResolution:
        param_value = request.param_value

        if (
            param_value is not None
            and request.may_redirect
            and (not request.is_localized or len(supported) < 2)
        ):
            logger.debug("locale_param_stripped", param=self._param_name, value=param_value)
            return LocaleResolution(
                ResolutionState.REDIRECT,
                redirect_query=remove_parameter(request.query, self._param_name),
            )

        if not request.is_localized:
            logger.debug("locale_not_localized")
            return LocaleResolution(ResolutionState.NO_LOCALES)

        if not supported:
            logger.debug("locale_none_supported")
            return LocaleResolution(ResolutionState.NO_LOCALES)

        if len(supported) == 1:
            only = next(iter(supported.values()))
            logger.debug("locale_single", locale=self._support.to_locale_string(only))
            return LocaleResolution(ResolutionState.SINGLE_LOCALE, locale=only)

        locale: Locale | None = None
        if param_value is not None:
            locale = supported.get(param_value)
            if locale is None:
                # A parameter like "en-GB" may still land on "en"
                matched = self.best_match(supported, param_value)
                if matched is not None:
                    locale = matched.locale
                    logger.debug("locale_param_matched", value=param_value, exact=matched.exact)

        if locale is None:
            locale = self.best_locale(supported, request.accept_language, default)

        locale_string = self._support.to_locale_string(locale)
        if request.may_redirect and locale_string != param_value:
            logger.debug("locale_param_canonicalized", value=param_value, locale=locale_string)
            return LocaleResolution(
                ResolutionState.REDIRECT,
                locale=locale,
                redirect_query=replace_parameter(request.query, self._param_name, locale_string),
            )

        logger.debug("locale_negotiated", locale=locale_string)
        return LocaleResolution(ResolutionState.NEGOTIATED, locale=locale)

    def best_match(self, supported: Mapping[str, Locale], language_tag: str) -> MatchedLocale | None:
        return get_best_match(supported, language_tag, self._support.to_locale_string)

    def best_locale(
        self,
        supported: Mapping[str, Locale],
        accept_language: Sequence[str],
        default: Callable[[], Locale],
    ) -> Locale:
        """Negotiate from the ``Accept-Language`` headers, else *default*."""
        if accept_language:
            locale = negotiate(supported, accept_language, self.best_match)
            if locale is not None:
                return locale
        return default()

    def augmenter(self, locale: Locale) -> Augmenter:
        """Augmenter adding ``param_name=locale`` to localized URLs that lack it."""
        param_name = self._param_name
        locale_string = self._support.to_locale_string(locale)
        is_localized_path = self._support.is_localized_path

        def _add_locale(url: str) -> str:
            if is_localized_path(url) and not has_parameter(url, param_name):
                return add_parameter(url, param_name, locale_string)
            return url

        return _add_locale
