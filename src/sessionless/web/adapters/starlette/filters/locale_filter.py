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
"""LocaleFilter — negotiates the response locale and keeps it in URLs.

The locale travels in a query parameter (``hl`` by default) instead of a
session. GET requests without the canonical parameter are redirected to
carry it; once it is present, every URL passed through
:func:`~sessionless.web.encoding.encode_url` gets it too.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import nullcontext
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import Response

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.context.request_context import RequestContext
from sessionless.core.config import Config
from sessionless.i18n.adapters import FileLocaleSupport, StaticLocaleSupport
from sessionless.i18n.current import bind_locale
from sessionless.i18n.locale import Locale
from sessionless.i18n.ports.outbound import LocaleSupport
from sessionless.i18n.resolver import (
    DEFAULT_PARAM_NAME,
    LocaleRequest,
    LocaleResolution,
    LocaleResolver,
    ResolutionState,
)
from sessionless.kernel.exceptions import ConfigurationException, FilterNotAppliedException
from sessionless.web.adapters.starlette.redirect import absolute_url, redirect
from sessionless.web.dispatch import DispatcherType, get_dispatcher_type
from sessionless.web.encoding import RewritingEncoder, install_encoder
from sessionless.web.filters import OncePerRequestFilter, request_attributes
from sessionless.web.ports.filter import CallNext
from sessionless.web.properties import LocaleFilterProperties

logger = structlog.get_logger("sessionless.web")

ENABLED_LOCALES_ATTRIBUTE = "sessionless.locale.enabled_locales"

# Exposed to templates as ``request.state.locale``
FMT_LOCALE_ATTRIBUTE = "locale"

CONTENT_LANGUAGE_HEADER = "Content-Language"


@order(HIGHEST_PRECEDENCE + 400)
class LocaleFilter(OncePerRequestFilter):
    """Selects the locale of each request and propagates it through URLs.

    Args:
        support: Which locales are supported, and how they are written.
        param_name: Query parameter carrying the locale.
        redirect_status_code: Status of canonicalizing redirects.
    """

    def __init__(
        self,
        support: LocaleSupport,
        param_name: str = DEFAULT_PARAM_NAME,
        redirect_status_code: int = 301,
    ) -> None:
        if not param_name:
            raise ConfigurationException("Locale parameter name must not be empty", code="LOCALE_PARAM")
        self._resolver = LocaleResolver(support, param_name)
        self._redirect_status_code = redirect_status_code

    @classmethod
    def from_config(cls, config: Config, support: LocaleSupport | None = None) -> LocaleFilter:
        """Build from ``sessionless.web.locale``.

        Without an explicit *support*, ``locales_file`` selects a
        :class:`FileLocaleSupport`; otherwise ``supported_locales`` and
        ``default_locale`` give a :class:`StaticLocaleSupport`.
        """
        props = config.bind(LocaleFilterProperties)
        if support is None:
            if props.locales_file:
                support = FileLocaleSupport(props.locales_file)
            else:
                support = StaticLocaleSupport(props.supported_locales, props.default_locale)
        return cls(support, props.param_name, props.redirect_status_code)

    @property
    def resolver(self) -> LocaleResolver:
        return self._resolver

    @property
    def param_name(self) -> str:
        return self._resolver.param_name

    @staticmethod
    def get_enabled_locales(request: Any) -> Mapping[str, Locale]:
        """The supported locales recorded for the request being filtered.

        Raises:
            FilterNotAppliedException: *request* is not inside this filter.
        """
        supported = request_attributes(request).get(ENABLED_LOCALES_ATTRIBUTE)
        if supported is None:
            raise FilterNotAppliedException(
                "Not in a request filtered by LocaleFilter, unable to get enabled locales."
            )
        return supported

    async def do_filter_internal(self, request: Request, call_next: CallNext) -> Response:
        support = self._resolver.support
        attributes = request_attributes(request)
        supported = await support.get_supported_locales(request)
        attributes[ENABLED_LOCALES_ATTRIBUTE] = supported
        try:
            resolution = self._resolver.resolve(
                self._locale_request(request),
                supported,
                lambda: support.get_default_locale(request, supported),
            )
            if resolution.state is ResolutionState.REDIRECT:
                location = absolute_url(request, query=resolution.redirect_query or "")
                logger.info(
                    "locale_redirect",
                    path=request.url.path,
                    location=location,
                    status_code=self._redirect_status_code,
                )
                return redirect(location, self._redirect_status_code)
            if resolution.locale is None:
                return await call_next(request)
            return await self._apply(request, call_next, resolution)
        finally:
            attributes.pop(ENABLED_LOCALES_ATTRIBUTE, None)

    def _locale_request(self, request: Request) -> LocaleRequest:
        values = request.query_params.getlist(self.param_name)
        return LocaleRequest(
            method=request.method,
            query=request.scope.get("query_string", b"").decode("latin-1"),
            param_value=values[0] if values else None,
            accept_language=request.headers.getlist("accept-language"),
            is_localized=self._resolver.support.is_localized_path(request.url.path),
            error_dispatch=get_dispatcher_type(request) is DispatcherType.ERROR,
        )

    async def _apply(self, request: Request, call_next: CallNext, resolution: LocaleResolution) -> Response:
        locale = resolution.locale
        assert locale is not None
        locale_string = self._resolver.support.to_locale_string(locale)
        logger.debug("locale_resolved", locale=locale_string, rewrite_urls=resolution.rewrite_urls)

        request_attributes(request)[FMT_LOCALE_ATTRIBUTE] = locale
        ctx = RequestContext.current()
        if ctx is not None:
            ctx.set(FMT_LOCALE_ATTRIBUTE, locale)

        encoding = (
            install_encoder(RewritingEncoder(self._resolver.augmenter(locale), request.url.hostname))
            if resolution.rewrite_urls
            else nullcontext()
        )
        with bind_locale(locale), encoding:
            response: Response = await call_next(request)
        response.headers.setdefault(CONTENT_LANGUAGE_HEADER, locale_string)
        return response
