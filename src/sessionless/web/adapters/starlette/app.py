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
"""Sessionless application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from sessionless.container.ordering import sort_by_order
from sessionless.core.config import Config
from sessionless.i18n.ports.outbound import LocaleSupport
from sessionless.logging.structlog_adapter import StructlogAdapter
from sessionless.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionless.web.adapters.starlette.filters import (
    CookieUrlFilter,
    EncodeURIFilter,
    HideExtensionFilter,
    LocaleFilter,
    RequestContextFilter,
)
from sessionless.web.adapters.starlette.filters.hide_extension_filter import ResourceExists
from sessionless.web.ports.filter import WebFilter
from sessionless.web.properties import (
    CookieUrlProperties,
    EncodeURIProperties,
    HideExtensionProperties,
    LocaleFilterProperties,
)


def create_filters(
    config: Config,
    locale_support: LocaleSupport | None = None,
    resource_exists: ResourceExists | None = None,
    extra_filters: Sequence[WebFilter] = (),
) -> list[WebFilter]:
    """Build the enabled built-in filters plus *extra_filters*, sorted by ``@order``.

    The cookie filter is only added when ``cookie_names`` is not empty: with
    no allowed names it would hide every cookie from the application.
    """
    filters: list[WebFilter] = [RequestContextFilter()]

    if config.bind(EncodeURIProperties).enabled:
        filters.append(EncodeURIFilter.from_config(config))

    cookies = config.bind(CookieUrlProperties)
    if cookies.enabled and cookies.cookie_names:
        filters.append(CookieUrlFilter.from_config(config))

    if config.bind(HideExtensionProperties).enabled:
        filters.append(HideExtensionFilter.from_config(config, resource_exists))

    if config.bind(LocaleFilterProperties).enabled:
        filters.append(LocaleFilter.from_config(config, locale_support))

    filters.extend(extra_filters)
    return sort_by_order(filters)


def create_app(
    config: Config | None = None,
    routes: Sequence[BaseRoute] = (),
    locale_support: LocaleSupport | None = None,
    resource_exists: ResourceExists | None = None,
    extra_filters: Sequence[WebFilter] = (),
    debug: bool = False,
    configure_logging: bool = True,
    **starlette_kwargs: Any,
) -> Starlette:
    """Create a Starlette application wrapped in the sessionless filter chain.

    *config* defaults to the packaged defaults. Logging is configured from
    ``sessionless.logging`` unless *configure_logging* is false.
    """
    config = config or Config.defaults()
    if configure_logging:
        StructlogAdapter().configure(config)

    filters = create_filters(config, locale_support, resource_exists, extra_filters)
    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=filters)],
        **starlette_kwargs,
    )
