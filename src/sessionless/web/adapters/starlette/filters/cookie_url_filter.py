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
"""CookieUrlFilter — carries a small set of cookies in URL parameters.

For clients that refuse cookies, each allowed cookie also travels as a
``cookie:<name>`` query parameter. Incoming parameters are turned back into
cookies, hidden from the query string the application sees, and added again
to every URL passed through :func:`~sessionless.web.encoding.encode_url`.
Cookies that the client does send in its ``Cookie`` header win and are never
copied into URLs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from http.cookies import SimpleCookie
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import Response

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.core.config import Config
from sessionless.kernel.exceptions import ConfigurationException
from sessionless.net.extensions import COOKIE_EXCLUDED_EXTENSIONS, has_excluded_extension
from sessionless.net.rewriter import LOCAL_EXCLUDED_SCHEMES, Augmenter
from sessionless.net.uri import add_parameters, filter_query, parse_query
from sessionless.web.cookies import CookieJar, install_jar
from sessionless.web.encoding import RewritingEncoder, install_encoder
from sessionless.web.filters import OncePerRequestFilter
from sessionless.web.ports.filter import CallNext
from sessionless.web.properties import CookieUrlProperties

logger = structlog.get_logger("sessionless.web")

MAXIMUM_COOKIES = 20

DEFAULT_PARAM_PREFIX = "cookie:"

_COOKIE_HEADER = b"cookie"


@order(HIGHEST_PRECEDENCE + 200)
class CookieUrlFilter(OncePerRequestFilter):
    """Propagates the allowed cookies through URL parameters.

    Args:
        cookie_names: Cookies the application may set, at most
            :data:`MAXIMUM_COOKIES`.
        param_prefix: Prefix of the query parameters carrying cookies.

    Raises:
        ConfigurationException: Too many cookie names, or an empty prefix.
    """

    def __init__(self, cookie_names: Iterable[str] = (), param_prefix: str = DEFAULT_PARAM_PREFIX) -> None:
        names = sorted(set(cookie_names))
        if len(names) > MAXIMUM_COOKIES:
            raise ConfigurationException(
                f"At most {MAXIMUM_COOKIES} cookie names are supported, got {len(names)}",
                code="COOKIE_LIMIT",
                context={"cookie_names": names},
            )
        if not param_prefix:
            raise ConfigurationException("Cookie parameter prefix must not be empty", code="COOKIE_PREFIX")
        self._cookie_names = names
        self._param_prefix = param_prefix

    @classmethod
    def from_config(cls, config: Config) -> CookieUrlFilter:
        """Build from ``sessionless.web.cookies``."""
        props = config.bind(CookieUrlProperties)
        return cls(props.cookie_names, props.param_prefix)

    @property
    def cookie_names(self) -> list[str]:
        return list(self._cookie_names)

    @property
    def param_prefix(self) -> str:
        return self._param_prefix

    async def do_filter_internal(self, request: Request, call_next: CallNext) -> Response:
        scope = request.scope
        original_headers = scope["headers"]
        original_query = scope.get("query_string", b"")
        raw_query = original_query.decode("latin-1")

        header_cookies = request.cookies
        url_params: dict[str, list[str]] = {}
        for name, value in parse_query(raw_query):
            if name.startswith(self._param_prefix):
                url_params.setdefault(name, []).append(value)

        visible = self._visible_cookies(header_cookies, url_params)
        scope["headers"] = self._replace_cookie_header(original_headers, visible)
        scope["query_string"] = filter_query(
            raw_query, lambda name: not name.startswith(self._param_prefix)
        ).encode("latin-1")

        jar = CookieJar(self._cookie_names, header_cookies.keys())
        encoder = RewritingEncoder(
            self._augmenter(jar, header_cookies, url_params),
            request.url.hostname,
            LOCAL_EXCLUDED_SCHEMES,
            skip_when_canonical=True,
        )
        try:
            with install_jar(jar), install_encoder(encoder):
                response: Response = await call_next(Request(scope, request.receive))
        finally:
            scope["headers"] = original_headers
            scope["query_string"] = original_query

        for cookie in jar.added:
            if cookie.max_age == 0:
                response.delete_cookie(
                    cookie.name,
                    path=cookie.path,
                    domain=cookie.domain,
                    secure=cookie.secure,
                    httponly=cookie.httponly,
                    samesite=cookie.samesite,
                )
            else:
                response.set_cookie(
                    cookie.name,
                    cookie.value,
                    max_age=cookie.max_age,
                    path=cookie.path,
                    domain=cookie.domain,
                    secure=cookie.secure,
                    httponly=cookie.httponly,
                    samesite=cookie.samesite,
                )
        if jar.new_cookies:
            logger.debug("cookies_added", cookies=sorted(jar.new_cookies))
        return response

    def _visible_cookies(
        self,
        header_cookies: Mapping[str, str],
        url_params: Mapping[str, list[str]],
    ) -> dict[str, str]:
        """Allowed header cookies, then parameter cookies not already sent as headers."""
        visible = {name: value for name, value in header_cookies.items() if name in self._cookie_names}
        for param, values in url_params.items():
            name = param[len(self._param_prefix):]
            if name in self._cookie_names and name not in visible:
                visible[name] = values[0]
        return visible

    @staticmethod
    def _replace_cookie_header(
        headers: list[tuple[bytes, bytes]],
        cookies: Mapping[str, str],
    ) -> list[tuple[bytes, bytes]]:
        replaced = [(key, value) for key, value in headers if key.lower() != _COOKIE_HEADER]
        if cookies:
            jar: SimpleCookie = SimpleCookie()
            for name, value in cookies.items():
                jar[name] = value
            header = "; ".join(morsel.OutputString() for morsel in jar.values())
            replaced.append((_COOKIE_HEADER, header.encode("utf-8")))
        return replaced

    def _augmenter(
        self,
        jar: CookieJar,
        header_cookies: Mapping[str, Any],
        url_params: Mapping[str, list[str]],
    ) -> Augmenter:
        prefix = self._param_prefix
        cookie_names = self._cookie_names

        def _add_cookies(url: str) -> str:
            if has_excluded_extension(url, COOKIE_EXCLUDED_EXTENSIONS):
                return url
            pairs: list[tuple[str, str]] = []
            for name in cookie_names:
                param = prefix + name
                if name in jar.new_cookies:
                    cookie = jar.new_cookies[name]
                    # Removed cookies are not propagated
                    if cookie is not None:
                        pairs.append((param, cookie.value))
                elif param in url_params and name not in header_cookies:
                    pairs.append((param, url_params[param][-1]))
            return add_parameters(url, pairs)

        return _add_cookies
