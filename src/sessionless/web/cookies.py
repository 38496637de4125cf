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
"""Response cookies added during a request.

Inside a request handled by
:class:`~sessionless.web.adapters.starlette.filters.CookieUrlFilter`,
applications add cookies with :func:`add_cookie` (not
``Response.set_cookie``) so that the values can also travel in URLs for
clients that refuse cookies.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

import structlog

from sessionless.kernel.exceptions import ConfigurationException, FilterNotAppliedException

logger = structlog.get_logger("sessionless.web")

_jar_var: ContextVar[CookieJar | None] = ContextVar("sessionless_cookie_jar", default=None)


@dataclass(frozen=True)
class ResponseCookie:
    """A cookie to send with the response.  ``max_age=0`` deletes it."""

    name: str
    value: str = ""
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = False
    samesite: Literal["lax", "strict", "none"] | None = "lax"


class CookieJar:
    """Cookies added while handling one request.

    ``new_cookies`` maps a cookie name to the cookie added this request, or
    to ``None`` when the cookie was removed. A cookie that the client
    already sent in its ``Cookie`` header is written to the response but not
    recorded as new: the client evidently keeps cookies.
    """

    def __init__(self, allowed_names: Collection[str], header_cookie_names: Collection[str] = ()) -> None:
        self._allowed = allowed_names
        self._header_names = header_cookie_names
        self.new_cookies: dict[str, ResponseCookie | None] = {}
        self.added: list[ResponseCookie] = []

    def add(self, cookie: ResponseCookie) -> None:
        if cookie.name not in self._allowed:
            logger.warning("cookie_rejected", cookie=cookie.name)
            raise ConfigurationException(
                f"Unexpected cookie name, add to cookie_names: {cookie.name}",
                code="COOKIE_NOT_ALLOWED",
                context={"cookie": cookie.name},
            )
        self.added.append(cookie)
        if cookie.max_age == 0:
            self.new_cookies[cookie.name] = None
        elif cookie.name not in self._header_names:
            self.new_cookies[cookie.name] = cookie


@contextmanager
def install_jar(jar: CookieJar) -> Iterator[CookieJar]:
    token = _jar_var.set(jar)
    try:
        yield jar
    finally:
        _jar_var.reset(token)


def current_jar() -> CookieJar:
    jar = _jar_var.get()
    if jar is None:
        raise FilterNotAppliedException("Not in a request filtered by CookieUrlFilter, unable to add cookies.")
    return jar


def add_cookie(
    name: str,
    value: str = "",
    *,
    max_age: int | None = None,
    path: str = "/",
    domain: str | None = None,
    secure: bool = False,
    httponly: bool = False,
    samesite: Literal["lax", "strict", "none"] | None = "lax",
) -> ResponseCookie:
    """Add a cookie to the current response.

    Raises:
        ConfigurationException: *name* is not an allowed cookie name.
        FilterNotAppliedException: no CookieUrlFilter is active.
    """
    cookie = ResponseCookie(name, value, max_age, path, domain, secure, httponly, samesite)
    current_jar().add(cookie)
    return cookie


def delete_cookie(name: str, *, path: str = "/", domain: str | None = None) -> ResponseCookie:
    """Remove a cookie from the client and stop propagating it in URLs."""
    return add_cookie(name, "", max_age=0, path=path, domain=domain)
