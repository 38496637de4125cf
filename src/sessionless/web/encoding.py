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
"""Outgoing URL encoding hooks.

Applications call :func:`encode_url` on every URL they emit (links, form
actions) and :func:`encode_redirect_url` on every redirect target. Each
filter active on the request installs a :class:`UrlEncoder` for the
duration of its ``call_next``; encoders installed later run first and hand
their result outward through ``proceed``.

Example::

    @app.route("/")
    async def home(request):
        return HTMLResponse(f'<a href="{encode_url("/about")}">About</a>')
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from sessionless.net.rewriter import LOCAL_EXCLUDED_SCHEMES, Augmenter, rewrite_url

Proceed = Callable[[str], str]

_encoders_var: ContextVar[tuple[UrlEncoder, ...]] = ContextVar("sessionless_url_encoders", default=())
_canonical_var: ContextVar[bool] = ContextVar("sessionless_canonical", default=False)


@runtime_checkable
class UrlEncoder(Protocol):
    """One link in the URL encoding chain.

    Implementations transform the URL and call ``proceed`` to pass it to the
    encoders installed before them, either before or after their own change.
    """

    def encode_url(self, url: str, proceed: Proceed) -> str: ...

    def encode_redirect_url(self, url: str, proceed: Proceed) -> str: ...


@dataclass(frozen=True)
class RewritingEncoder:
    """Applies an augmenter through :func:`~sessionless.net.rewriter.rewrite_url`.

    Attributes:
        augment: The per-concern augmenter.
        server_name: Host of the current request; other hosts are left alone.
        excluded_schemes: Schemes never rewritten.
        skip_when_canonical: Leave URLs alone inside :func:`canonical`.
    """

    augment: Augmenter
    server_name: str | None
    excluded_schemes: tuple[str, ...] = LOCAL_EXCLUDED_SCHEMES
    skip_when_canonical: bool = False

    def rewrite(self, url: str) -> str:
        if self.skip_when_canonical and is_canonical():
            return url
        return rewrite_url(url, self.augment, self.server_name, self.excluded_schemes)

    def encode_url(self, url: str, proceed: Proceed) -> str:
        return proceed(self.rewrite(url))

    def encode_redirect_url(self, url: str, proceed: Proceed) -> str:
        return proceed(self.rewrite(url))


@contextmanager
def install_encoder(encoder: UrlEncoder) -> Iterator[UrlEncoder]:
    """Add *encoder* to the chain for the ``with`` block."""
    token = _encoders_var.set((*_encoders_var.get(), encoder))
    try:
        yield encoder
    finally:
        _encoders_var.reset(token)


def active_encoders() -> tuple[UrlEncoder, ...]:
    return _encoders_var.get()


def encode_url(url: str) -> str:
    """Encode a URL emitted in a response body."""
    return _run_chain(url, _encoders_var.get(), redirect=False)


def encode_redirect_url(url: str) -> str:
    """Encode a URL used as a redirect ``Location``."""
    return _run_chain(url, _encoders_var.get(), redirect=True)


def _run_chain(url: str, encoders: Iterable[UrlEncoder], redirect: bool) -> str:
    chain = tuple(encoders)

    def _call(index: int, current: str) -> str:
        if index < 0:
            return current
        encoder = chain[index]

        def proceed(next_url: str) -> str:
            return _call(index - 1, next_url)

        if redirect:
            return encoder.encode_redirect_url(current, proceed)
        return encoder.encode_url(current, proceed)

    return _call(len(chain) - 1, url)


def is_canonical() -> bool:
    """Whether URLs are currently produced for canonical (shareable) output."""
    return _canonical_var.get()


@contextmanager
def canonical(value: bool = True) -> Iterator[None]:
    """Generate canonical URLs in the ``with`` block.

    Canonical URLs never carry cookie parameters and are always ASCII.
    """
    token = _canonical_var.set(value)
    try:
        yield
    finally:
        _canonical_var.reset(token)
