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
"""WebFilterChainMiddleware — pure ASGI middleware running the sessionless filters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from sessionless.container.ordering import sort_by_order
from sessionless.web.ports.filter import CallNext, WebFilter


class WebFilterChainMiddleware:
    """Runs a sorted chain of :class:`WebFilter` around the wrapped app.

    Filters run in ``@order`` sequence. A filter whose
    ``should_not_filter()`` returns ``True`` is skipped for that request.

    The app's response is collected in full before it travels back through
    the filters: the body, streamed or not, is rendered while every URL
    encoder and context binding the filters installed is still active, and
    filters may still add headers and cookies on the way out.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = sort_by_order(list(filters))

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        chain: CallNext = self._buffered_app
        for web_filter in reversed(self._filters):
            chain = _wrap(web_filter, chain)

        response = cast(Response, await chain(Request(scope, receive, send)))
        await response(scope, receive, send)

    async def _buffered_app(self, request: Request) -> Response:
        """Run the app on *request*'s scope and capture its response."""
        status_code = 200
        raw_headers: list[tuple[bytes, bytes]] = []
        body = bytearray()

        async def _collect(message: Message) -> None:
            nonlocal status_code, raw_headers
            if message["type"] == "http.response.start":
                status_code = message["status"]
                raw_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                body.extend(message.get("body", b""))

        # Filters may have replaced the request to rewrite its scope
        await self.app(request.scope, request.receive, _collect)

        response = Response(content=bytes(body), status_code=status_code)
        response.raw_headers[:] = raw_headers
        return response

    def destroy(self) -> None:
        """Release every filter, in reverse chain order."""
        for web_filter in reversed(self._filters):
            destroy = getattr(web_filter, "destroy", None)
            if destroy is not None:
                destroy()


def _wrap(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def _inner(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return _inner
