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
"""WebFilter protocol — what the filter chain expects of a filter.

Requests and responses are typed ``Any`` here; only the Starlette adapter
knows they are ``starlette.requests.Request`` and
``starlette.responses.Response``.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

# Hands the (possibly replaced) request to the rest of the chain
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """A request/response filter mounted by ``WebFilterChainMiddleware``.

    The chain runs filters in ``@order`` sequence. A filter that rewrites
    the ASGI scope passes a fresh request built on that scope to
    ``call_next``; one that answers on its own (a redirect) returns its
    response without calling it.

    The built-in filters extend ``OncePerRequestFilter``.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Handle *request*, usually by awaiting ``call_next(request)``."""
        ...

    def should_not_filter(self, request: Any) -> bool:
        """``True`` when the chain should skip this filter for *request*."""
        ...
