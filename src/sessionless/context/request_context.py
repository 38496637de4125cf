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
"""Request-scoped context backed by contextvars.

Each HTTP request gets a fresh RequestContext via RequestContextFilter.
The context stores the request ID and arbitrary attributes.

Bindings are pushed and popped: :meth:`RequestContext.init` returns a token
and :meth:`RequestContext.restore` puts back whatever context was bound
before, so a nested dispatch on the same task never clobbers its caller.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any

_request_context_var: ContextVar[RequestContext | None] = ContextVar(
    "sessionless_request_context", default=None
)


class RequestContext:
    """Holds per-request state: request ID and custom attributes.

    Use ``RequestContext.init()`` to create a new context for the current
    async task, and ``RequestContext.current()`` to retrieve it.
    """

    def __init__(self, request_id: str | None = None) -> None:
        self._request_id = request_id or uuid.uuid4().hex
        self._attributes: dict[str, Any] = {}

    @property
    def request_id(self) -> str:
        return self._request_id

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def remove(self, key: str) -> None:
        self._attributes.pop(key, None)

    @classmethod
    def init(cls, request_id: str | None = None) -> Token[RequestContext | None]:
        """Bind a new RequestContext for the current async task.

        Returns the token to hand to :meth:`restore` once the request is done.
        """
        return _request_context_var.set(cls(request_id=request_id))

    @classmethod
    def restore(cls, token: Token[RequestContext | None]) -> None:
        """Re-bind the context that was current before the matching :meth:`init`."""
        _request_context_var.reset(token)

    @classmethod
    def current(cls) -> RequestContext | None:
        """Get the RequestContext for the current async task, or None."""
        return _request_context_var.get()


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[RequestContext]:
    """Bind a fresh :class:`RequestContext` for the ``with`` block."""
    token = RequestContext.init(request_id=request_id)
    try:
        ctx = RequestContext.current()
        assert ctx is not None
        yield ctx
    finally:
        RequestContext.restore(token)
