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
"""RequestContextFilter — binds a RequestContext and request id per request.

Runs first so the downstream filters, their log lines, and the handler
all see the same request id.
"""

from __future__ import annotations

import structlog
from starlette.requests import Request
from starlette.responses import Response

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.context.request_context import request_scope
from sessionless.web.filters import OncePerRequestFilter
from sessionless.web.ports.filter import CallNext

REQUEST_ID_HEADER = "X-Request-Id"


@order(HIGHEST_PRECEDENCE)
class RequestContextFilter(OncePerRequestFilter):
    """Binds a fresh :class:`RequestContext` to each HTTP request.

    The id comes from the ``X-Request-Id`` header when the client sent one
    and is generated otherwise. It is bound into structlog's context
    variables for the duration of the request and echoed on the response.
    """

    async def do_filter_internal(self, request: Request, call_next: CallNext) -> Response:
        with request_scope(request.headers.get(REQUEST_ID_HEADER)) as ctx:
            with structlog.contextvars.bound_contextvars(request_id=ctx.request_id):
                response: Response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, ctx.request_id)
        return response
