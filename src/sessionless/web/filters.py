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
"""OncePerRequestFilter — base class for WebFilter with URL-pattern matching.

Framework-agnostic: accesses ``request.url.path`` and ``request.scope`` via
attribute protocol so no Starlette import is needed.
"""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any

from sessionless.web.ports.filter import CallNext


def request_attributes(request: Any) -> dict[str, Any]:
    """The request-scoped attribute dict, shared by every view of the request.

    Backed by the ASGI scope's ``state`` entry, the same storage as
    Starlette's ``request.state``, so nested and forwarded dispatches of one
    request see the same attributes.
    """
    return request.scope.setdefault("state", {})


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Provides automatic URL-pattern matching via ``url_patterns`` and
    ``exclude_patterns``, and guarantees a single application per request:
    while a filter class is running for a request, invoking it again on the
    same request (a nested or forwarded dispatch) passes straight through.
    Subclasses implement ``do_filter_internal()``.

    Attributes:
        url_patterns: Glob patterns that this filter applies to.
            If empty (default), the filter applies to *all* paths.
        exclude_patterns: Glob patterns to exclude even if ``url_patterns``
            matches.  Checked *after* ``url_patterns``.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    @property
    def applied_attribute(self) -> str:
        """Request attribute marking this filter class as running."""
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}.filter_applied"

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` if the request path does not match this filter's patterns."""
        path: str = request.url.path

        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True

        return bool(
            self.exclude_patterns and any(fnmatch(path, p) for p in self.exclude_patterns)
        )

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        attributes = request_attributes(request)
        key = self.applied_attribute
        if attributes.get(key):
            # Filter already applied
            return await call_next(request)
        attributes[key] = True
        try:
            return await self.do_filter_internal(request, call_next)
        finally:
            attributes.pop(key, None)

    @abc.abstractmethod
    async def do_filter_internal(self, request: Any, call_next: CallNext) -> Any:
        """Execute the filter logic.  Must call ``await call_next(request)`` to proceed."""
        ...

    def destroy(self) -> None:
        """Release anything acquired at construction.  Nothing by default."""
