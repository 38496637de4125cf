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
"""Absolute redirect targets for filters that canonicalize the request URL."""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import RedirectResponse

from sessionless.net.uri import to_ascii
from sessionless.web.encoding import encode_redirect_url


def absolute_url(request: Request, path: str | None = None, query: str = "") -> str:
    """Absolute ASCII URL of *request* with *path* and raw *query* replaced.

    *path* defaults to the path as the client sent it, still
    percent-encoded; *query* is used verbatim and omitted when empty.
    """
    url = request.url
    if path is None:
        raw_path = request.scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else url.path
    target = f"{url.scheme}://{url.netloc}{path}"
    if query:
        target = f"{target}?{query}"
    return to_ascii(target)


def redirect(url: str, status_code: int) -> RedirectResponse:
    """Redirect to *url* after the outer filters' ``encode_redirect_url``."""
    return RedirectResponse(encode_redirect_url(url), status_code=status_code)
