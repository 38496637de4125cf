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
"""HideExtensionFilter — serves pages without their file extension.

Outgoing URLs lose their page extension (``/about.html`` becomes
``/about`` and ``/docs/index.html`` becomes ``/docs/``), requests for the
long form are redirected to the short one, and requests for the short form
are forwarded to the page that exists on disk.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from fnmatch import fnmatch
from pathlib import Path
from urllib.parse import quote

import structlog
from starlette.requests import Request
from starlette.responses import Response

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.core.config import Config
from sessionless.kernel.exceptions import ConfigurationException
from sessionless.net.rewriter import BASE_EXCLUDED_SCHEMES
from sessionless.net.uri import path_of
from sessionless.web.adapters.starlette.redirect import absolute_url, redirect
from sessionless.web.dispatch import DispatcherType, set_dispatcher_type
from sessionless.web.encoding import RewritingEncoder, install_encoder
from sessionless.web.filters import OncePerRequestFilter
from sessionless.web.ports.filter import CallNext
from sessionless.web.properties import HideExtensionProperties

logger = structlog.get_logger("sessionless.web")

DEFAULT_EXTENSIONS: tuple[str, ...] = (".html", ".htm")

_PATH_SAFE = "/!$&'()*+,;=:@~-._"

ResourceExists = Callable[[str], bool]


def _is_folder(path: str) -> bool:
    return not path or path.endswith("/")


def directory_resources(directory: str | Path) -> ResourceExists:
    """Resource check for files below *directory*.

    Paths escaping *directory* never exist.
    """
    root = Path(directory).resolve()

    def _exists(resource_path: str) -> bool:
        candidate = (root / resource_path.lstrip("/")).resolve()
        if not candidate.is_relative_to(root):
            return False
        return candidate.is_file()

    return _exists


@order(HIGHEST_PRECEDENCE + 300)
class HideExtensionFilter(OncePerRequestFilter):
    """Hides page extensions from URLs.

    Args:
        extensions: Extensions to hide, in priority order.
        no_rewrite_patterns: Glob patterns of paths left untouched.
        redirect_status_code: Status of redirects to the short URL.
        resource_exists: Whether a resource path (``/p/file.html``)
            exists, deciding whether ``/p/file`` is forwarded to it.
            Without it nothing is forwarded.
    """

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        no_rewrite_patterns: Sequence[str] = (),
        redirect_status_code: int = 301,
        resource_exists: ResourceExists | None = None,
    ) -> None:
        if not extensions or any(not ext.startswith(".") or len(ext) < 2 for ext in extensions):
            raise ConfigurationException(
                "Extensions must be non-empty and each start with '.'",
                code="HIDE_EXTENSIONS",
                context={"extensions": list(extensions)},
            )
        self._extensions = tuple(extensions)
        self._indexes = tuple(f"index{ext}" for ext in self._extensions)
        self._no_rewrite_patterns = tuple(no_rewrite_patterns)
        self._redirect_status_code = redirect_status_code
        self._resource_exists = resource_exists

    @classmethod
    def from_config(cls, config: Config, resource_exists: ResourceExists | None = None) -> HideExtensionFilter:
        """Build from ``sessionless.web.hide_extension``.

        ``directory`` supplies the resource check unless *resource_exists*
        is given.
        """
        props = config.bind(HideExtensionProperties)
        if resource_exists is None and props.directory:
            resource_exists = directory_resources(props.directory)
        return cls(
            props.extensions,
            props.no_rewrite_patterns,
            props.redirect_status_code,
            resource_exists,
        )

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def is_rewritable(self, path: str) -> bool:
        return not any(fnmatch(path, pattern) for pattern in self._no_rewrite_patterns)

    def short_path(self, path: str) -> str | None:
        """*path* without its hidden extension, ``None`` when there is none to hide."""
        for index in self._indexes:
            if path.endswith(f"/{index}"):
                return path[: -len(index)]
        for ext in self._extensions:
            if path.endswith(ext):
                shortened = path[: -len(ext)]
                if not _is_folder(shortened):
                    return shortened
        return None

    def strip_extension(self, url: str) -> str:
        """Augmenter removing the hidden extension from a local URL."""
        path = path_of(url)
        if not self.is_rewritable(path):
            return url
        shortened = self.short_path(path)
        if shortened is None:
            return url
        return shortened + url[len(path):]

    async def do_filter_internal(self, request: Request, call_next: CallNext) -> Response:
        path: str = request.scope["path"]
        rewritable = self.is_rewritable(path)

        if rewritable and request.method == "GET":
            shortened = self.short_path(path)
            if shortened is not None:
                location = absolute_url(
                    request,
                    path=quote(shortened, safe=_PATH_SAFE),
                    query=request.scope.get("query_string", b"").decode("latin-1"),
                )
                logger.info("extension_redirect", path=path, location=location)
                return redirect(location, self._redirect_status_code)

        encoder = RewritingEncoder(self.strip_extension, request.url.hostname, BASE_EXCLUDED_SCHEMES)
        with install_encoder(encoder):
            resource_path = self._forward_target(path) if rewritable else None
            if resource_path is not None:
                return await self._forward(request, call_next, resource_path)
            return await call_next(request)

    def _forward_target(self, path: str) -> str | None:
        if self._resource_exists is None or _is_folder(path):
            return None
        for ext, index in zip(self._extensions, self._indexes):
            resource_path = path + ext
            if not resource_path.endswith(f"/{index}") and self._resource_exists(resource_path):
                return resource_path
        return None

    async def _forward(self, request: Request, call_next: CallNext, resource_path: str) -> Response:
        scope = request.scope
        original_path = scope["path"]
        original_raw_path = scope.get("raw_path")
        scope["path"] = resource_path
        scope["raw_path"] = quote(resource_path, safe=_PATH_SAFE).encode("ascii")
        previous = set_dispatcher_type(request, DispatcherType.FORWARD)
        logger.debug("extension_forward", path=original_path, resource=resource_path)
        try:
            return await call_next(Request(scope, request.receive))
        finally:
            set_dispatcher_type(request, previous)
            scope["path"] = original_path
            if original_raw_path is None:
                scope.pop("raw_path", None)
            else:
                scope["raw_path"] = original_raw_path
