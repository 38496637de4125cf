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
"""EncodeURIFilter — final form of every URL the application emits.

Links come out as URIs (ASCII, percent-encoded UTF-8, IDNA hosts) or, with
``enable_iri``, as IRIs that keep non-ASCII characters readable. Redirect
targets are always URIs.
"""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.core.config import Config
from sessionless.net.uri import is_scheme, to_ascii, to_iri
from sessionless.web.encoding import Proceed, install_encoder, is_canonical
from sessionless.web.filters import OncePerRequestFilter, request_attributes
from sessionless.web.ports.filter import CallNext
from sessionless.web.properties import EncodeURIProperties

ACTIVE_FILTER_ATTRIBUTE = "sessionless.encode_uri.active_filter"

_UNTOUCHED_SCHEMES = ("javascript", "cid", "data")


@order(HIGHEST_PRECEDENCE + 100)
class EncodeURIFilter(OncePerRequestFilter):
    """Converts outgoing URLs to URI or IRI form.

    Installed as the outermost URL encoder, so it sees each URL after every
    other filter has added its parameters.
    """

    def __init__(self, enable_iri: bool = False) -> None:
        self._enable_iri = enable_iri

    @classmethod
    def from_config(cls, config: Config) -> EncodeURIFilter:
        """Build from ``sessionless.web.encode_uri``."""
        return cls(config.bind(EncodeURIProperties).enable_iri)

    @property
    def enable_iri(self) -> bool:
        return self._enable_iri

    @staticmethod
    def get_active_filter(request: Any) -> EncodeURIFilter | None:
        """The filter processing *request*, or ``None``."""
        return request_attributes(request).get(ACTIVE_FILTER_ATTRIBUTE)

    def encode(self, url: str, iri: bool | None = None) -> str:
        """Convert *url*, as IRI when *iri* (default ``enable_iri``) and not canonical."""
        if any(is_scheme(url, scheme) for scheme in _UNTOUCHED_SCHEMES):
            return url
        if iri is None:
            iri = self._enable_iri
        if iri and not is_canonical():
            return to_iri(url)
        return to_ascii(url)

    def encode_url(self, url: str, proceed: Proceed) -> str:
        return self.encode(proceed(url))

    def encode_redirect_url(self, url: str, proceed: Proceed) -> str:
        return self.encode(proceed(url), iri=False)

    async def do_filter_internal(self, request: Request, call_next: CallNext) -> Response:
        attributes = request_attributes(request)
        attributes[ACTIVE_FILTER_ATTRIBUTE] = self
        try:
            with install_encoder(self):
                return await call_next(request)
        finally:
            attributes.pop(ACTIVE_FILTER_ATTRIBUTE, None)
