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
"""Sessionless Web — filter contracts, URL encoding hooks, and cookies.

Starlette filters live in :mod:`sessionless.web.adapters.starlette`.
"""

from sessionless.web.cookies import ResponseCookie, add_cookie, delete_cookie
from sessionless.web.dispatch import DispatcherType, get_dispatcher_type, set_dispatcher_type
from sessionless.web.encoding import (
    RewritingEncoder,
    UrlEncoder,
    canonical,
    encode_redirect_url,
    encode_url,
    install_encoder,
    is_canonical,
)
from sessionless.web.filters import OncePerRequestFilter, request_attributes
from sessionless.web.ports.filter import CallNext, WebFilter
from sessionless.web.properties import (
    CookieUrlProperties,
    EncodeURIProperties,
    HideExtensionProperties,
    LocaleFilterProperties,
)

__all__ = [
    "CallNext",
    "CookieUrlProperties",
    "DispatcherType",
    "EncodeURIProperties",
    "HideExtensionProperties",
    "LocaleFilterProperties",
    "OncePerRequestFilter",
    "ResponseCookie",
    "RewritingEncoder",
    "UrlEncoder",
    "WebFilter",
    "add_cookie",
    "canonical",
    "delete_cookie",
    "encode_redirect_url",
    "encode_url",
    "get_dispatcher_type",
    "install_encoder",
    "is_canonical",
    "request_attributes",
    "set_dispatcher_type",
]
