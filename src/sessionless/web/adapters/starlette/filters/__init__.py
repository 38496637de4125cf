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
"""Built-in WebFilter implementations for Starlette."""

from sessionless.web.adapters.starlette.filters.cookie_url_filter import CookieUrlFilter
from sessionless.web.adapters.starlette.filters.encode_uri_filter import EncodeURIFilter
from sessionless.web.adapters.starlette.filters.hide_extension_filter import HideExtensionFilter
from sessionless.web.adapters.starlette.filters.locale_filter import LocaleFilter
from sessionless.web.adapters.starlette.filters.request_context_filter import RequestContextFilter

__all__ = [
    "CookieUrlFilter",
    "EncodeURIFilter",
    "HideExtensionFilter",
    "LocaleFilter",
    "RequestContextFilter",
]
