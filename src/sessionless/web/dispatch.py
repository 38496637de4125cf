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
"""How a request reached the filter chain."""

from __future__ import annotations

from enum import Enum
from typing import Any

from sessionless.web.filters import request_attributes

DISPATCHER_TYPE_ATTRIBUTE = "sessionless.dispatcher_type"


class DispatcherType(str, Enum):
    REQUEST = "request"
    FORWARD = "forward"
    ERROR = "error"


def get_dispatcher_type(request: Any) -> DispatcherType:
    """Dispatcher type of *request*, :attr:`DispatcherType.REQUEST` unless marked."""
    return request_attributes(request).get(DISPATCHER_TYPE_ATTRIBUTE, DispatcherType.REQUEST)


def set_dispatcher_type(request: Any, dispatcher_type: DispatcherType) -> DispatcherType:
    """Mark *request*; returns the previous type so callers can restore it.

    Error handlers that render a page through the filter chain mark the
    request :attr:`DispatcherType.ERROR` so no redirect is issued for it.
    """
    attributes = request_attributes(request)
    previous = attributes.get(DISPATCHER_TYPE_ATTRIBUTE, DispatcherType.REQUEST)
    attributes[DISPATCHER_TYPE_ATTRIBUTE] = dispatcher_type
    return previous
