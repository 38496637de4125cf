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
"""Sessionless exception hierarchy.

All filter and negotiation errors derive from :class:`SessionlessException`,
which carries an optional error code and a context dict for structured error
data.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class SessionlessException(Exception):
    """Base exception for all sessionless errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "COOKIE_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(SessionlessException):
    """A filter was configured, or used, in a way its configuration forbids.

    Raised at startup for invalid settings and at the point of use for
    operations the allow-lists reject (e.g. adding an unexpected cookie).
    """


class FilterNotAppliedException(SessionlessException):
    """Request-scoped data was requested outside the filter that provides it."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SessionlessException):
    """Failures of the resources backing the filters."""


class LocaleSourceException(InfrastructureException):
    """The supported-locale source could not be loaded.

    Never served from stale data: the current request fails.
    """
