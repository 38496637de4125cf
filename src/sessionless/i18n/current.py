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
"""Task-local "current locale" used while formatting a response.

Bindings nest: :func:`bind_locale` restores the previous locale on exit, so
a nested dispatch on the same request leaves the caller's locale intact.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from sessionless.i18n.locale import Locale

_current_locale_var: ContextVar[Locale | None] = ContextVar(
    "sessionless_current_locale", default=None
)


def get_current_locale(default: Locale | None = None) -> Locale | None:
    """The locale bound to the current task, or *default*."""
    locale = _current_locale_var.get()
    return locale if locale is not None else default


@contextmanager
def bind_locale(locale: Locale) -> Iterator[Locale]:
    """Bind *locale* as the current locale for the ``with`` block."""
    token = _current_locale_var.set(locale)
    try:
        yield locale
    finally:
        _current_locale_var.reset(token)
