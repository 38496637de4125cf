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
"""Non-page resource extensions that never carry propagated state."""

from __future__ import annotations

from collections.abc import Iterable

from sessionless.net.uri import path_of

#: Resources that are never localized and never receive a locale parameter.
EXCLUDED_EXTENSIONS: tuple[str, ...] = (
    ".bmp",
    ".css",
    ".dia",
    ".exe",
    ".gif",
    ".ico",
    ".jpeg",
    ".jpg",
    ".js",
    ".png",
    ".svg",
    ".txt",
    ".webp",
    ".zip",
    # Web development
    ".less",
    ".sass",
    ".scss",
    ".css.map",
    ".js.map",
)

#: Resources that never receive cookie parameters.
COOKIE_EXCLUDED_EXTENSIONS: tuple[str, ...] = EXCLUDED_EXTENSIONS[:14]


def has_excluded_extension(url: str, extensions: Iterable[str] = EXCLUDED_EXTENSIONS) -> bool:
    """Case-insensitive suffix match of the path of *url* against *extensions*.

    Query and fragment are ignored.
    """
    path = path_of(url).lower()
    return any(path.endswith(ext) for ext in extensions)


def is_localized_path(url: str) -> bool:
    """Whether *url* points to a resource that may be localized."""
    return not has_excluded_extension(url, EXCLUDED_EXTENSIONS)
