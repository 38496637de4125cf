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
"""Configuration models for the built-in filters.

List settings also accept a comma or whitespace separated string, the form
they take when overridden from ``SESSIONLESS_*`` environment variables.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from sessionless.core.config import config_properties


def _split_list(value: object) -> object:
    if isinstance(value, str):
        return [item for item in value.replace(",", " ").split() if item]
    return value


StrList = Annotated[list[str], BeforeValidator(_split_list)]


@config_properties(prefix="sessionless.web.locale")
class LocaleFilterProperties(BaseModel):
    """Locale negotiation and propagation."""

    enabled: bool = True
    param_name: str = Field(default="hl", min_length=1)
    redirect_status_code: int = Field(default=301, ge=300, le=399)
    supported_locales: StrList = Field(
        default_factory=list,
        description="Locale strings in preference order, used when no locales_file is set.",
    )
    default_locale: str | None = None
    locales_file: str | None = Field(
        default=None,
        description="YAML file with 'locales' and 'default', reloaded when modified.",
    )


@config_properties(prefix="sessionless.web.cookies")
class CookieUrlProperties(BaseModel):
    """Cookie propagation through URL parameters."""

    enabled: bool = True
    cookie_names: StrList = Field(default_factory=list)
    param_prefix: str = Field(default="cookie:", min_length=1)


@config_properties(prefix="sessionless.web.hide_extension")
class HideExtensionProperties(BaseModel):
    """Hiding of page extensions in URLs."""

    enabled: bool = False
    extensions: StrList = Field(default_factory=lambda: [".html", ".htm"])
    no_rewrite_patterns: StrList = Field(default_factory=list)
    redirect_status_code: int = Field(default=301, ge=300, le=399)
    directory: str | None = Field(
        default=None,
        description="Directory checked for 'path + extension' before forwarding.",
    )

    @field_validator("extensions")
    @classmethod
    def check_extensions(cls, value: list[str]) -> list[str]:
        if not value or any(not ext.startswith(".") or len(ext) < 2 for ext in value):
            raise ValueError("extensions must be non-empty and each start with '.'")
        return value


@config_properties(prefix="sessionless.web.encode_uri")
class EncodeURIProperties(BaseModel):
    """URL output format."""

    enabled: bool = True
    enable_iri: bool = False
