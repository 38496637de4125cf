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
"""Locale value type, canonical strings, and best-match lookup."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Locale:
    """A language with optional region and variant.

    ``language`` is stored lowercase and ``region`` uppercase; ``variant`` is
    kept as given. Equality and hashing follow :attr:`tag`, the canonical
    string, so ``Locale("en", "", "x") == Locale("en")``.
    """

    language: str = ""
    region: str = ""
    variant: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "language", self.language.lower())
        object.__setattr__(self, "region", self.region.upper())

    @classmethod
    def parse(cls, tag: str) -> Locale:
        """Split ``language[-region[-variant]]`` on hyphens.

        Everything after the second hyphen is the variant.
        """
        language, sep, rest = tag.partition("-")
        if not sep:
            return cls(language)
        region, _, variant = rest.partition("-")
        return cls(language, region, variant)

    @property
    def tag(self) -> str:
        return to_locale_string(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locale):
            return NotImplemented
        return self.tag == other.tag

    def __hash__(self) -> int:
        return hash(self.tag)

    def __str__(self) -> str:
        return self.tag


def to_locale_string(locale: Locale) -> str:
    """Canonical string: ``language``, ``language-REGION`` or ``language-REGION-variant``.

    Region is only added when language is present; variant only when both
    language and region are present.
    """
    if not locale.language:
        return ""
    if not locale.region:
        return locale.language
    if not locale.variant:
        return f"{locale.language}-{locale.region}"
    return f"{locale.language}-{locale.region}-{locale.variant}"


def supported_locale_map(
    locales: Iterable[Locale | str],
    to_string: Callable[[Locale], str] = to_locale_string,
) -> dict[str, Locale]:
    """Build a canonical-string → Locale mapping, first occurrence wins.

    Strings are parsed with :meth:`Locale.parse`; locales whose canonical
    string is empty are skipped.
    """
    supported: dict[str, Locale] = {}
    for item in locales:
        locale = Locale.parse(item) if isinstance(item, str) else item
        key = to_string(locale)
        if key and key not in supported:
            supported[key] = locale
    return supported


@dataclass(frozen=True)
class MatchedLocale:
    """A supported locale together with how precisely it matched.

    ``exact`` is true when every component of the requested tag was matched
    at that specificity.
    """

    locale: Locale
    exact: bool


def get_best_match(
    supported: Mapping[str, Locale],
    language_tag: str,
    to_string: Callable[[Locale], str] = to_locale_string,
) -> MatchedLocale | None:
    """Resolve the best supported locale for *language_tag*.

    1. Exact match on language, region and variant
    2. Match on language and region
    3. Match on language
    4. ``None``
    """
    requested = Locale.parse(language_tag)
    language, region, variant = requested.language, requested.region, requested.variant
    if not language:
        return None

    if region:
        if variant:
            match = supported.get(to_string(Locale(language, region, variant)))
            if match is not None:
                return MatchedLocale(match, True)
        match = supported.get(to_string(Locale(language, region)))
        if match is not None:
            return MatchedLocale(match, not variant)

    match = supported.get(to_string(Locale(language)))
    if match is not None:
        return MatchedLocale(match, not region and not variant)
    return None
