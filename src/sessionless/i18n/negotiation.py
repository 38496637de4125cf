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
"""Accept-Language parsing and quality-weighted negotiation."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass

from sessionless.i18n.locale import Locale, MatchedLocale, get_best_match


@dataclass(frozen=True)
class AcceptLanguageEntry:
    """One ``tag[;q=value]`` segment of an ``Accept-Language`` header."""

    language_tag: str
    quality: float = 1.0


def parse_quality(params: str) -> float:
    """Read the quality from the text after the first ``;`` of a segment.

    Accepts ``q=0.5`` (any case, any spacing) or a bare ``0.5``. Returns 0
    for anything unparsable or outside ``[0, 1]``, so the entry is dropped.
    """
    for param in params.split(";"):
        name, sep, value = param.partition("=")
        if sep:
            if name.strip().lower() != "q":
                continue
        else:
            value = name
        try:
            quality = float(value.strip())
        except ValueError:
            return 0.0
        if not math.isfinite(quality) or quality < 0 or quality > 1:
            return 0.0
        return quality
    return 1.0


def parse_accept_language(headers: Iterable[str]) -> Iterator[AcceptLanguageEntry]:
    """Yield every acceptable entry from one or more header occurrences.

    Entries keep header order. Empty tags and entries with quality ≤ 0 are
    skipped.
    """
    for header in headers:
        for pair in header.split(","):
            tag, sep, params = pair.partition(";")
            tag = tag.strip()
            if not tag:
                continue
            quality = parse_quality(params) if sep else 1.0
            if quality > 0:
                yield AcceptLanguageEntry(tag, quality)


def negotiate(
    supported: Mapping[str, Locale],
    headers: Iterable[str],
    match: Callable[[Mapping[str, Locale], str], MatchedLocale | None] = get_best_match,
) -> Locale | None:
    """Select the best supported locale from ``Accept-Language`` *headers*.

    Exact and approximate matches are tracked separately. Within each, a
    strictly higher quality replaces the current best, so the first entry
    wins ties. Any exact match is preferred over every approximate match.
    Returns ``None`` when nothing matched; the caller falls back to its
    default locale.
    """
    best_exact: Locale | None = None
    best_exact_q = 0.0
    best_approx: Locale | None = None
    best_approx_q = 0.0

    for entry in parse_accept_language(headers):
        q = entry.quality
        if q <= best_exact_q and q <= best_approx_q:
            continue
        matched = match(supported, entry.language_tag)
        if matched is None:
            continue
        if matched.exact:
            if q > best_exact_q:
                best_exact, best_exact_q = matched.locale, q
        elif q > best_approx_q:
            best_approx, best_approx_q = matched.locale, q

    return best_exact if best_exact is not None else best_approx
