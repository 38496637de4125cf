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
"""Tests for Accept-Language parsing and negotiation."""

from __future__ import annotations

import pytest

from sessionless.i18n.locale import Locale, supported_locale_map
from sessionless.i18n.negotiation import (
    AcceptLanguageEntry,
    negotiate,
    parse_accept_language,
    parse_quality,
)


class TestParseQuality:
    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            ("q=0.5", 0.5),
            (" Q = 0.8 ", 0.8),
            ("0.3", 0.3),
            ("level=1;q=0.2", 0.2),
            ("q=1", 1.0),
            ("level=1", 1.0),
        ],
    )
    def test_valid(self, params: str, expected: float) -> None:
        assert parse_quality(params) == pytest.approx(expected)

    @pytest.mark.parametrize("params", ["q=abc", "q=", "q=1.5", "q=-0.1", "q=nan", "q=inf", "abc"])
    def test_invalid_is_zero(self, params: str) -> None:
        assert parse_quality(params) == 0.0


class TestParseAcceptLanguage:
    def test_multiple_headers_keep_order(self) -> None:
        entries = list(parse_accept_language(["fr;q=0.5, en", "de;q=0.9"]))
        assert entries == [
            AcceptLanguageEntry("fr", 0.5),
            AcceptLanguageEntry("en", 1.0),
            AcceptLanguageEntry("de", 0.9),
        ]

    def test_skips_empty_zero_and_invalid(self) -> None:
        entries = list(parse_accept_language([" , en;q=0, fr;q=x, ,de;q=0.1"]))
        assert entries == [AcceptLanguageEntry("de", 0.1)]


@pytest.fixture
def supported() -> dict[str, Locale]:
    return supported_locale_map(["en", "en-GB", "fr"])


class TestNegotiate:
    def test_exact_beats_higher_quality_approximate(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["en-US;q=0.9, fr;q=0.5"]) == Locale("fr")

    def test_approximate_when_no_exact(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["fr-CA, es"]) == Locale("fr")

    def test_highest_quality_wins(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["en;q=0.4, fr;q=0.7"]) == Locale("fr")

    def test_first_wins_ties(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["fr, en"]) == Locale("fr")
        assert negotiate(supported, ["en, fr"]) == Locale("en")

    def test_categories_are_tracked_separately(self, supported: dict[str, Locale]) -> None:
        # A high-quality approximate match does not stop a later exact match
        assert negotiate(supported, ["fr-CA;q=1", "en-GB;q=0.2"]) == Locale("en", "GB")

    def test_headers_are_combined(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["es", "en-GB;q=0.3"]) == Locale("en", "GB")

    def test_nothing_matches(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["es, it;q=0.5"]) is None
        assert negotiate(supported, []) is None

    def test_wildcard_is_not_a_language(self, supported: dict[str, Locale]) -> None:
        assert negotiate(supported, ["*"]) is None
