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
"""Tests for URL classification and query-string surgery."""

from __future__ import annotations

import pytest

from sessionless.net.uri import (
    add_parameter,
    add_parameters,
    encode_component,
    filter_query,
    has_parameter,
    has_scheme,
    host_of,
    is_scheme,
    parse_query,
    path_of,
    query_of,
    remove_parameter,
    replace_parameter,
    split_url,
    to_ascii,
    to_iri,
)


class TestSchemes:
    @pytest.mark.parametrize("url", ["mailto:a@b.c", "MAILTO:a@b.c", "MailTo:x"])
    def test_is_scheme_ignores_case(self, url: str) -> None:
        assert is_scheme(url, "mailto")

    def test_is_scheme_needs_colon(self) -> None:
        assert not is_scheme("mailto", "mailto")
        assert not is_scheme("mailtox:a", "mailto")
        assert not is_scheme("/mailto:a", "mailto")

    def test_has_scheme(self) -> None:
        assert has_scheme("ftp://example.com/")
        assert has_scheme("urn:isbn:123")
        assert not has_scheme("/path:with:colons")
        assert not has_scheme("page.html?a=b:c")
        assert not has_scheme("1abc:def")


class TestSplitUrl:
    def test_full_url(self) -> None:
        parts = split_url("https://user@Example.com:8443/a/b?x=1&y=2#frag")
        assert parts.scheme == "https"
        assert parts.authority == "user@Example.com:8443"
        assert parts.host == "Example.com"
        assert parts.path == "/a/b"
        assert parts.query == "x=1&y=2"
        assert parts.fragment == "frag"

    def test_local_url(self) -> None:
        parts = split_url("/a/b?x")
        assert parts.scheme is None
        assert parts.authority is None
        assert parts.host is None
        assert parts.path == "/a/b"
        assert parts.query == "x"
        assert parts.fragment is None

    def test_empty_query_and_fragment_are_distinct_from_missing(self) -> None:
        parts = split_url("/a?#")
        assert parts.query == ""
        assert parts.fragment == ""

    def test_authority_without_path(self) -> None:
        parts = split_url("http://example.com")
        assert parts.authority == "example.com"
        assert parts.path == ""

    def test_question_mark_inside_fragment(self) -> None:
        parts = split_url("/a#b?c")
        assert parts.query is None
        assert parts.fragment == "b?c"

    def test_never_raises_on_garbage(self) -> None:
        parts = split_url("%zz://[::1")
        assert parts.path == "%zz://[::1"


class TestHostOf:
    @pytest.mark.parametrize(
        ("authority", "host"),
        [
            ("example.com", "example.com"),
            ("example.com:8080", "example.com"),
            ("user:pw@example.com:8080", "example.com"),
            ("[::1]:8080", "::1"),
            ("[::1]", "::1"),
            ("[::1", "::1"),
        ],
    )
    def test_host_of(self, authority: str, host: str) -> None:
        assert host_of(authority) == host


class TestPathAndQuery:
    def test_path_of_stops_at_first_delimiter(self) -> None:
        assert path_of("/a/b.css?x=1#y") == "/a/b.css"
        assert path_of("/a#b?c") == "/a"
        assert path_of("") == ""

    def test_query_of(self) -> None:
        assert query_of("/a?b=1#c") == "b=1"
        assert query_of("/a#?b") is None


class TestHasParameter:
    @pytest.mark.parametrize(
        "url",
        ["/p?hl=en", "/p?a=1&hl=en", "/p?hl=", "/p?h%6C=en#x"],
    )
    def test_present(self, url: str) -> None:
        assert has_parameter(url, "hl")

    @pytest.mark.parametrize(
        "url",
        ["/p", "/p?", "/p?xhl=en", "/p?a=hl", "/p#?hl=en", "/p?hlx=1", "/p?hl", "/p?a=1&hl"],
    )
    def test_absent(self, url: str) -> None:
        assert not has_parameter(url, "hl")


class TestQueryEditing:
    def test_parse_query_keeps_order_and_blanks(self) -> None:
        assert parse_query("b=2&a=&c&b=3") == [("b", "2"), ("a", ""), ("c", ""), ("b", "3")]
        assert parse_query("") == []
        assert parse_query(None) == []

    def test_encode_component(self) -> None:
        assert encode_component("cookie:name") == "cookie:name"
        assert encode_component("a b&c=d") == "a%20b%26c%3Dd"
        assert encode_component("é") == "%C3%A9"

    def test_filter_query_keeps_raw_segments(self) -> None:
        query = "x=%2F&cookie%3Aid=5&y=a+b"
        assert filter_query(query, lambda name: not name.startswith("cookie:")) == "x=%2F&y=a+b"

    def test_remove_parameter_removes_every_occurrence(self) -> None:
        assert remove_parameter("a=1&hl=en&b=2&hl=fr", "hl") == "a=1&b=2"
        assert remove_parameter("hl=en", "hl") == ""
        assert remove_parameter(None, "hl") == ""

    def test_replace_parameter_appends_last(self) -> None:
        assert replace_parameter("hl=fr&a=%20&b=2", "hl", "en-GB") == "a=%20&b=2&hl=en-GB"
        assert replace_parameter("", "hl", "en") == "hl=en"


class TestAddParameters:
    def test_adds_query(self) -> None:
        assert add_parameter("/p", "hl", "en") == "/p?hl=en"

    def test_appends_to_existing_query(self) -> None:
        assert add_parameter("/p?a=1", "hl", "en") == "/p?a=1&hl=en"

    def test_reuses_trailing_delimiters(self) -> None:
        assert add_parameter("/p?", "hl", "en") == "/p?hl=en"
        assert add_parameter("/p?a=1&", "hl", "en") == "/p?a=1&hl=en"

    def test_inserts_before_fragment(self) -> None:
        assert add_parameter("/p?a=1#top", "hl", "en") == "/p?a=1&hl=en#top"
        assert add_parameter("/p#top?x", "hl", "en") == "/p?hl=en#top?x"

    def test_encodes_names_and_values(self) -> None:
        assert add_parameters("/p", [("cookie:id", "a b"), ("v", "é")]) == "/p?cookie:id=a%20b&v=%C3%A9"

    def test_no_pairs_returns_same_object(self) -> None:
        url = "/p?a=1"
        assert add_parameters(url, []) is url


class TestToAscii:
    def test_percent_encodes_utf8(self) -> None:
        assert to_ascii("/café?q=é") == "/caf%C3%A9?q=%C3%A9"

    def test_keeps_existing_escapes_and_reserved(self) -> None:
        url = "http://example.com/a%20b?x=1&y=%2F#frag"
        assert to_ascii(url) == url

    def test_encodes_spaces(self) -> None:
        assert to_ascii("/a b") == "/a%20b"

    def test_idna_host(self) -> None:
        assert to_ascii("http://bücher.example/ü") == "http://xn--bcher-kva.example/%C3%BC"

    def test_idna_applies_to_host_not_userinfo(self) -> None:
        assert to_ascii("http://bücher@bücher.de/") == "http://b%C3%BCcher@xn--bcher-kva.de/"
        assert to_ascii("http://ü:pw@bücher.de:8080/") == "http://%C3%BC:pw@xn--bcher-kva.de:8080/"

    def test_host_rejected_by_idna_is_percent_encoded(self) -> None:
        assert to_ascii("http://ü..example/") == "http://%C3%BC..example/"


class TestToIri:
    def test_decodes_non_ascii(self) -> None:
        assert to_iri("/caf%C3%A9?q=%E2%82%AC") == "/café?q=€"

    def test_keeps_ascii_escapes(self) -> None:
        assert to_iri("/a%20b?x=%2F") == "/a%20b?x=%2F"

    def test_keeps_invalid_utf8(self) -> None:
        assert to_iri("/a%C3") == "/a%C3"
        assert to_iri("/a%FF%FE") == "/a%FF%FE"

    def test_plain_url_unchanged(self) -> None:
        url = "/plain?x=1"
        assert to_iri(url) is url
