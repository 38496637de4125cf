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
"""Tests for EncodeURIFilter — URI and IRI output."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from sessionless.i18n.adapters import StaticLocaleSupport
from sessionless.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionless.web.adapters.starlette.filters import EncodeURIFilter, LocaleFilter
from sessionless.web.encoding import canonical, encode_redirect_url, encode_url


async def links(request: Request) -> JSONResponse:
    active = EncodeURIFilter.get_active_filter(request)
    with canonical():
        shareable = encode_url("/caf%C3%A9")
    return JSONResponse(
        {
            "active_iri": active.enable_iri if active else None,
            "escaped": encode_url("/caf%C3%A9?q=%C3%BC"),
            "raw": encode_url("/café?q=ü"),
            "redirect": encode_redirect_url("/café"),
            "canonical": shareable,
            "script": encode_url("javascript:alert('é')"),
        }
    )


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=[Route("/links", links), Route("/café", links)],
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


class TestEncode:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("/café?q=ü", "/caf%C3%A9?q=%C3%BC"),
            ("/caf%C3%A9", "/caf%C3%A9"),
            ("http://bücher.example/a", "http://xn--bcher-kva.example/a"),
            ("mailto:é@example.com", "mailto:%C3%A9@example.com"),
            ("data:text/plain,é", "data:text/plain,é"),
            ("cid:é", "cid:é"),
        ],
    )
    def test_uri_form(self, url, expected):
        assert EncodeURIFilter().encode(url) == expected

    def test_iri_form(self):
        f = EncodeURIFilter(enable_iri=True)
        assert f.encode("/caf%C3%A9?q=%20") == "/café?q=%20"
        assert f.encode("/café") == "/café"
        assert f.encode("/caf%C3%A9", iri=False) == "/caf%C3%A9"

    def test_canonical_is_always_uri(self):
        with canonical():
            assert EncodeURIFilter(enable_iri=True).encode("/café") == "/caf%C3%A9"


class TestEncodeURIFilter:
    def test_uri_mode(self):
        data = TestClient(_make_app(EncodeURIFilter())).get("/links").json()
        assert data["active_iri"] is False
        assert data["escaped"] == "/caf%C3%A9?q=%C3%BC"
        assert data["raw"] == "/caf%C3%A9?q=%C3%BC"
        assert data["redirect"] == "/caf%C3%A9"
        assert data["script"] == "javascript:alert('é')"

    def test_iri_mode(self):
        data = TestClient(_make_app(EncodeURIFilter(enable_iri=True))).get("/links").json()
        assert data["active_iri"] is True
        assert data["escaped"] == "/café?q=ü"
        assert data["raw"] == "/café?q=ü"
        assert data["redirect"] == "/caf%C3%A9"
        assert data["canonical"] == "/caf%C3%A9"

    def test_no_active_filter_outside(self):
        data = TestClient(_make_app()).get("/links").json()
        assert data["active_iri"] is None
        assert data["raw"] == "/café?q=ü"

    def test_runs_after_inner_encoders(self):
        filters = [EncodeURIFilter(enable_iri=True), LocaleFilter(StaticLocaleSupport(["en", "fr"]))]
        data = TestClient(_make_app(*filters)).get("/links?hl=fr").json()
        assert data["escaped"] == "/café?q=ü&hl=fr"

    def test_locale_redirect_location_is_ascii(self):
        filters = [EncodeURIFilter(enable_iri=True), LocaleFilter(StaticLocaleSupport(["en", "fr"]))]
        client = TestClient(_make_app(*filters), follow_redirects=False)
        resp = client.get("/caf%C3%A9")
        assert resp.status_code == 301
        assert resp.headers["location"] == "http://testserver/caf%C3%A9?hl=en"
