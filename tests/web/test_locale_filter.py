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
"""End-to-end tests for LocaleFilter through the filter chain."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Mount, Route
from starlette.testclient import TestClient

from sessionless.container.ordering import HIGHEST_PRECEDENCE, order
from sessionless.i18n.adapters import FileLocaleSupport, StaticLocaleSupport
from sessionless.i18n.current import get_current_locale
from sessionless.kernel.exceptions import ConfigurationException, FilterNotAppliedException
from sessionless.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionless.web.adapters.starlette.filters import LocaleFilter
from sessionless.web.dispatch import DispatcherType, set_dispatcher_type
from sessionless.web.encoding import encode_url
from sessionless.web.filters import OncePerRequestFilter

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class CountingLocaleSupport(StaticLocaleSupport):
    def __init__(self, locales) -> None:
        super().__init__(locales)
        self.lookups = 0

    async def get_supported_locales(self, request):
        self.lookups += 1
        return await super().get_supported_locales(request)


@order(HIGHEST_PRECEDENCE + 1)
class ErrorDispatchFilter(OncePerRequestFilter):
    """Marks every request as an error-page dispatch."""

    async def do_filter_internal(self, request, call_next):
        set_dispatcher_type(request, DispatcherType.ERROR)
        return await call_next(request)


async def page(request: Request) -> JSONResponse:
    locale = getattr(request.state, "locale", None)
    current = get_current_locale()
    return JSONResponse(
        {
            "locale": str(locale) if locale else None,
            "current": str(current) if current else None,
            "link": encode_url("/other?a=1"),
            "absolute": encode_url("http://testserver/other"),
            "foreign": encode_url("http://elsewhere.org/other"),
            "asset": encode_url("/style.css"),
            "enabled": list(LocaleFilter.get_enabled_locales(request)),
        }
    )


async def asset(request: Request) -> PlainTextResponse:
    return PlainTextResponse("body {}")


ROUTES = [
    Route("/page", page, methods=["GET", "POST"]),
    Route("/style.css", asset),
]


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=ROUTES,
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


def _client(*locales: str, **kwargs) -> TestClient:
    return TestClient(_make_app(LocaleFilter(StaticLocaleSupport(locales), **kwargs)), follow_redirects=False)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestLocaleFilterConstruction:
    def test_empty_param_name_rejected(self):
        with pytest.raises(ConfigurationException):
            LocaleFilter(StaticLocaleSupport(["en"]), param_name="")

    def test_defaults(self):
        f = LocaleFilter(StaticLocaleSupport(["en"]))
        assert f.param_name == "hl"


class TestLocaleFilterRedirects:
    def test_parameter_canonicalized_to_best_match(self):
        client = _client("en-US", "en-GB", "fr")
        resp = client.get("/page?hl=en-GB-scouse&a=1")
        assert resp.status_code == 301
        assert resp.headers["location"] == "http://testserver/page?a=1&hl=en-GB"

    def test_missing_parameter_negotiated_from_accept_language(self):
        client = _client("en-US", "en-GB", "fr")
        resp = client.get("/page", headers={"Accept-Language": "de, fr;q=0.9, en-GB;q=0.8"})
        assert resp.status_code == 301
        assert resp.headers["location"] == "http://testserver/page?hl=fr"

    def test_exact_match_beats_higher_approximate_match(self):
        client = _client("en", "fr")
        resp = client.get("/page", headers={"Accept-Language": "en-AU, fr;q=0.5"})
        assert resp.headers["location"] == "http://testserver/page?hl=fr"

    def test_missing_parameter_without_header_uses_default(self):
        client = _client("en-US", "fr")
        resp = client.get("/page")
        assert resp.headers["location"] == "http://testserver/page?hl=en-US"

    def test_unknown_parameter_falls_back(self):
        client = _client("en", "fr")
        resp = client.get("/page?hl=xx", headers={"Accept-Language": "fr"})
        assert resp.headers["location"] == "http://testserver/page?hl=fr"

    def test_single_locale_strips_parameter(self):
        client = _client("en")
        resp = client.get("/page?hl=en&a=1")
        assert resp.status_code == 301
        assert resp.headers["location"] == "http://testserver/page?a=1"

    def test_parameter_stripped_from_non_localized_path(self):
        client = _client("en", "fr")
        resp = client.get("/style.css?hl=fr")
        assert resp.headers["location"] == "http://testserver/style.css"

    def test_custom_status_and_parameter(self):
        client = _client("en", "fr", param_name="lang", redirect_status_code=302)
        resp = client.get("/page?lang=en-GB")
        assert resp.status_code == 302
        assert resp.headers["location"] == "http://testserver/page?lang=en"


class TestLocaleFilterNegotiated:
    def test_locale_exposed_and_urls_rewritten(self):
        client = _client("en", "fr")
        resp = client.get("/page?hl=fr")
        assert resp.status_code == 200
        assert resp.headers["content-language"] == "fr"
        data = resp.json()
        assert data["locale"] == "fr"
        assert data["current"] == "fr"
        assert data["link"] == "/other?a=1&hl=fr"
        assert data["absolute"] == "http://testserver/other?hl=fr"
        assert data["foreign"] == "http://elsewhere.org/other"
        assert data["asset"] == "/style.css"
        assert data["enabled"] == ["en", "fr"]

    def test_post_is_never_redirected(self):
        client = _client("en", "fr")
        resp = client.post("/page", headers={"Accept-Language": "fr"})
        assert resp.status_code == 200
        assert resp.headers["content-language"] == "fr"
        assert resp.json()["link"] == "/other?a=1&hl=fr"

    def test_error_dispatch_is_never_redirected(self):
        f = LocaleFilter(StaticLocaleSupport(["en", "fr"]))
        client = TestClient(_make_app(f, ErrorDispatchFilter()), follow_redirects=False)
        resp = client.get("/page")
        assert resp.status_code == 200
        assert resp.headers["content-language"] == "en"

    def test_single_locale_is_not_propagated(self):
        client = _client("en")
        resp = client.get("/page")
        assert resp.status_code == 200
        assert resp.headers["content-language"] == "en"
        assert resp.json()["link"] == "/other?a=1"

    def test_no_locales_passes_through(self):
        client = _client()
        resp = client.get("/page")
        assert resp.status_code == 200
        assert "content-language" not in resp.headers
        data = resp.json()
        assert data["locale"] is None
        assert data["enabled"] == []

    def test_non_localized_path_passes_through(self):
        client = _client("en", "fr")
        resp = client.get("/style.css")
        assert resp.status_code == 200
        assert "content-language" not in resp.headers


class TestLocaleFilterEnabledLocales:
    def test_outside_filter_raises(self):
        client = TestClient(_make_app(), raise_server_exceptions=True)
        with pytest.raises(FilterNotAppliedException):
            client.get("/page")


class TestLocaleFilterFileSource:
    def test_locales_read_from_file(self, tmp_path):
        path = tmp_path / "locales.yaml"
        path.write_text("locales: [en, fr]\ndefault: fr\n")
        client = TestClient(_make_app(LocaleFilter(FileLocaleSupport(path))), follow_redirects=False)
        assert client.get("/page").headers["location"] == "http://testserver/page?hl=fr"

    def test_missing_file_fails_request(self, tmp_path):
        f = LocaleFilter(FileLocaleSupport(tmp_path / "missing.yaml"))
        client = TestClient(_make_app(f), raise_server_exceptions=False)
        assert client.get("/page?hl=en").status_code == 500


class TestLocaleFilterNestedDispatch:
    def test_mounted_app_with_same_filter_applies_once(self):
        support = CountingLocaleSupport(["en", "fr"])
        inner = _make_app(LocaleFilter(support))
        outer = Starlette(
            routes=[Mount("/sub", app=inner)],
            middleware=[Middleware(WebFilterChainMiddleware, filters=[LocaleFilter(support)])],
        )
        resp = TestClient(outer).get("/sub/page?hl=fr")
        assert resp.status_code == 200
        assert resp.headers["content-language"] == "fr"
        assert resp.json()["link"] == "/other?a=1&hl=fr"
        assert support.lookups == 1
