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
"""Safe outgoing-URL rewriting shared by every state-propagating filter.

:func:`rewrite_url` decides *whether* a URL may be touched; the augmenter
passed in decides *how*. Augmenters only ever see a local path+query (plus
fragment), never a scheme or a foreign host, so no per-request state can
leak to another origin.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from sessionless.net.uri import has_scheme, host_of, is_scheme

logger = structlog.get_logger("sessionless.net")

Augmenter = Callable[[str], str]

BASE_EXCLUDED_SCHEMES: tuple[str, ...] = ("javascript", "mailto", "telnet", "tel", "cid")
LOCAL_EXCLUDED_SCHEMES: tuple[str, ...] = (*BASE_EXCLUDED_SCHEMES, "file", "data")

_HTTP = "http://"
_HTTPS = "https://"


def split_http(url: str) -> tuple[str, str] | None:
    """Split ``http(s)://rest`` into ``(protocol, rest)``; ``None`` for anything else.

    The protocol keeps the caller's original case.
    """
    for protocol in (_HTTP, _HTTPS):
        n = len(protocol)
        if len(url) > n and url[:n].lower() == protocol:
            return url[:n], url[n:]
    return None


def same_host(host: str, server_name: str | None) -> bool:
    if not server_name:
        return False
    return host.lower() == server_name.strip("[]").lower()


def rewrite_url(
    url: str,
    augment: Augmenter,
    server_name: str | None,
    excluded_schemes: Iterable[str] = LOCAL_EXCLUDED_SCHEMES,
) -> str:
    """Rewrite *url* through *augment* when it stays on this server.

    - Empty and anchor-only URLs are returned unchanged.
    - URLs in *excluded_schemes*, or with any scheme other than http(s),
      are returned unchanged.
    - ``http(s)://host[:port]/...`` and protocol-relative ``//host/...``
      are rewritten only when ``host`` equals *server_name*
      (case-insensitive); only the part from the first ``/`` is given to
      *augment*.
    - Local URLs are given to *augment* whole.

    When nothing changed the very same ``url`` object is returned.
    """
    if not url or url[0] == "#":
        return url

    split = split_http(url)
    if split is None:
        if url.startswith("//"):
            split = ("//", url[2:])
        elif any(is_scheme(url, scheme) for scheme in excluded_schemes) or has_scheme(url):
            return url
        else:
            return _apply(augment, url)

    protocol, remaining = split
    slash = remaining.find("/")
    if slash == -1:
        slash = len(remaining)
    host_port = remaining[:slash]

    if not same_host(host_of(host_port), server_name):
        # Going to a different host, do not add request state
        return url

    tail = remaining[slash:]
    rewritten = _apply(augment, tail)
    if len(rewritten) == len(tail) and rewritten == tail:
        return url
    return protocol + host_port + rewritten


def _apply(augment: Augmenter, url: str) -> str:
    try:
        return augment(url)
    except (ValueError, UnicodeError) as exc:
        logger.debug("url_rewrite_skipped", url=url, error=str(exc), error_type=type(exc).__name__)
        return url

