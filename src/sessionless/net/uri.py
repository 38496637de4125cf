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
"""URL classification and query-string surgery.

Everything here works on plain strings and never raises on malformed input:
URLs are user-controlled, so a URL that cannot be understood is reported as
"no scheme", "no parameter", etc. and left for the caller to pass through.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from urllib.parse import parse_qsl, quote, unquote_plus

import idna

# RFC 3986 scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

# Characters left as-is when encoding a query name or value.
_QUERY_SAFE = "-_.~!$'()*,:@/"

# Characters left as-is when converting a whole URL to ASCII: every RFC 3986
# reserved/unreserved character plus "%" so existing escapes survive.
_URI_SAFE = "!#$%&'()*+,/:;=?@[]~-._"

_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")


@dataclass(frozen=True)
class SplitUrl:
    """Views over the parts of a URL string.

    ``authority`` is only set when ``scheme`` is followed by ``//``.
    ``query`` and ``fragment`` are ``None`` when their delimiter is absent,
    and ``""`` when the delimiter is present with nothing after it.
    """

    scheme: str | None
    authority: str | None
    path: str
    query: str | None
    fragment: str | None

    @property
    def host(self) -> str | None:
        """Host part of the authority, without port or IPv6 brackets."""
        if self.authority is None:
            return None
        return host_of(self.authority)


def is_scheme(url: str, scheme: str) -> bool:
    """Check whether *url* begins with ``scheme:`` (case-insensitive)."""
    n = len(scheme)
    return len(url) > n and url[n] == ":" and url[:n].lower() == scheme.lower()


def has_scheme(url: str) -> bool:
    """Check whether *url* begins with any syntactically valid scheme."""
    return _SCHEME_RE.match(url) is not None


def host_of(authority: str) -> str:
    """Extract the host from ``[userinfo@]host[:port]``.

    Bracketed IPv6 literals are returned without their brackets.
    """
    host_port = authority.rpartition("@")[2]
    if host_port.startswith("["):
        end = host_port.find("]")
        return host_port[1:end] if end != -1 else host_port[1:]
    return host_port.partition(":")[0]


def split_url(url: str) -> SplitUrl:
    """Split *url* into scheme, authority, path, query and fragment."""
    rest = url
    fragment: str | None = None
    hash_pos = rest.find("#")
    if hash_pos != -1:
        fragment = rest[hash_pos + 1:]
        rest = rest[:hash_pos]

    query: str | None = None
    q_pos = rest.find("?")
    if q_pos != -1:
        query = rest[q_pos + 1:]
        rest = rest[:q_pos]

    scheme: str | None = None
    authority: str | None = None
    match = _SCHEME_RE.match(rest)
    if match is not None:
        scheme = rest[: match.end() - 1]
        rest = rest[match.end():]
        if rest.startswith("//"):
            rest = rest[2:]
            slash = rest.find("/")
            if slash == -1:
                authority, rest = rest, ""
            else:
                authority, rest = rest[:slash], rest[slash:]

    return SplitUrl(scheme=scheme, authority=authority, path=rest, query=query, fragment=fragment)


def path_of(url: str) -> str:
    """The part of *url* before any query or fragment (hier-part with scheme)."""
    end = len(url)
    for delim in ("?", "#"):
        pos = url.find(delim)
        if pos != -1 and pos < end:
            end = pos
    return url[:end]


def query_of(url: str) -> str | None:
    """The raw query of *url*, ``None`` when there is no ``?``."""
    return split_url(url).query


def _param_name(segment: str) -> str:
    name = segment.partition("=")[0]
    try:
        return unquote_plus(name, errors="strict")
    except UnicodeDecodeError:
        return name


def has_parameter(url: str, name: str) -> bool:
    """Check whether the query of *url* already contains ``name=``.

    A bare ``name`` segment without ``=`` does not count.
    """
    query = query_of(url)
    if not query:
        return False
    return any("=" in segment and _param_name(segment) == name for segment in query.split("&"))


def parse_query(query: str | None) -> list[tuple[str, str]]:
    """Decode a raw query into ordered ``(name, value)`` pairs, keeping blanks."""
    if not query:
        return []
    return parse_qsl(query, keep_blank_values=True)


def encode_component(value: str) -> str:
    """Percent-encode a query parameter name or value as UTF-8."""
    return quote(value, safe=_QUERY_SAFE)


def filter_query(query: str | None, keep: Callable[[str], bool]) -> str:
    """Keep the raw ``name[=value]`` segments whose decoded name passes *keep*.

    Surviving segments keep their original order and encoding.
    """
    if not query:
        return ""
    return "&".join(seg for seg in query.split("&") if seg and keep(_param_name(seg)))


def remove_parameter(query: str | None, name: str) -> str:
    """Drop every occurrence of *name* from a raw query string."""
    return filter_query(query, lambda n: n != name)


def replace_parameter(query: str | None, name: str, value: str) -> str:
    """Drop every occurrence of *name*, then append ``name=value`` last."""
    kept = remove_parameter(query, name)
    pair = f"{encode_component(name)}={encode_component(value)}"
    return f"{kept}&{pair}" if kept else pair


def add_parameters(url: str, pairs: Iterable[tuple[str, str]]) -> str:
    """Append encoded ``name=value`` pairs to the query of *url*, before any fragment."""
    encoded = "&".join(f"{encode_component(n)}={encode_component(v)}" for n, v in pairs)
    if not encoded:
        return url

    hash_pos = url.find("#")
    if hash_pos == -1:
        base, fragment = url, ""
    else:
        base, fragment = url[:hash_pos], url[hash_pos:]

    q_pos = base.find("?")
    if q_pos == -1:
        base = f"{base}?{encoded}"
    elif q_pos == len(base) - 1 or base.endswith("&"):
        base = f"{base}{encoded}"
    else:
        base = f"{base}&{encoded}"
    return base + fragment


def add_parameter(url: str, name: str, value: str) -> str:
    """Append one encoded ``name=value`` pair to *url*."""
    return add_parameters(url, [(name, value)])


def to_ascii(url: str) -> str:
    """Convert *url* to RFC 3986 URI form.

    Non-ASCII characters become percent-encoded UTF-8, an internationalized
    host becomes IDNA, and existing escapes are kept. On a host that IDNA
    rejects the host is percent-encoded like the rest of the URL.
    """
    parts = split_url(url)
    if parts.authority is not None and not parts.authority.isascii():
        host = parts.host or ""
        try:
            ascii_host = idna.encode(host, uts46=True).decode("ascii")
        except idna.IDNAError:
            ascii_host = None
        if ascii_host is not None:
            # Host follows the userinfo, which may repeat the host text
            start = len(parts.scheme or "") + 3 + parts.authority.rfind("@") + 1
            if url.startswith("[", start):
                start += 1
            url = url[:start] + ascii_host + url[start + len(host):]
    return quote(url, safe=_URI_SAFE)


def to_iri(url: str) -> str:
    """Convert *url* to RFC 3987 IRI form.

    Escaped UTF-8 sequences for printable non-ASCII characters are decoded;
    escapes of ASCII characters, and anything that is not valid UTF-8, stay
    encoded.
    """
    if "%" not in url:
        return url

    def _decode(match: re.Match[str]) -> str:
        run = match.group(0)
        raw = bytes(int(run[i + 1:i + 3], 16) for i in range(0, len(run), 3))
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return run
        out: list[str] = []
        for ch in text:
            if ord(ch) < 0x80 or not ch.isprintable() or ch.isspace():
                out.append("".join(f"%{b:02X}" for b in ch.encode("utf-8")))
            else:
                out.append(ch)
        return "".join(out)

    return _ESCAPE_RUN_RE.sub(_decode, url)
