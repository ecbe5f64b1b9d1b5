"""HTTP request value.

Frozen metadata plus two deliberately mutable dicts: ``attributes``
(middleware hands derived data to the handler) and a private cache
for the lazily parsed JSON body.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlsplit

from smallwork.http.cookies import parse_cookies
from smallwork.http.headers import Headers
from smallwork.http.query import QueryParams

_JSON_KEY = "_json"


def _parse_json(raw: bytes) -> Any:
    """Decode a JSON body; invalid or falsy payloads become an empty dict."""
    try:
        data = json_module.loads(raw)
    except ValueError:
        return {}
    return data or {}


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request.

    Build one with ``Request.create(...)`` (tests, internal calls) or
    ``Request.capture(environ)`` (live serving).

    ``path_params`` is filled in by the App after routing. ``attributes``
    is a per-request bag that middleware write and handlers read; it is
    kept apart from ``form`` so submitted fields can never collide with
    derived values.
    """

    method: str
    path: str
    query: QueryParams
    form: Mapping[str, Any]
    headers: Headers
    body: bytes
    path_params: dict[str, str] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)
    cookies: Mapping[str, str] = field(default_factory=dict)

    # Private: mutable cache for the parsed body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Factories --

    @classmethod
    def create(
        cls,
        method: str,
        path: str,
        *,
        query: str | Mapping[str, Any] | None = None,
        form: Mapping[str, Any] | None = None,
        body: str | bytes = b"",
        headers: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a request explicitly."""
        raw = body.encode("utf-8") if isinstance(body, str) else body
        hdrs = Headers(headers or {})
        return cls(
            method=method.upper(),
            path=path or "/",
            query=QueryParams(query),
            form=dict(form or {}),
            headers=hdrs,
            body=raw,
            cookies=parse_cookies(hdrs.get("cookie")),
        )

    @classmethod
    def capture(
        cls,
        environ: Mapping[str, Any],
        *,
        form: Mapping[str, Any] | None = None,
        body: str | bytes | None = None,
    ) -> Request:
        """Create a request from a WSGI/CGI-style environ.

        Headers come from the ``HTTP_*`` keys (``HTTP_X_API_KEY`` becomes
        ``X-Api-Key``) plus ``CONTENT_TYPE`` and ``CONTENT_LENGTH``. When
        *body* is not given it is read from ``wsgi.input``. A URL-encoded
        body fills ``form`` unless a form mapping is passed in.
        """
        method = str(environ.get("REQUEST_METHOD") or "GET").upper()

        path = environ.get("PATH_INFO")
        query_string = environ.get("QUERY_STRING")
        if not path:
            uri = urlsplit(str(environ.get("REQUEST_URI") or "/"))
            path = uri.path or "/"
            if query_string is None:
                query_string = uri.query

        headers: list[tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                name = key[5:].replace("_", "-").title()
                headers.append((name, str(value)))
        if environ.get("CONTENT_TYPE"):
            headers.append(("Content-Type", str(environ["CONTENT_TYPE"])))
        if environ.get("CONTENT_LENGTH"):
            headers.append(("Content-Length", str(environ["CONTENT_LENGTH"])))
        hdrs = Headers(headers)

        if body is None:
            raw = _read_input(environ)
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = body

        if form is None:
            form = {}
            content_type = (hdrs.get("content-type") or "").split(";")[0].strip().lower()
            if content_type == "application/x-www-form-urlencoded" and raw:
                parsed = parse_qs(raw.decode("utf-8", errors="replace"), keep_blank_values=True)
                form = {k: v[0] if len(v) == 1 else v for k, v in parsed.items()}

        return cls(
            method=method,
            path=path,
            query=QueryParams(query_string or ""),
            form=dict(form),
            headers=hdrs,
            body=raw,
            cookies=parse_cookies(hdrs.get("cookie")),
        )

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def is_json(self) -> bool:
        """True if the body is declared as JSON."""
        return "json" in (self.content_type or "").lower()

    @property
    def url(self) -> str:
        """Path plus query string."""
        qs = str(self.query)
        if qs:
            return f"{self.path}?{qs}"
        return self.path

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Look up a header case-insensitively."""
        return self.headers.get(name, default)

    def param(self, key: str, default: str | None = None) -> str | None:
        """Return a route parameter captured by the router."""
        return self.path_params.get(key, default)

    def input(self, key: str | None = None, default: Any = None) -> Any:
        """Query parameters merged with posted fields (posted fields win)."""
        merged: dict[str, Any] = {**dict(self.query.items()), **self.form}
        if key is None:
            return merged
        return merged.get(key, default)

    def json(self, key: str | None = None, default: Any = None) -> Any:
        """Return the JSON-decoded body.

        Decoding happens on first access only; the result (an empty dict
        for an empty or invalid body) is cached for the lifetime of the
        request, so middleware and handlers can all call this freely.
        """
        if _JSON_KEY not in self._cache:
            self._cache[_JSON_KEY] = _parse_json(self.body) if self.body else {}
        data = self._cache[_JSON_KEY]
        if key is None:
            return data
        if isinstance(data, dict):
            return data.get(key, default)
        return default

    # -- Attribute bag --

    def set_attribute(self, key: str, value: Any) -> None:
        """Store a value for downstream middleware and the handler."""
        self.attributes[key] = value

    def get_attribute(self, key: str, default: Any = None) -> Any:
        """Return a value stored by upstream middleware."""
        return self.attributes.get(key, default)


def _read_input(environ: Mapping[str, Any]) -> bytes:
    stream = environ.get("wsgi.input")
    if stream is None:
        return b""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length > 0:
        return stream.read(length)
    return b""
