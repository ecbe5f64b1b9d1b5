"""HTTP response with chainable .with_*() transformation API.

Responses are built through named factories (``Response.json(...)``,
``Response.html(...)``, ...) so every one declares its content shape and
status up front. Each ``.with_*()`` call returns a new Response sharing
the body; the receiver is never modified, so two middleware branches
holding the same response cannot corrupt each other.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from smallwork.http.cookies import SetCookie

# A stream writer receives a ``write(chunk)`` function and calls it per chunk
type StreamWriter = Callable[[Callable[[str], None]], None]


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: bytes
    status: int
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()
    writer: StreamWriter | None = None

    # -- Factories --

    @classmethod
    def json(cls, data: Any, status: int = 200) -> Response:
        """A JSON response. Raises ``TypeError`` for unserializable data."""
        body = json_module.dumps(data).encode("utf-8")
        return cls(body=body, status=status, headers=(("Content-Type", "application/json"),))

    @classmethod
    def html(cls, html: str, status: int = 200) -> Response:
        """An HTML response."""
        return cls(
            body=html.encode("utf-8"),
            status=status,
            headers=(("Content-Type", "text/html; charset=UTF-8"),),
        )

    @classmethod
    def text(cls, text: str, status: int = 200) -> Response:
        """A plain-text response."""
        return cls(
            body=text.encode("utf-8"),
            status=status,
            headers=(("Content-Type", "text/plain; charset=UTF-8"),),
        )

    @classmethod
    def empty(cls, status: int = 204) -> Response:
        """A response with no body and no headers."""
        return cls(body=b"", status=status)

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> Response:
        """A redirect to *url*."""
        return cls(body=b"", status=status, headers=(("Location", url),))

    @classmethod
    def stream(cls, writer: StreamWriter) -> Response:
        """A streamed (event-stream) response.

        *writer* is called by the transport with a ``write(chunk)``
        function; nothing is materialized here.
        """
        return cls(
            body=b"",
            status=200,
            headers=(
                ("Content-Type", "text/event-stream"),
                ("Cache-Control", "no-cache"),
                ("Connection", "keep-alive"),
            ),
            writer=writer,
        )

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with *name* set to *value*.

        An existing header with the same name (any case) is replaced.
        """
        lower = name.lower()
        kept = tuple(pair for pair in self.headers if pair[0].lower() != lower)
        return replace(self, headers=(*kept, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with every header in *headers* set."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def with_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str | None = "Lax",
    ) -> Response:
        """Return a new Response with an additional Set-Cookie."""
        cookie = SetCookie(
            name=name,
            value=value,
            max_age=max_age,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
        )
        return replace(self, cookies=(*self.cookies, cookie))

    def without_cookie(self, name: str, path: str = "/") -> Response:
        """Return a new Response that deletes a cookie (Max-Age=0)."""
        cookie = SetCookie(name=name, value="", max_age=0, path=path)
        return replace(self, cookies=(*self.cookies, cookie))

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Look up a header case-insensitively."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.header("content-type")

    @property
    def is_stream(self) -> bool:
        """True for responses created with ``Response.stream``."""
        return self.writer is not None

    @property
    def text_body(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")
