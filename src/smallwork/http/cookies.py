"""Cookies: the ``Cookie`` request header and ``Set-Cookie`` directives.

Requests parse their cookies once at creation; responses carry a tuple
of SetCookie values that a transport serializes with ``to_header_value``.
"""

from dataclasses import dataclass


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` header into a name -> value dict.

    Pairs without ``=`` are ignored; later duplicates win.
    """
    cookies: dict[str, str] = {}
    for chunk in (header or "").split(";"):
        name, sep, value = chunk.partition("=")
        if sep and name.strip():
            cookies[name.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    ``max_age=None`` produces a session cookie; ``0`` deletes it.
    """

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "Lax"

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value."""
        attributes = [
            ("Max-Age", None if self.max_age is None else str(self.max_age)),
            ("Path", self.path or None),
            ("Domain", self.domain),
            ("SameSite", self.samesite),
        ]
        parts = [f"{self.name}={self.value}"]
        parts.extend(f"{key}={value}" for key, value in attributes if value is not None)
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        return "; ".join(parts)
