"""Built-in validation rules.

Each rule is a callable with the signature::

    def rule(field: str, value: Any) -> str | None:
        '''Return an error message naming *field*, or None if valid.'''

Parameterized rules are factory functions that return a rule::

    def max_size(n: int, *, numeric: bool = False) -> Rule: ...

Rules may also be written as pipe-separated strings, which
``compile_rules()`` turns into the same callables::

    "required|string|min:3|max:50"
    "required|numeric|min:18"
    "in:admin,user,service"
"""

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from smallwork.errors import ConfigurationError

type Rule = Callable[[str, Any], str | None]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(field: str, value: Any) -> str | None:
    """Field must be present, not None, and not the empty string."""
    if value is None or value == "":
        return f"{field} is required"
    return None


# ---------------------------------------------------------------------------
# Type
# ---------------------------------------------------------------------------

# Integer, decimal, or exponent form with optional sign and leading space
_NUMERIC_RE = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def is_numeric(value: Any) -> bool:
    """True for ints, floats, and strings that read as a number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC_RE.fullmatch(value) is not None


def string(field: str, value: Any) -> str | None:
    if not isinstance(value, str):
        return f"{field} must be a string"
    return None


def numeric(field: str, value: Any) -> str | None:
    if not is_numeric(value):
        return f"{field} must be numeric"
    return None


def array(field: str, value: Any) -> str | None:
    """Lists, tuples, and mappings (decoded JSON arrays and objects)."""
    if not isinstance(value, (list, tuple, Mapping)):
        return f"{field} must be an array"
    return None


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern; checks structure, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(field: str, value: Any) -> str | None:
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return f"{field} must be a valid email"
    return None


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


def min_size(n: int, *, numeric: bool = False) -> Rule:
    """At least *n*: the number itself when *numeric*, else string length.

    None and non-string values outside a numeric context pass.
    """

    def check(field: str, value: Any) -> str | None:
        if value is None:
            return None
        if numeric and is_numeric(value):
            return None if float(value) >= n else f"{field} must be at least {n}"
        if isinstance(value, str) and len(value) < n:
            return f"{field} must be at least {n} characters"
        return None

    return check


def max_size(n: int, *, numeric: bool = False) -> Rule:
    """At most *n*: the number itself when *numeric*, else string length."""

    def check(field: str, value: Any) -> str | None:
        if value is None:
            return None
        if numeric and is_numeric(value):
            return None if float(value) <= n else f"{field} must be at most {n}"
        if isinstance(value, str) and len(value) > n:
            return f"{field} must be at most {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: str) -> Rule:
    """Value must be one of *choices*, compared as text (``5`` matches ``"5"``)."""
    allowed = frozenset(choices)
    listed = ", ".join(choices)

    def check(field: str, value: Any) -> str | None:
        if value is None or isinstance(value, (list, tuple, Mapping)) or str(value) not in allowed:
            return f"{field} must be one of: {listed}"
        return None

    return check


# ---------------------------------------------------------------------------
# Rule strings
# ---------------------------------------------------------------------------

_NAMED: dict[str, Rule] = {
    "required": required,
    "string": string,
    "numeric": numeric,
    "email": email,
    "array": array,
}


def compile_rules(spec: str | Sequence[str | Rule]) -> list[Rule]:
    """Turn ``"required|min:3"`` (or a list mixing names and callables) into rules.

    ``min`` and ``max`` compare numbers instead of lengths when the same
    field also carries ``numeric``. Unknown names raise
    ``ConfigurationError``.
    """
    entries = spec.split("|") if isinstance(spec, str) else list(spec)
    numeric_context = any(entry is numeric or entry == "numeric" for entry in entries)

    rules: list[Rule] = []
    for entry in entries:
        if callable(entry):
            rules.append(entry)
            continue
        name, _, argument = entry.strip().partition(":")
        if not name:
            continue
        if name in _NAMED:
            rules.append(_NAMED[name])
        elif name == "min":
            rules.append(min_size(_size(entry, argument), numeric=numeric_context))
        elif name == "max":
            rules.append(max_size(_size(entry, argument), numeric=numeric_context))
        elif name == "in":
            rules.append(one_of(*argument.split(",")))
        else:
            msg = f"Unknown validation rule {name!r} in {entry!r}."
            raise ConfigurationError(msg)
    return rules


def _size(entry: str, argument: str) -> int:
    try:
        return int(argument)
    except ValueError:
        msg = f"Validation rule {entry!r} needs an integer, e.g. 'min:3'."
        raise ConfigurationError(msg) from None
