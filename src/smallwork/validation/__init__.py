"""Input validation: rule strings or composable rules, clean results.

Usage::

    from smallwork.validation import validate_request

    def create_user(request: Request) -> Response:
        result = validate_request(request, {
            "name": "required|string|min:2",
            "email": "required|email",
            "role": "in:admin,user",
        })
        if result.fails():
            return Response.json({"errors": result.errors}, status=422)
        # result.data has the validated values
"""

from collections.abc import Mapping, Sequence
from typing import Any

from smallwork.http.request import Request
from smallwork.validation.result import ValidationResult
from smallwork.validation.rules import (
    Rule,
    array,
    compile_rules,
    email,
    max_size,
    min_size,
    numeric,
    one_of,
    required,
    string,
)

__all__ = [
    "Rule",
    "ValidationResult",
    "array",
    "compile_rules",
    "email",
    "max_size",
    "min_size",
    "numeric",
    "one_of",
    "required",
    "string",
    "validate",
    "validate_request",
]

type RuleSpec = str | Sequence[str | Rule]


def validate(data: Mapping[str, Any], rules: Mapping[str, RuleSpec]) -> ValidationResult:
    """Validate *data* against *rules*.

    Args:
        data: Any mapping of field names to values: decoded JSON, the
            result of ``request.input()``, or a plain ``dict``.
        rules: Field names mapped to a pipe-separated rule string or a
            list of rule names and rule callables.

    A field absent from *data* is skipped unless it is ``required``. A
    ``required`` failure ends that field's checks, so a missing field
    reports one message rather than one per rule.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}

    for field_name, spec in rules.items():
        checks = compile_rules(spec)
        if field_name not in data and required not in checks:
            continue
        value = data.get(field_name)

        field_errors: list[str] = []
        for check in checks:
            error = check(field_name, value)
            if error is not None:
                field_errors.append(error)
                if check is required:
                    break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)


def validate_request(request: Request, rules: Mapping[str, RuleSpec]) -> ValidationResult:
    """Validate the JSON body of a JSON request, else its merged input."""
    data = request.json() if request.is_json else request.input()
    if not isinstance(data, Mapping):
        data = {}
    return validate(data, rules)
