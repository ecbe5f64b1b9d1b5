"""Validation result: immutable container for validated data or errors."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating input against a set of rules.

    The result is falsy when invalid, so you can write::

        result = validate(request.json(), rules)
        if not result:
            return Response.json({"errors": result.errors}, status=422)

    ``data`` holds the values of every field that passed. ``errors`` maps
    each failing field to its messages, in rule order::

        {"name": ["name is required"],
         "age": ["age must be numeric"]}
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def passes(self) -> bool:
        return self.is_valid

    def fails(self) -> bool:
        return not self.is_valid

    def __bool__(self) -> bool:
        return self.is_valid
