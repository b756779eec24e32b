"""
FilterQL exceptions.

Builder misuse (an unknown connective, an operator that does not fit the
method, a value the wire format cannot carry) raises. Missing filter values
do not: they are silent no-ops.
"""

from __future__ import annotations

from typing import Optional, Sequence


class FilterQLError(Exception):
    """Base class for all FilterQL errors."""

    pass


class QueryBuilderError(FilterQLError):
    """Raised when a builder call cannot be honoured."""

    pass


class InvalidOperatorError(QueryBuilderError, ValueError):
    """Raised when an operator or connective is not allowed in this position."""

    def __init__(self, operator: object, allowed: Sequence[str]):
        self.operator = operator
        self.allowed = list(allowed)
        super().__init__(
            f"Operator {operator!r} is not allowed here. Expected one of: {', '.join(self.allowed)}"
        )


class UnsupportedValueError(QueryBuilderError, TypeError):
    """Raised when a value cannot be rendered into the filter grammar."""

    def __init__(self, value: object, expected: str = "string, number or boolean"):
        self.value = value
        super().__init__(
            f"Unsupported value {value!r} of type {type(value).__name__}; expected {expected}"
        )


class QueryValidationError(FilterQLError, ValueError):
    """
    Raised by ensure_valid() when a query string is structurally malformed.

    validate_query() itself never raises; this exists for callers that
    prefer an exception over inspecting a ValidationResult.
    """

    def __init__(self, errors: Sequence[str], query: Optional[str] = None):
        self.errors = list(errors)
        self.query = query
        msg = "Query failed validation:\n- " + "\n- ".join(self.errors)
        super().__init__(msg)
