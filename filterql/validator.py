"""
FilterQL Query Validation

Checks that a query string has the shape

    condition ( ("&&" | "||") condition )*

with balanced parentheses around any group, where a condition is three
tokens `property operator value` and the operator is one of the known
operator literals.

This is a structural check only. It does not verify that a value suits its
operator (a count operator with a string, say) or that property names are
well formed. It never raises on bad input, so it is safe to run on
untrusted strings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .errors import QueryValidationError
from .ir.operators import LOGICAL_LITERALS, OPERATOR_LITERALS
from .lexer import tokenize

logger = logging.getLogger(__name__)

_PREFIX_PATTERN = re.compile(r"^Filters=\s*")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_query(). Truthy when the query is valid."""

    valid: bool
    errors: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def failed(cls, errors: Sequence[str]) -> "ValidationResult":
        return cls(valid=False, errors=tuple(errors))

    def to_dict(self) -> Dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "errors": list(self.errors)}


def _is_condition(tokens: List[str], idx: int) -> bool:
    """True if tokens[idx:idx + 3] reads as `property operator value`."""
    if idx + 2 >= len(tokens):
        return False
    prop = tokens[idx]
    return (
        prop not in LOGICAL_LITERALS
        and prop not in ("(", ")")
        and tokens[idx + 1] in OPERATOR_LITERALS
    )


def validate_query(text: str) -> ValidationResult:
    """
    Validate the structure of a filter query.

    An optional leading "Filters=" marker is ignored. An empty query is
    valid. The token walk stops at the first structural mismatch; the
    dangling-connective and unclosed-paren checks always run afterwards and
    may add further errors.

    Returns:
        ValidationResult with valid=False and positional (1-based) error
        messages if the query is malformed.
    """
    errors: List[str] = []
    trimmed = _PREFIX_PATTERN.sub("", text.strip(), count=1)
    if not trimmed:
        return ValidationResult.ok()

    tokens = tokenize(trimmed)
    depth = 0
    expect_condition = True
    i = 0

    while i < len(tokens):
        token = tokens[i]

        if expect_condition:
            if token == "(":
                depth += 1
                i += 1
                continue

            if _is_condition(tokens, i):
                # skip property/operator/value
                i += 3
                expect_condition = False
                continue

            errors.append(f'Expected condition at token {i + 1}, found "{token}"')
            break

        # Expecting a connective or a closing paren
        if token in LOGICAL_LITERALS:
            expect_condition = True
            i += 1
            continue

        if token == ")":
            if depth == 0:
                errors.append(f"Unmatched closing parenthesis at token {i + 1}")
                break
            depth -= 1
            i += 1
            continue

        errors.append(f'Expected "&&" or "||" at token {i + 1}, found "{token}"')
        break

    if expect_condition:
        errors.append("Query ends with a logical operator")

    if depth > 0:
        errors.append("Unmatched opening parenthesis")

    if errors:
        logger.debug("Query %r failed validation: %s", text, errors)
        return ValidationResult.failed(errors)
    return ValidationResult.ok()


def ensure_valid(text: str) -> str:
    """
    Validate a query, raising instead of returning a result.

    Returns:
        The query text, unchanged

    Raises:
        QueryValidationError: If the query is malformed
    """
    result = validate_query(text)
    if not result:
        raise QueryValidationError(result.errors, text)
    return text
