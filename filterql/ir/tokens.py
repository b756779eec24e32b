"""
FilterQL Token Model

Tokens are the structured view of a query. The builder records one token per
fragment it writes, so a consumer can inspect a query without re-parsing the
text. Rendering every token and joining them reproduces the builder's text
(modulo whitespace).
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Tuple, Union

from ..errors import UnsupportedValueError
from .operators import ARRAY_OPERATORS, LogicalOperator, QueryOperator

Scalar = Union[str, int, float, bool]


# ---------- Value rendering ----------


def quote_string(text: str) -> str:
    """Wrap text in double quotes, escaping backslashes and quotes."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unquote_string(literal: str) -> str:
    """
    Reverse quote_string().

    Raises:
        ValueError: If literal is not a double-quoted string.
    """
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise ValueError(f"Not a quoted string literal: {literal!r}")

    chars = []
    body = literal[1:-1]
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            chars.append(body[i + 1])
            i += 2
            continue
        chars.append(ch)
        i += 1
    return "".join(chars)


def canonical_text(value: Scalar) -> str:
    """
    Canonical textual form of a scalar.

    Booleans are lower-case, integral floats drop their fractional part and
    non-finite floats use NaN / Infinity, so numbers read the same way
    whichever client produced them.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, numbers.Real):
        return str(value)
    raise UnsupportedValueError(value)


def render_value(value: Scalar, force_quote: bool = False) -> str:
    """Render a scalar as it appears on the wire."""
    if force_quote or isinstance(value, str):
        return quote_string(canonical_text(value))
    return canonical_text(value)


# ---------- Tokens ----------


@dataclass(frozen=True)
class ConditionToken:
    """`property operator value`"""

    type: ClassVar[str] = "condition"

    property: str
    operator: QueryOperator
    value: Scalar
    force_quote: bool = field(default=False, compare=False, repr=False)

    def render(self) -> str:
        quote = self.force_quote or self.operator.is_pattern
        return f"{self.property} {self.operator.value} {render_value(self.value, quote)}"


@dataclass(frozen=True)
class ArrayConditionToken:
    """`property inOperator [v1,v2,...]`"""

    type: ClassVar[str] = "conditionArray"

    property: str
    operator: QueryOperator
    values: Tuple[Scalar, ...]

    def __post_init__(self):
        if self.operator not in ARRAY_OPERATORS:
            raise ValueError(
                f"Array conditions require an in-list operator, got {self.operator!r}"
            )
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def render(self) -> str:
        rendered = ",".join(render_value(v) for v in self.values)
        return f"{self.property} {self.operator.value} [{rendered}]"


@dataclass(frozen=True)
class LogicalToken:
    type: ClassVar[str] = "logical"

    operator: LogicalOperator

    def render(self) -> str:
        return self.operator.value


@dataclass(frozen=True)
class ParenToken:
    type: ClassVar[str] = "paren"

    value: str

    def __post_init__(self):
        if self.value not in ("(", ")"):
            raise ValueError(f"Paren token must be '(' or ')', got {self.value!r}")

    def render(self) -> str:
        return self.value


@dataclass(frozen=True)
class RawToken:
    """An opaque fragment inserted via append/concat."""

    type: ClassVar[str] = "raw"

    value: str

    def render(self) -> str:
        return self.value


QueryToken = Union[ConditionToken, ArrayConditionToken, LogicalToken, ParenToken, RawToken]

TOKEN_TYPES = {
    cls.type: cls
    for cls in (ConditionToken, ArrayConditionToken, LogicalToken, ParenToken, RawToken)
}


def render_tokens(tokens: Iterable[QueryToken]) -> str:
    """Render tokens back to query text, one space between fragments."""
    return " ".join(token.render() for token in tokens)
