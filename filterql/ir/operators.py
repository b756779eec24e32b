"""
FilterQL Operator Catalog

Every operator maps to exactly one literal token and no two operators share
a literal. The validator relies on that to find the operator position of a
condition, so keep the table closed.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


FILTER_PREFIX = "Filters= "


# ---------- Enums (closed-world) ----------


class QueryOperator(str, Enum):
    """Condition operators and their literal tokens."""

    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    STARTS_WITH = "_="
    DOES_NOT_START_WITH = "!_="
    ENDS_WITH = "_-="
    DOES_NOT_END_WITH = "!_-="
    CONTAINS = "@="
    DOES_NOT_CONTAIN = "!@="
    SOUNDS_LIKE = "~~"
    DOES_NOT_SOUND_LIKE = "!~"
    HAS = "^$"
    DOES_NOT_HAVE = "!^$"
    IN = "^^"
    NOT_IN = "!^^"

    # Case insensitive
    EQUALS_CASE_INSENSITIVE = "==*"
    NOT_EQUALS_CASE_INSENSITIVE = "!=*"
    STARTS_WITH_CASE_INSENSITIVE = "_=*"
    DOES_NOT_START_WITH_CASE_INSENSITIVE = "!_=*"
    ENDS_WITH_CASE_INSENSITIVE = "_-=*"
    DOES_NOT_END_WITH_CASE_INSENSITIVE = "!_-=*"
    CONTAINS_CASE_INSENSITIVE = "@=*"
    DOES_NOT_CONTAIN_CASE_INSENSITIVE = "!@=*"
    HAS_CASE_INSENSITIVE = "^$*"
    DOES_NOT_HAVE_CASE_INSENSITIVE = "!^$*"
    IN_CASE_INSENSITIVE = "^^*"
    NOT_IN_CASE_INSENSITIVE = "!^^*"

    # Count
    COUNT_GREATER_THAN = "#>"
    COUNT_LESS_THAN = "#<"
    COUNT_GREATER_THAN_OR_EQUAL = "#>="
    COUNT_LESS_THAN_OR_EQUAL = "#<="
    COUNT_EQUALS = "#=="
    COUNT_NOT_EQUALS = "#!="

    def __str__(self) -> str:
        return self.value

    @property
    def is_case_insensitive(self) -> bool:
        return self in CASE_INSENSITIVE_OPERATORS

    @property
    def is_count(self) -> bool:
        return self in COUNT_OPERATORS

    @property
    def is_array(self) -> bool:
        return self in ARRAY_OPERATORS

    @property
    def is_pattern(self) -> bool:
        """Pattern operators always quote their value."""
        return self in PATTERN_OPERATORS

    @classmethod
    def from_literal(cls, literal: str) -> "QueryOperator":
        """Look up an operator by its literal token (e.g. "@=*")."""
        try:
            return cls(literal)
        except ValueError:
            raise ValueError(f"Unknown operator literal: {literal!r}") from None


class LogicalOperator(str, Enum):
    """Connectives joining two terms."""

    AND = "&&"
    OR = "||"

    def __str__(self) -> str:
        return self.value


# ---------- Lookup tables ----------


# literal -> member name, e.g. {"==": "EQUALS"}
OPERATORS: Dict[str, str] = {op.value: op.name for op in QueryOperator}

OPERATOR_LITERALS: FrozenSet[str] = frozenset(OPERATORS)

LOGICAL_LITERALS: FrozenSet[str] = frozenset(op.value for op in LogicalOperator)

ARRAY_OPERATORS: FrozenSet[QueryOperator] = frozenset(
    {
        QueryOperator.IN,
        QueryOperator.NOT_IN,
        QueryOperator.IN_CASE_INSENSITIVE,
        QueryOperator.NOT_IN_CASE_INSENSITIVE,
    }
)

CASE_INSENSITIVE_OPERATORS: FrozenSet[QueryOperator] = frozenset(
    op for op in QueryOperator if op.value.endswith("*")
)

COUNT_OPERATORS: FrozenSet[QueryOperator] = frozenset(
    op for op in QueryOperator if op.value.startswith("#")
)

PATTERN_OPERATORS: FrozenSet[QueryOperator] = frozenset(
    {
        QueryOperator.STARTS_WITH,
        QueryOperator.DOES_NOT_START_WITH,
        QueryOperator.ENDS_WITH,
        QueryOperator.DOES_NOT_END_WITH,
        QueryOperator.CONTAINS,
        QueryOperator.DOES_NOT_CONTAIN,
        QueryOperator.SOUNDS_LIKE,
        QueryOperator.DOES_NOT_SOUND_LIKE,
        QueryOperator.STARTS_WITH_CASE_INSENSITIVE,
        QueryOperator.DOES_NOT_START_WITH_CASE_INSENSITIVE,
        QueryOperator.ENDS_WITH_CASE_INSENSITIVE,
        QueryOperator.DOES_NOT_END_WITH_CASE_INSENSITIVE,
        QueryOperator.CONTAINS_CASE_INSENSITIVE,
        QueryOperator.DOES_NOT_CONTAIN_CASE_INSENSITIVE,
    }
)
