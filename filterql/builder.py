"""
FilterQL Fluent Query Builder

Provides a fluent API for assembling filter query strings such as

    Age >= 18 && (Status ^^ ["active","pending"] || Name @=* "smith")

Every call appends a text fragment and records the matching token, so the
query can be read back either as a string (build()) or as structure
(get_tokens()). Filters whose value is None are skipped, which lets callers
pass optional inputs straight through without branching.
"""

from __future__ import annotations

import logging
import numbers
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union
from urllib.parse import quote

from .errors import InvalidOperatorError, UnsupportedValueError
from .ir.operators import (
    ARRAY_OPERATORS,
    FILTER_PREFIX,
    LOGICAL_LITERALS,
    LogicalOperator,
    QueryOperator,
)
from .ir.tokens import (
    ArrayConditionToken,
    ConditionToken,
    LogicalToken,
    ParenToken,
    QueryToken,
    RawToken,
    Scalar,
    render_value,
)
from .validator import ValidationResult, validate_query

logger = logging.getLogger(__name__)

Connective = Union[str, LogicalOperator]

_PREFIX_MARKER = FILTER_PREFIX.rstrip()
_PREFIX_PATTERN = re.compile(r"^Filters=\s*")
_TRAILING_CONNECTIVES = re.compile(r"(?:\s*(?:&&|\|\|))+$")

# Same unreserved set as JavaScript's encodeURIComponent.
_URI_SAFE = "-_.!~*'()"


@dataclass
class QueryBuilderOptions:
    """Construction flags for a QueryBuilder."""

    encode_uri: bool = False
    add_filter_statement: bool = False


@dataclass
class _BuilderState:
    """Internal state for the builder."""

    text: str = ""
    tokens: List[QueryToken] = field(default_factory=list)
    encode_uri: bool = False
    has_filter_prefix: bool = False

    def copy(self) -> "_BuilderState":
        return _BuilderState(
            text=self.text,
            tokens=list(self.tokens),
            encode_uri=self.encode_uri,
            has_filter_prefix=self.has_filter_prefix,
        )


def _strip_prefix(text: str) -> str:
    if text.startswith(_PREFIX_MARKER):
        return _PREFIX_PATTERN.sub("", text, count=1)
    return text


def _resolve_connective(operator: Optional[Connective]) -> Optional[LogicalOperator]:
    if operator is None:
        return None
    if isinstance(operator, LogicalOperator):
        return operator
    if isinstance(operator, str) and operator in LOGICAL_LITERALS:
        return LogicalOperator(operator)
    raise InvalidOperatorError(operator, sorted(LOGICAL_LITERALS))


def _resolve_operator(operator: Union[str, QueryOperator]) -> QueryOperator:
    try:
        return QueryOperator(operator)
    except ValueError:
        raise InvalidOperatorError(operator, [op.value for op in QueryOperator]) from None


class QueryBuilder:
    """
    Fluent builder for filter queries.

    Usage:
        q = (
            QueryBuilder()
            .equals("User.Id", 5)
            .and_()
            .open_paren()
            .contains("User.Name", "smith")
            .or_()
            .in_("Status", ["active", "pending"])
            .close_paren()
            .build()
        )

    Each mutator changes this builder in place and returns it. Use clone()
    to branch off an independent copy.
    """

    def __init__(self, encode_uri: bool = False, add_filter_statement: bool = False) -> None:
        self._state = _BuilderState(encode_uri=encode_uri)
        if add_filter_statement:
            self._state.has_filter_prefix = True
            self._emit(FILTER_PREFIX, RawToken(_PREFIX_MARKER))

    @classmethod
    def from_options(cls, options: QueryBuilderOptions) -> "QueryBuilder":
        """Create a builder from a QueryBuilderOptions instance."""
        return cls(
            encode_uri=options.encode_uri,
            add_filter_statement=options.add_filter_statement,
        )

    def _emit(self, text: str, *tokens: QueryToken) -> "QueryBuilder":
        # The only place state changes: text and tokens move together.
        self._state.text = text
        self._state.tokens.extend(tokens)
        return self

    # ========== Inspection ==========

    @property
    def text(self) -> str:
        """The raw, unfinalised buffer."""
        return self._state.text

    @property
    def encode_uri(self) -> bool:
        return self._state.encode_uri

    @property
    def has_filter_prefix(self) -> bool:
        return self._state.has_filter_prefix

    @property
    def tokens(self) -> tuple:
        return self.get_tokens()

    def get_tokens(self) -> tuple:
        """Tokens recorded so far, in call order."""
        return tuple(self._state.tokens)

    # ========== Core primitive ==========

    def op(
        self,
        property: str,
        operator: Union[str, QueryOperator],
        value: Optional[Scalar],
        force_quote: bool = False,
    ) -> "QueryBuilder":
        """
        Add a `property operator value` condition.

        Args:
            property: The property to filter on (e.g. "User.Name")
            operator: A QueryOperator or its literal ("==", "@=*", ...)
            value: The value to compare against. None skips the condition.
            force_quote: Quote the value even when it is not a string

        Raises:
            InvalidOperatorError: If operator is not a known operator
            UnsupportedValueError: If value is not a string, number or boolean
        """
        operator = _resolve_operator(operator)
        if value is None:
            logger.debug("Skipping %s %s: no value supplied", property, operator.value)
            return self

        rendered = render_value(value, force_quote)
        token = ConditionToken(
            property=property,
            operator=operator,
            value=value,
            force_quote=force_quote,
        )
        return self._emit(
            f"{self._state.text}{property} {operator.value} {rendered} ", token
        )

    def add_condition(self, condition: str) -> "QueryBuilder":
        """Append pre-rendered condition text verbatim, followed by a space."""
        return self._emit(f"{self._state.text}{condition} ", RawToken(condition))

    # ========== Core operators ==========

    def equals(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.EQUALS, value)

    def not_equals(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.NOT_EQUALS, value)

    def greater_than(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.GREATER_THAN, value)

    def less_than(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.LESS_THAN, value)

    def greater_than_or_equal(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.GREATER_THAN_OR_EQUAL, value)

    def less_than_or_equal(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.LESS_THAN_OR_EQUAL, value)

    def has(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.HAS, value)

    def does_not_have(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_HAVE, value)

    # Pattern operators are textual, so their value is always quoted.

    def starts_with(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.STARTS_WITH, value, True)

    def does_not_start_with(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_START_WITH, value, True)

    def ends_with(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.ENDS_WITH, value, True)

    def does_not_end_with(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_END_WITH, value, True)

    def contains(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.CONTAINS, value, True)

    def does_not_contain(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_CONTAIN, value, True)

    def sounds_like(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.SOUNDS_LIKE, value, True)

    def does_not_sound_like(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_SOUND_LIKE, value, True)

    # ========== Case-insensitive operators ==========

    def equals_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.EQUALS_CASE_INSENSITIVE, value)

    def not_equals_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.NOT_EQUALS_CASE_INSENSITIVE, value)

    def has_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.HAS_CASE_INSENSITIVE, value)

    def does_not_have_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.DOES_NOT_HAVE_CASE_INSENSITIVE, value)

    def starts_with_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.STARTS_WITH_CASE_INSENSITIVE, value, True)

    def does_not_start_with_case_insensitive(
        self, property: str, value: Optional[Scalar]
    ) -> "QueryBuilder":
        return self.op(
            property, QueryOperator.DOES_NOT_START_WITH_CASE_INSENSITIVE, value, True
        )

    def ends_with_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.ENDS_WITH_CASE_INSENSITIVE, value, True)

    def does_not_end_with_case_insensitive(
        self, property: str, value: Optional[Scalar]
    ) -> "QueryBuilder":
        return self.op(
            property, QueryOperator.DOES_NOT_END_WITH_CASE_INSENSITIVE, value, True
        )

    def contains_case_insensitive(self, property: str, value: Optional[Scalar]) -> "QueryBuilder":
        return self.op(property, QueryOperator.CONTAINS_CASE_INSENSITIVE, value, True)

    def does_not_contain_case_insensitive(
        self, property: str, value: Optional[Scalar]
    ) -> "QueryBuilder":
        return self.op(
            property, QueryOperator.DOES_NOT_CONTAIN_CASE_INSENSITIVE, value, True
        )

    # ========== Count operators ==========

    def _count(
        self, property: str, operator: QueryOperator, value: Optional[Union[int, float]]
    ) -> "QueryBuilder":
        """Count conditions compare a cardinality, so only numbers are accepted."""
        if value is not None and (
            isinstance(value, bool) or not isinstance(value, numbers.Real)
        ):
            raise UnsupportedValueError(value, "number")
        return self.op(property, operator, value)

    def count_greater_than(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_GREATER_THAN, value)

    def count_less_than(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_LESS_THAN, value)

    def count_greater_than_or_equal(
        self, property: str, value: Optional[Union[int, float]]
    ) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_GREATER_THAN_OR_EQUAL, value)

    def count_less_than_or_equal(
        self, property: str, value: Optional[Union[int, float]]
    ) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_LESS_THAN_OR_EQUAL, value)

    def count_equals(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_EQUALS, value)

    def count_not_equals(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self._count(property, QueryOperator.COUNT_NOT_EQUALS, value)

    # Older "*_case_count" spellings of the count operators.

    def equals_case_count(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self.count_equals(property, value)

    def not_equals_case_count(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self.count_not_equals(property, value)

    def greater_than_case_count(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self.count_greater_than(property, value)

    def less_than_case_count(self, property: str, value: Optional[Union[int, float]]) -> "QueryBuilder":
        return self.count_less_than(property, value)

    def greater_than_or_equal_case_count(
        self, property: str, value: Optional[Union[int, float]]
    ) -> "QueryBuilder":
        return self.count_greater_than_or_equal(property, value)

    def less_than_or_equal_case_count(
        self, property: str, value: Optional[Union[int, float]]
    ) -> "QueryBuilder":
        return self.count_less_than_or_equal(property, value)

    # ========== In-list operators ==========

    def in_list(
        self,
        property: str,
        operator: Union[str, QueryOperator],
        values: Optional[Iterable[Optional[Scalar]]],
    ) -> "QueryBuilder":
        """
        Add a `property operator [v1,v2,...]` condition.

        None entries are dropped. If nothing is left (or values is None) the
        condition is skipped entirely rather than emitting an empty list.

        Raises:
            InvalidOperatorError: If operator is not an in-list operator
        """
        operator = _resolve_operator(operator)
        if operator not in ARRAY_OPERATORS:
            raise InvalidOperatorError(
                operator.value, sorted(op.value for op in ARRAY_OPERATORS)
            )
        if values is None:
            logger.debug("Skipping %s %s: no values supplied", property, operator.value)
            return self
        if isinstance(values, (str, bytes)):
            raise UnsupportedValueError(values, "a sequence of values")

        present = [v for v in values if v is not None]
        if not present:
            logger.debug("Skipping %s %s: all values empty", property, operator.value)
            return self

        rendered = ",".join(render_value(v) for v in present)
        token = ArrayConditionToken(
            property=property,
            operator=operator,
            values=tuple(present),
        )
        return self._emit(
            f"{self._state.text}{property} {operator.value} [{rendered}] ", token
        )

    def in_(self, property: str, values: Optional[Iterable[Optional[Scalar]]]) -> "QueryBuilder":
        return self.in_list(property, QueryOperator.IN, values)

    def not_in(self, property: str, values: Optional[Iterable[Optional[Scalar]]]) -> "QueryBuilder":
        return self.in_list(property, QueryOperator.NOT_IN, values)

    def in_case_insensitive(
        self, property: str, values: Optional[Iterable[Optional[Scalar]]]
    ) -> "QueryBuilder":
        return self.in_list(property, QueryOperator.IN_CASE_INSENSITIVE, values)

    def not_in_case_insensitive(
        self, property: str, values: Optional[Iterable[Optional[Scalar]]]
    ) -> "QueryBuilder":
        return self.in_list(property, QueryOperator.NOT_IN_CASE_INSENSITIVE, values)

    # ========== Structure ==========

    def _connect(self, connective: LogicalOperator) -> "QueryBuilder":
        return self._emit(
            f"{self._state.text.rstrip()} {connective.value} ", LogicalToken(connective)
        )

    def and_(self) -> "QueryBuilder":
        """Join with `&&`."""
        return self._connect(LogicalOperator.AND)

    def or_(self) -> "QueryBuilder":
        """Join with `||`."""
        return self._connect(LogicalOperator.OR)

    def open_paren(self) -> "QueryBuilder":
        return self._emit(f"{self._state.text}(", ParenToken("("))

    def close_paren(self) -> "QueryBuilder":
        return self._emit(f"{self._state.text})", ParenToken(")"))

    # ========== Composition ==========

    def append(
        self,
        fragment: Union[str, "QueryBuilder"],
        operator: Optional[Connective] = None,
    ) -> "QueryBuilder":
        """
        Append raw query text or another builder's current text.

        A leading "Filters=" marker on the fragment is dropped. The
        connective is only inserted when there is something to join to: not
        on an empty query, not right after "(" and not after an existing
        connective.
        """
        connective = _resolve_connective(operator)
        if isinstance(fragment, QueryBuilder):
            incoming = fragment._state.text
        elif isinstance(fragment, str):
            incoming = fragment
        else:
            raise UnsupportedValueError(fragment, "string or QueryBuilder")

        incoming = _strip_prefix(incoming)
        if not incoming.strip():
            return self

        current = self._state.text.strip()
        ends_with_connective = current.endswith(LogicalOperator.AND.value) or current.endswith(
            LogicalOperator.OR.value
        )

        text = self._state.text
        tokens: List[QueryToken] = []
        if connective and current and not current.endswith("(") and not ends_with_connective:
            text = f"{current} {connective.value} "
            tokens.append(LogicalToken(connective))
        elif current and not current.endswith("("):
            text = f"{current} "

        tokens.append(RawToken(incoming))
        return self._emit(text + incoming, *tokens)

    def concat(self, other: "QueryBuilder", operator: Optional[Connective] = None) -> "QueryBuilder":
        """
        Append another builder's query as a parenthesised group.

        Unlike append(), the connective is inserted whenever this query is
        non-empty.
        """
        if not isinstance(other, QueryBuilder):
            raise UnsupportedValueError(other, "QueryBuilder")
        connective = _resolve_connective(operator)

        current = self._state.text.strip()
        text = self._state.text
        tokens: List[QueryToken] = []
        if connective and current:
            text = f"{current} {connective.value} "
            tokens.append(LogicalToken(connective))

        group = f"({_strip_prefix(other._state.text.strip())})"
        tokens.append(RawToken(group))
        return self._emit(f"{text}{group} ", *tokens)

    def clone(self) -> "QueryBuilder":
        """
        Create an independent copy of this builder.

        The copy keeps the URI-encoding flag and the buffer verbatim
        (including any "Filters= " marker) but never adds a second prefix.
        """
        cloned = type(self)(encode_uri=self._state.encode_uri, add_filter_statement=False)
        cloned._state = self._state.copy()
        cloned._state.has_filter_prefix = False
        return cloned

    # ========== Build ==========

    def _finalize(self) -> str:
        final = self._state.text.strip()
        if final.endswith(LogicalOperator.AND.value) or final.endswith(LogicalOperator.OR.value):
            final = _TRAILING_CONNECTIVES.sub("", final).strip()
        return final

    def build(self) -> str:
        """
        Build the query string.

        Surrounding whitespace and any dangling trailing connectives are
        removed. If the builder was created with encode_uri=True the result is
        percent-encoded for use as a URI component.
        """
        final = self._finalize()
        if self._state.encode_uri:
            return quote(final, safe=_URI_SAFE)
        return final

    def validate(self) -> ValidationResult:
        """Validate the finalised (unencoded) query text."""
        return validate_query(self._finalize())


# Convenience function for starting a query
def query(encode_uri: bool = False, add_filter_statement: bool = False) -> QueryBuilder:
    """Start building a new filter query."""
    return QueryBuilder(encode_uri=encode_uri, add_filter_statement=add_filter_statement)
