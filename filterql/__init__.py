"""
FilterQL: a fluent builder and structural validator for filter queries.

    from filterql import QueryBuilder, validate_query

    q = QueryBuilder().equals("Age", 30).and_().contains("Name", "jo").build()
    validate_query(q)  # ValidationResult(valid=True, errors=())
"""

from .builder import QueryBuilder, QueryBuilderOptions, query
from .errors import (
    FilterQLError,
    InvalidOperatorError,
    QueryBuilderError,
    QueryValidationError,
    UnsupportedValueError,
)
from .ir import (
    ArrayConditionToken,
    ConditionToken,
    LogicalOperator,
    LogicalToken,
    OPERATORS,
    ParenToken,
    QueryOperator,
    QueryToken,
    RawToken,
)
from .validator import ValidationResult, ensure_valid, validate_query

__version__ = "0.1.0"

__all__ = [
    "QueryBuilder",
    "QueryBuilderOptions",
    "query",
    # Errors
    "FilterQLError",
    "InvalidOperatorError",
    "QueryBuilderError",
    "QueryValidationError",
    "UnsupportedValueError",
    # Operators and tokens
    "ArrayConditionToken",
    "ConditionToken",
    "LogicalOperator",
    "LogicalToken",
    "OPERATORS",
    "ParenToken",
    "QueryOperator",
    "QueryToken",
    "RawToken",
    # Validation
    "ValidationResult",
    "ensure_valid",
    "validate_query",
]
