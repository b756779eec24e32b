"""FilterQL operator catalog and token model."""

from .operators import (
    ARRAY_OPERATORS,
    CASE_INSENSITIVE_OPERATORS,
    COUNT_OPERATORS,
    FILTER_PREFIX,
    LOGICAL_LITERALS,
    OPERATOR_LITERALS,
    OPERATORS,
    PATTERN_OPERATORS,
    LogicalOperator,
    QueryOperator,
)
from .tokens import (
    ArrayConditionToken,
    ConditionToken,
    LogicalToken,
    ParenToken,
    QueryToken,
    RawToken,
    Scalar,
    canonical_text,
    quote_string,
    render_tokens,
    render_value,
    unquote_string,
)
from .serialize import (
    token_from_dict,
    token_to_dict,
    tokens_from_dicts,
    tokens_from_json,
    tokens_to_dicts,
    tokens_to_json,
)

__all__ = [
    "ARRAY_OPERATORS",
    "CASE_INSENSITIVE_OPERATORS",
    "COUNT_OPERATORS",
    "FILTER_PREFIX",
    "LOGICAL_LITERALS",
    "OPERATOR_LITERALS",
    "OPERATORS",
    "PATTERN_OPERATORS",
    "LogicalOperator",
    "QueryOperator",
    # Tokens
    "ArrayConditionToken",
    "ConditionToken",
    "LogicalToken",
    "ParenToken",
    "QueryToken",
    "RawToken",
    "Scalar",
    "canonical_text",
    "quote_string",
    "render_tokens",
    "render_value",
    "unquote_string",
    # Serialization
    "token_from_dict",
    "token_to_dict",
    "tokens_from_dicts",
    "tokens_from_json",
    "tokens_to_dicts",
    "tokens_to_json",
]
