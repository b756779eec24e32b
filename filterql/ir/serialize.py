"""
FilterQL Token Serialization

Tokens travel to consumers (UI state, logs, other services) as plain dicts:

    {"type": "condition", "property": "Age", "operator": "==", "value": 30}
    {"type": "conditionArray", "property": "Status", "operator": "^^", "values": ["a", "b"]}
    {"type": "logical", "operator": "&&"}
    {"type": "paren", "value": "("}
    {"type": "raw", "value": "Name == \\"John\\""}
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List

from .operators import LogicalOperator, QueryOperator
from .tokens import (
    ArrayConditionToken,
    ConditionToken,
    LogicalToken,
    ParenToken,
    QueryToken,
    RawToken,
)


def token_to_dict(token: QueryToken) -> Dict[str, Any]:
    """Convert a single token to its dict shape."""
    if isinstance(token, ConditionToken):
        return {
            "type": token.type,
            "property": token.property,
            "operator": token.operator.value,
            "value": token.value,
        }
    if isinstance(token, ArrayConditionToken):
        return {
            "type": token.type,
            "property": token.property,
            "operator": token.operator.value,
            "values": list(token.values),
        }
    if isinstance(token, LogicalToken):
        return {"type": token.type, "operator": token.operator.value}
    if isinstance(token, (ParenToken, RawToken)):
        return {"type": token.type, "value": token.value}
    raise TypeError(f"Not a query token: {token!r}")


def tokens_to_dicts(tokens: Iterable[QueryToken]) -> List[Dict[str, Any]]:
    return [token_to_dict(t) for t in tokens]


def token_from_dict(data: Dict[str, Any]) -> QueryToken:
    """
    Reconstruct a token from its dict shape.

    Raises:
        ValueError: If the dict is missing required fields or holds bad values
    """
    try:
        kind = data["type"]
        if kind == ConditionToken.type:
            return ConditionToken(
                property=data["property"],
                operator=QueryOperator.from_literal(data["operator"]),
                value=data["value"],
            )
        if kind == ArrayConditionToken.type:
            return ArrayConditionToken(
                property=data["property"],
                operator=QueryOperator.from_literal(data["operator"]),
                values=tuple(data["values"]),
            )
        if kind == LogicalToken.type:
            return LogicalToken(operator=LogicalOperator(data["operator"]))
        if kind == ParenToken.type:
            return ParenToken(value=data["value"])
        if kind == RawToken.type:
            return RawToken(value=data["value"])
    except KeyError as e:
        raise ValueError(f"Missing required field: {e}")
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid data format: {e}")

    raise ValueError(f"Invalid data format: unknown token type {kind!r}")


def tokens_from_dicts(items: Iterable[Dict[str, Any]]) -> List[QueryToken]:
    return [token_from_dict(item) for item in items]


def tokens_to_json(tokens: Iterable[QueryToken], indent: int = 2) -> str:
    """
    Serialize tokens to a JSON array.

    Args:
        tokens: Tokens, typically from QueryBuilder.get_tokens()
        indent: Indentation level for pretty-printing (None for compact)

    Returns:
        JSON string representation
    """
    return json.dumps(tokens_to_dicts(tokens), indent=indent)


def tokens_from_json(json_str: str) -> List[QueryToken]:
    """
    Deserialize tokens from a JSON array.

    Raises:
        ValueError: If the JSON is invalid or any token is malformed
    """
    data = json.loads(json_str)
    if not isinstance(data, list):
        raise ValueError("Invalid data format: expected a JSON array of tokens")
    return tokens_from_dicts(data)
