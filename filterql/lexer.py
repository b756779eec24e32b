"""
FilterQL Lexer

Splits query text into the flat token stream the validator walks. Matching
priority at each position:

    1. a double-quoted string, with backslash escapes
    2. "(" or ")"
    3. "&&" or "||"
    4. a maximal run of characters that are neither whitespace nor parens

An unterminated quote is not an error here; it falls through to rule 4 and
the validator reports the resulting shape.
"""

from __future__ import annotations

from typing import List, Optional

_PARENS = "()"
_CONNECTIVES = ("&&", "||")
# An escape cannot swallow a line break.
_LINE_TERMINATORS = "\n\r\u2028\u2029"


def _scan_quoted(text: str, start: int) -> Optional[int]:
    """Return the index just past the closing quote, or None if unterminated."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            return i + 1
        if ch == "\\":
            if i + 1 < n and text[i + 1] not in _LINE_TERMINATORS:
                i += 2
                continue
            return None
        i += 1
    return None


def _scan_bareword(text: str, start: int) -> int:
    i = start
    n = len(text)
    while i < n and not text[i].isspace() and text[i] not in _PARENS:
        i += 1
    return i


def tokenize(text: str) -> List[str]:
    """
    Split query text into tokens.

    >>> tokenize('(Name == "John Smith" || Age > 30)')
    ['(', 'Name', '==', '"John Smith"', '||', 'Age', '>', '30', ')']
    """
    tokens: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch.isspace():
            i += 1
            continue

        if ch == '"':
            end = _scan_quoted(text, i)
            if end is not None:
                tokens.append(text[i:end])
                i = end
                continue
        elif ch in _PARENS:
            tokens.append(ch)
            i += 1
            continue
        elif text.startswith(_CONNECTIVES, i):
            tokens.append(text[i : i + 2])
            i += 2
            continue

        end = _scan_bareword(text, i)
        tokens.append(text[i:end])
        i = end

    return tokens
