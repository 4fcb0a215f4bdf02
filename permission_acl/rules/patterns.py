"""
Generic value matching used by the rule matcher.
"""

import re
from functools import lru_cache
from typing import Any, Iterable, List, Pattern

from ..shared.errors import ConfigurationError
from .models import MatchMode, Selector, SelectorKind

# Delimiters accepted around PHP-style expressions such as "/^Project:/i".
_DELIMITERS = frozenset("/#~%@!")

# Bracket-style delimiters close with their partner, as in "{^Project:}i".
_BRACKETS = {"{": "}", "(": ")", "[": "]", "<": ">"}

_MODIFIERS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,
    "A": 0,
    "S": 0,
    "X": 0,
}

# Modifiers with no equivalent in Python's re module.
_UNSUPPORTED_MODIFIERS = frozenset("UDJ")


def _split_delimited(expression: str):
    """Return (body, modifiers) for a delimited expression, else None."""
    if len(expression) < 2:
        return None
    opening = expression[0]
    if opening in _BRACKETS:
        closing = _BRACKETS[opening]
    elif opening in _DELIMITERS:
        closing = opening
    else:
        return None
    end = expression.rfind(closing)
    if end <= 0:
        return None
    modifiers = expression[end + 1:]
    if not modifiers.isalpha() and modifiers:
        return None
    return expression[1:end], modifiers


@lru_cache(maxsize=512)
def compile_expression(expression: str) -> Pattern:
    """Compile a rule expression, raising ConfigurationError if invalid."""
    flags = 0
    body = expression
    delimited = _split_delimited(expression)
    if delimited is not None:
        body, modifiers = delimited
        for modifier in modifiers:
            if modifier in _UNSUPPORTED_MODIFIERS:
                raise ConfigurationError(
                    f"Invalid regular expression: {expression!r} (unsupported modifier {modifier!r})",
                    details={"expression": expression}
                )
            if modifier not in _MODIFIERS:
                raise ConfigurationError(
                    f"Invalid regular expression: {expression!r} (unknown modifier {modifier!r})",
                    details={"expression": expression}
                )
            flags |= _MODIFIERS[modifier]
        if "A" in modifiers:
            body = rf"\A(?:{body})"
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise ConfigurationError(
            f"Invalid regular expression: {expression!r} ({e})",
            details={"expression": expression}
        ) from e


def _as_strings(candidates: Any) -> List[str]:
    if isinstance(candidates, (str, int)):
        candidates = [candidates]
    return [str(c) for c in candidates]


class PatternMatcher:
    """Matches a selector against one or many candidate values."""

    def matches_any(self, pattern: Selector, candidates: Any,
                    mode: MatchMode = MatchMode.SIMPLE,
                    case_sensitive: bool = True) -> bool:
        """Return True if any pattern value matches any candidate."""
        values = _as_strings(candidates)

        if mode is MatchMode.PCRE:
            return self._regex_any(pattern.values, values)

        if pattern.kind is SelectorKind.WILDCARD:
            return True

        expected = pattern.values
        if not case_sensitive:
            expected = tuple(v.lower() for v in expected)
            values = [v.lower() for v in values]
        return not set(expected).isdisjoint(values)

    def _regex_any(self, expressions: Iterable[str], subjects: List[str]) -> bool:
        for expression in expressions:
            compiled = compile_expression(expression)
            for subject in subjects:
                if compiled.search(subject):
                    return True
        return False
