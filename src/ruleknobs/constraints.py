"""Built-in constraint predicates.

A constraint is a pure function ``predicate(value, *options) -> bool``.
Every constraint except ``required`` treats an absent value (``None``) as
satisfied, so a missing value is only ever reported once, by ``required``.
"""

from __future__ import annotations

import operator
import re
from re import Pattern as RegexPattern
from types import MappingProxyType
from typing import Any, Callable, Mapping

Constraint = Callable[..., bool]

EMAIL_REGEX = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r'@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])'
    r'|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))'
)
NUMERIC_REGEX = re.compile(r"[0-9]*")
ALPHANUMERIC_REGEX = re.compile(r"[a-zA-Z0-9]*")
NUMERICSPACE_REGEX = re.compile(r"[0-9\s]*")
ALPHANUMERICSPACE_REGEX = re.compile(r"[a-zA-Z0-9\s]*")


def is_absent(value: Any) -> bool:
    """True when value is the missing sentinel."""
    return value is None


def _compare(value: Any, bound: Any, op: Callable[[Any, Any], bool]) -> bool:
    # Values that cannot be ordered against the bound fail the check
    try:
        return bool(op(value, bound))
    except TypeError:
        return False


def _size(value: Any) -> int | None:
    try:
        return len(value)
    except TypeError:
        return None


def _fullmatch(regex: RegexPattern[str], value: Any) -> bool:
    return regex.fullmatch(str(value)) is not None


def _strict_equals(value: Any, candidate: Any) -> bool:
    # bool is an int subclass; True must not match 1
    if isinstance(value, bool) or isinstance(candidate, bool):
        return type(value) is type(candidate) and value == candidate
    return bool(value == candidate)


def required(value: Any) -> bool:
    """Value is present and not the empty string."""
    return not is_absent(value) and value != ""


def min_value(value: Any, minimum: Any) -> bool:
    """Value is at least ``minimum``: ``min(42)``."""
    return is_absent(value) or _compare(value, minimum, operator.ge)


def max_value(value: Any, maximum: Any) -> bool:
    """Value is at most ``maximum``: ``max(42)``."""
    return is_absent(value) or _compare(value, maximum, operator.le)


def positive(value: Any) -> bool:
    return is_absent(value) or _compare(value, 0, operator.ge)


def negative(value: Any) -> bool:
    return is_absent(value) or _compare(value, 0, operator.le)


def min_length(value: Any, minimum: int) -> bool:
    """Size of value (characters or elements) is at least ``minimum``."""
    if is_absent(value):
        return True
    size = _size(value)
    return size is not None and _compare(size, minimum, operator.ge)


def max_length(value: Any, maximum: int) -> bool:
    """Size of value (characters or elements) is at most ``maximum``."""
    if is_absent(value):
        return True
    size = _size(value)
    return size is not None and _compare(size, maximum, operator.le)


def length(value: Any, fixed_length: int) -> bool:
    """Size of value (characters or elements) is exactly ``fixed_length``."""
    if is_absent(value):
        return True
    return _size(value) == fixed_length


def match(value: Any, regex: str | RegexPattern[str]) -> bool:
    """Regex is found somewhere in the value: ``match(r"[a-z]+")``.

    Accepts a pattern string or a compiled pattern. Matching never relies on
    state retained between calls.
    """
    return is_absent(value) or re.search(regex, str(value)) is not None


def email(value: Any) -> bool:
    return is_absent(value) or _fullmatch(EMAIL_REGEX, value)


def numeric(value: Any) -> bool:
    return is_absent(value) or _fullmatch(NUMERIC_REGEX, value)


def alphanum(value: Any) -> bool:
    return is_absent(value) or _fullmatch(ALPHANUMERIC_REGEX, value)


def numeric_space(value: Any) -> bool:
    return is_absent(value) or _fullmatch(NUMERICSPACE_REGEX, value)


def alphanum_space(value: Any) -> bool:
    return is_absent(value) or _fullmatch(ALPHANUMERICSPACE_REGEX, value)


def one_of(value: Any, *candidates: Any) -> bool:
    """Value strictly equals one of the candidates: ``oneOf("a", "b")``."""
    if is_absent(value):
        return True
    return any(_strict_equals(value, candidate) for candidate in candidates)


BUILTIN_CONSTRAINTS: Mapping[str, Constraint] = MappingProxyType({
    "required": required,
    "min": min_value,
    "max": max_value,
    "positive": positive,
    "negative": negative,
    "minLength": min_length,
    "maxLength": max_length,
    "length": length,
    "match": match,
    "email": email,
    "numeric": numeric,
    "alphanum": alphanum,
    "numericSpace": numeric_space,
    "alphanumSpace": alphanum_space,
    "oneOf": one_of,
})


__all__ = [
    "Constraint",
    "BUILTIN_CONSTRAINTS",
    "is_absent",
    "required",
    "min_value",
    "max_value",
    "positive",
    "negative",
    "min_length",
    "max_length",
    "length",
    "match",
    "email",
    "numeric",
    "alphanum",
    "numeric_space",
    "alphanum_space",
    "one_of",
]
