"""Per-field operators.

Every operator takes its argument from the rule and the value resolved from
the dataset, and returns 1 (match) or 0 (no match). A missing or null
dataset value never matches. Type mismatches are non-matches, not errors.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional

from .equality import exact_equals, is_number, is_specified, to_number, to_string, values_equal
from .paths import NOT_FOUND
from .types import OperatorSpec


def _absent(value: Any) -> bool:
    return value is NOT_FOUND or value is None


def check_between(bounds: Any, value: Any) -> int:
    """Exclusive range: low < value < high."""
    if _absent(value) or not is_number(value):
        return 0
    if not isinstance(bounds, (list, tuple)):
        return 0
    low = bounds[0] if len(bounds) > 0 else NOT_FOUND
    high = bounds[1] if len(bounds) > 1 else NOT_FOUND
    return int(to_number(low) < value < to_number(high))


def check_contains(needle: Any, value: Any) -> int:
    """Substring of a string value, or element of a list value."""
    if _absent(value):
        return 0
    if isinstance(value, str):
        return int(to_string(needle) in value)
    if isinstance(value, (list, tuple)):
        return int(any(exact_equals(item, needle) for item in value))
    return 0


def check_includes(options: Any, value: Any) -> int:
    """String value is one of `options`. Backs both `in` and `includes`."""
    if _absent(value) or not isinstance(value, str):
        return 0
    if isinstance(options, str):
        return int(value in options)
    if isinstance(options, (list, tuple)):
        return int(any(exact_equals(item, value) for item in options))
    return 0


def check_greater_than(limit: Any, value: Any) -> int:
    if _absent(value) or not is_number(value):
        return 0
    return int(value > to_number(limit))


def check_less_than(limit: Any, value: Any) -> int:
    if _absent(value) or not is_number(value):
        return 0
    return int(value < to_number(limit))


def check_matches(pattern: Any, value: Any) -> int:
    """Pattern found anywhere in a string value."""
    if _absent(value) or not isinstance(value, str):
        return 0
    if isinstance(pattern, re.Pattern):
        return int(pattern.search(value) is not None)
    if isinstance(pattern, str):
        return int(re.search(pattern, value) is not None)
    return 0


def check_not(argument: Any, value: Any, case_sensitive: bool = False) -> int:
    """Negation.

    {"in": [...]} / {"includes": [...]} negates membership; a string
    argument matches when the string value differs from it.
    """
    if _absent(value):
        return 0
    if isinstance(argument, Mapping):
        if is_specified(argument.get("in")):
            return 1 - check_includes(argument["in"], value)
        if is_specified(argument.get("includes")):
            return 1 - check_includes(argument["includes"], value)
    if isinstance(argument, str) and isinstance(value, str):
        return int(not values_equal(argument, value, case_sensitive))
    return 0


def evaluate_operators(spec: OperatorSpec, value: Any, case_sensitive: bool = False) -> Optional[int]:
    """AND of every operator present on `spec`.

    Returns None when no operator is present, so the field is left out of
    its group instead of counting as a match or a miss.
    """
    checks = [
        (spec.between, check_between),
        (spec.contains, check_contains),
        (spec.greater_than, check_greater_than),
        (spec.less_than, check_less_than),
        (spec.in_, check_includes),
        (spec.includes, check_includes),
        (spec.matches, check_matches),
    ]

    result: Optional[int] = None
    for argument, operator in checks:
        if is_specified(argument):
            result = (1 if result is None else result) & operator(argument, value)

    if is_specified(spec.not_):
        result = (1 if result is None else result) & check_not(spec.not_, value, case_sensitive)

    return result
