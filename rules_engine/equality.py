"""Equality modes and value coercion used by conditions.

Rules are authored as JSON-like data, so comparisons follow JSON value
kinds (null, boolean, number, string, object) rather than Python types:

- coerced equality (default): loose, type-converting comparison, e.g. the
  string "17" equals the number 17 and true equals 1
- exact equality (case_sensitive=True): same kind and same value
"""

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from numbers import Real
from typing import Any

from .paths import NOT_FOUND

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def value_kind(value: Any) -> str:
    """Return the JSON kind of a value."""
    if value is NOT_FOUND:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Real):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def is_number(value: Any) -> bool:
    return value_kind(value) == "number"


def is_specified(value: Any) -> bool:
    """Truthiness of an operator argument.

    None, False, 0, NaN and "" count as "not specified"; empty lists and
    mappings are still specified.
    """
    kind = value_kind(value)
    if kind in ("undefined", "null"):
        return False
    if kind == "boolean":
        return value
    if kind == "number":
        return value != 0 and not math.isnan(value)
    if kind == "string":
        return value != ""
    return True


def _number_string(value: float) -> str:
    """Shortest round-trip form, positional for 1e-6 <= |value| < 1e21."""
    magnitude = abs(value)
    if value == 0 or 1e-6 <= magnitude < 1e21:
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return "0" if text in ("-0", "") else text
    mantissa, _, exponent = repr(value).partition("e")
    power = int(exponent)
    return f"{mantissa}e{'-' if power < 0 else '+'}{abs(power)}"


def to_string(value: Any) -> str:
    kind = value_kind(value)
    if kind == "undefined":
        return "undefined"
    if kind == "null":
        return "null"
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            return _number_string(value)
        return str(value)
    if kind == "string":
        return value
    return str(to_primitive(value))


def to_primitive(value: Any) -> Any:
    """Reduce a list or mapping to the string it compares as."""
    if isinstance(value, (list, tuple)):
        return ",".join(
            "" if item is None or item is NOT_FOUND else to_string(item)
            for item in value
        )
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    return str(value)


def to_number(value: Any) -> float:
    """Numeric conversion of any value; NaN when there is none."""
    kind = value_kind(value)
    if kind == "number":
        return value
    if kind == "boolean":
        return 1 if value else 0
    if kind == "null":
        return 0
    if kind == "undefined":
        return math.nan
    if kind == "object":
        return to_number(to_primitive(value))

    text = value.strip()
    if text == "":
        return 0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    if _DECIMAL_RE.match(text):
        return float(text)
    radix = _RADIX_PREFIXES.get(text[:2].lower())
    digits = text[2:]
    if radix is not None and digits.isalnum() and digits.isascii():
        try:
            return int(digits, radix)
        except ValueError:
            return math.nan
    return math.nan


def exact_equals(left: Any, right: Any) -> bool:
    """Same kind and same value; objects compare by identity."""
    kind = value_kind(left)
    if kind != value_kind(right):
        return False
    if kind == "object":
        return left is right
    return left == right


def coerced_equals(left: Any, right: Any) -> bool:
    """Loose equality with type conversion between kinds."""
    left_kind = value_kind(left)
    right_kind = value_kind(right)

    if left_kind == right_kind:
        return exact_equals(left, right)

    nullish = ("null", "undefined")
    if left_kind in nullish or right_kind in nullish:
        return left_kind in nullish and right_kind in nullish

    if left_kind == "boolean":
        return coerced_equals(to_number(left), right)
    if right_kind == "boolean":
        return coerced_equals(left, to_number(right))

    if left_kind == "number" and right_kind == "string":
        return left == to_number(right)
    if left_kind == "string" and right_kind == "number":
        return to_number(left) == right

    if left_kind == "object":
        return coerced_equals(to_primitive(left), right)
    if right_kind == "object":
        return coerced_equals(left, to_primitive(right))

    return False


def values_equal(left: Any, right: Any, case_sensitive: bool = False) -> bool:
    if case_sensitive:
        return exact_equals(left, right)
    return coerced_equals(left, right)
