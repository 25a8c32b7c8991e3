"""
Text and value coercion utilities for the query engine.

Record values come from loosely typed sources (JSON, CSV, UI tables), so
comparisons follow loose-typing rules: numeric strings compare equal to
numbers, booleans compare as 1/0, and "nullish" covers None and the empty
string alike.
"""

import math
import re
from typing import Any, List

NAN = float('nan')

# Longest numeric prefix, as accepted by a lenient float parser
FLOAT_PREFIX_PATTERN = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity)')
NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')
WHITESPACE_PATTERN = re.compile(r'\s+')


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    return WHITESPACE_PATTERN.sub(' ', text).strip()


def tokenize(text: str) -> List[str]:
    """
    Split search text into lower-cased terms.

    Args:
        text: Raw search text

    Returns:
        List of non-empty terms
    """
    return text.strip().lower().split()


def is_nullish(value: Any) -> bool:
    """None and the empty string both count as "no value"."""
    return value is None or value == ''


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    # From 1e21 up, integral floats keep exponent form (1e+21)
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def to_search_text(value: Any) -> str:
    """
    Convert a field value to the text used for substring search.

    Args:
        value: A scalar or a flat list of scalars

    Returns:
        Text form of the value; lists are comma-joined
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if _is_number(value):
        return _format_number(value)
    if isinstance(value, (list, tuple)):
        return ','.join(to_search_text(item) for item in value)
    return str(value)


def to_number(value: Any) -> float:
    """
    Convert a record value to a number for ordering comparisons.

    Non-numeric strings become NaN, so every comparison against them is False.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if value is None:
        return 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if NUMBER_PATTERN.match(text):
            return float(text)
        if text in ('Infinity', '+Infinity', '-Infinity'):
            return float(text.replace('Infinity', 'inf'))
    return NAN


def parse_float(value: Any) -> float:
    """
    Parse the longest numeric prefix of a condition value.

    ``"30abc"`` gives 30.0; values with no numeric prefix (including booleans
    and None) give NaN.
    """
    if _is_number(value):
        return float(value)
    if value is None or isinstance(value, bool):
        return NAN
    match = FLOAT_PREFIX_PATTERN.match(to_search_text(value))
    if not match:
        return NAN
    return float(match.group(1).replace('Infinity', 'inf'))


def loose_equals(left: Any, right: Any) -> bool:
    """
    Equality with loose typing.

    Booleans are compared as 1/0 and a number equals a string when the
    string converts to the same number.
    """
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool):
        return loose_equals(1 if left else 0, right)
    if isinstance(right, bool):
        return loose_equals(left, 1 if right else 0)
    if _is_number(left) and isinstance(right, str):
        return float(left) == to_number(right)
    if isinstance(left, str) and _is_number(right):
        return to_number(left) == float(right)
    return left == right


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality without type coercion, used for list membership.

    ``True`` is not ``1`` and ``"30"`` is not ``30``; NaN equals NaN.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        if isinstance(left, float) and isinstance(right, float) and math.isnan(left) and math.isnan(right):
            return True
        return left == right
    if type(left) is not type(right) and not (isinstance(left, str) and isinstance(right, str)):
        return False
    return left == right


def contains_strict(values: Any, item: Any) -> bool:
    """Return True when any element of values strictly equals item."""
    return any(strict_equals(value, item) for value in values)


def parse_literal(text: str) -> Any:
    """
    Coerce the right-hand side of a comparison.

    Tried in order: a double-quoted string, ``NULL``, ``true``/``false``
    (any case), a finite number, and finally the trimmed text itself.
    """
    value = text.strip()

    if value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    if value == 'NULL':
        return None
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    if NUMBER_PATTERN.match(value):
        if '.' in value or 'e' in value or 'E' in value:
            number = float(value)
            return number if math.isfinite(number) else value
        return int(value)
    return value
