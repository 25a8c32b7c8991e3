"""
Filters module for table_query.

This module provides the operator semantics of the query language and the
filter nodes a compiled expression is made of. Every node exposes
``apply(record)`` and returns a bool.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..utils.errors import InvalidConditionError
from ..utils.text_processing import (
    contains_strict,
    is_nullish,
    loose_equals,
    parse_float,
    to_number,
)


class Operator(str, Enum):
    """Operators understood by the condition parser."""
    EQ = '='
    NE = '!='
    GT = '>'
    LT = '<'
    IN = 'IN'

    def __str__(self) -> str:
        return self.value


@dataclass
class Condition:
    """A single ``field operator value`` test."""
    field: str
    operator: Union[Operator, str]
    value: Any


def _equals(obj_value: Any, value: Any) -> bool:
    if value is None:
        return is_nullish(obj_value)
    if is_nullish(obj_value):
        return False
    if isinstance(obj_value, (list, tuple)):
        return contains_strict(obj_value, value)
    return loose_equals(obj_value, value)


def _not_equals(obj_value: Any, value: Any) -> bool:
    if value is None:
        return not is_nullish(obj_value)
    if is_nullish(obj_value):
        return True
    if isinstance(obj_value, (list, tuple)):
        return not contains_strict(obj_value, value)
    return not loose_equals(obj_value, value)


def _greater_than(obj_value: Any, value: Any) -> bool:
    # Lists have no ordering
    if is_nullish(obj_value) or isinstance(obj_value, (list, tuple)):
        return False
    return to_number(obj_value) > parse_float(value)


def _less_than(obj_value: Any, value: Any) -> bool:
    if is_nullish(obj_value) or isinstance(obj_value, (list, tuple)):
        return False
    return to_number(obj_value) < parse_float(value)


def _in_list(obj_value: Any, value: Any) -> bool:
    values = value if isinstance(value, (list, tuple)) else [value]

    if any(item is None for item in values):
        return is_nullish(obj_value) or contains_strict(values, obj_value)
    if is_nullish(obj_value):
        return False
    if isinstance(obj_value, (list, tuple)):
        return any(contains_strict(values, item) for item in obj_value)
    return contains_strict(values, obj_value)


OPERATORS = {
    Operator.EQ: _equals,
    Operator.NE: _not_equals,
    Operator.GT: _greater_than,
    Operator.LT: _less_than,
    Operator.IN: _in_list,
}


def apply_condition(record: Dict[str, Any], condition: Condition) -> bool:
    """
    Test a record against a single condition.

    A missing field reads as None. An unknown operator never matches.

    Args:
        record: The record to test
        condition: Parsed condition

    Returns:
        True if the record satisfies the condition
    """
    obj_value = record.get(condition.field)

    try:
        comparator = OPERATORS[Operator(condition.operator)]
    except ValueError:
        return False

    return comparator(obj_value, condition.value)


class Filter(ABC):
    """Abstract base class for all expression nodes."""

    @abstractmethod
    def apply(self, item: Dict[str, Any]) -> bool:
        """
        Apply the filter to an item.

        Args:
            item: The item to filter

        Returns:
            True if the item passes the filter, False otherwise
        """
        pass

    def evaluate(self, item: Dict[str, Any], groups: Sequence[bool]) -> bool:
        """
        Apply the filter with parenthesized groups already evaluated.

        Args:
            item: The item to filter
            groups: Group values computed by the enclosing GroupScope

        Returns:
            True if the item passes the filter, False otherwise
        """
        return self.apply(item)


class LiteralFilter(Filter):
    """A bare ``true`` or ``false`` conjunct."""

    def __init__(self, value: bool):
        self.value = value

    def apply(self, item: Dict[str, Any]) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"LiteralFilter({self.value})"


class ConditionFilter(Filter):
    """Filter wrapping one parsed condition."""

    def __init__(self, condition: Condition):
        self.condition = condition

    def apply(self, item: Dict[str, Any]) -> bool:
        return apply_condition(item, self.condition)

    def __repr__(self) -> str:
        return f"ConditionFilter({self.condition!r})"


class InvalidFilter(Filter):
    """
    Placeholder for a conjunct that could not be parsed.

    The error is raised when the node is reached during evaluation, so a
    conjunct skipped by short-circuiting never fails the query.
    """

    def __init__(self, text: str):
        self.text = text

    def apply(self, item: Dict[str, Any]) -> bool:
        raise InvalidConditionError(self.text)

    def __repr__(self) -> str:
        return f"InvalidFilter({self.text!r})"


class FilterGroup(Filter):
    """A group of filters with a boolean operator."""

    def __init__(self, filters: List[Filter], operator: str = "AND"):
        """
        Initialize a FilterGroup.

        Args:
            filters: List of filters or filter groups
            operator: Boolean operator to apply ("AND" or "OR")
        """
        self.filters = filters
        self.operator = operator.upper()

        if self.operator not in ("AND", "OR"):
            raise ValueError(f"Invalid operator: {operator}")

    def apply(self, item: Dict[str, Any]) -> bool:
        """
        Apply the filter group to an item.

        Args:
            item: The item to filter

        Returns:
            True if the item passes the filter group, False otherwise
        """
        if not self.filters:
            return True

        if self.operator == "AND":
            return all(f.apply(item) for f in self.filters)
        else:  # OR
            return any(f.apply(item) for f in self.filters)

    def evaluate(self, item: Dict[str, Any], groups: Sequence[bool]) -> bool:
        if not self.filters:
            return True

        if self.operator == "AND":
            return all(f.evaluate(item, groups) for f in self.filters)
        else:  # OR
            return any(f.evaluate(item, groups) for f in self.filters)

    def __repr__(self) -> str:
        return f"FilterGroup({self.filters!r}, operator='{self.operator}')"


class GroupReference(Filter):
    """
    A parenthesized group inside an expression.

    Within a GroupScope the value is looked up by ``index`` instead of being
    computed again. ``height`` is 1 for a group with no groups inside it.
    """

    def __init__(self, body: Filter, height: int):
        self.body = body
        self.height = height
        self.index: Optional[int] = None

    def apply(self, item: Dict[str, Any]) -> bool:
        return self.body.apply(item)

    def evaluate(self, item: Dict[str, Any], groups: Sequence[bool]) -> bool:
        return groups[self.index]

    def __repr__(self) -> str:
        return f"GroupReference({self.body!r})"


class GroupScope(Filter):
    """
    An expression together with every parenthesized group it contains.

    All groups are evaluated before the expression itself, innermost first
    and left to right, so an invalid condition inside any group fails the
    evaluation even where the surrounding AND/OR would short-circuit.
    Bare conjuncts outside groups keep short-circuit evaluation.
    """

    def __init__(self, body: Filter, groups: List[GroupReference]):
        """
        Initialize a GroupScope.

        Args:
            body: Root node of the expression
            groups: Groups at any depth, in the order they were parsed
        """
        self.body = body
        # Stable sort keeps textual order among groups of equal height
        self.groups = sorted(groups, key=lambda group: group.height)
        for index, group in enumerate(self.groups):
            group.index = index

    def apply(self, item: Dict[str, Any]) -> bool:
        values: List[bool] = []
        for group in self.groups:
            values.append(group.body.evaluate(item, values))
        return self.body.evaluate(item, values)

    def __repr__(self) -> str:
        return f"GroupScope({self.body!r}, groups={len(self.groups)})"
