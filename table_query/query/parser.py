"""
Parser module for table_query.

This module compiles query text into a tree of filters. The grammar is:

    expr      := term (' OR ' term)*
    term      := factor (' AND ' factor)*
    factor    := 'true' | 'false' | condition | '(' expr ')'
    condition := field ' IN [' value (',' value)* ']'
               | field op value            op in = != > <

``OR`` binds loosest, so ``a OR b AND c`` is ``a OR (b AND c)``. Keywords
are case-sensitive. Separators are only recognised outside double quotes
and outside parentheses.

Parenthesized groups are evaluated before the expression around them, so
an invalid condition inside a group is always reported. Bare conjuncts are
only checked when evaluation reaches them.
"""

import re
import logging
from functools import lru_cache
from typing import List, Optional, Tuple

from ..utils.errors import InvalidConditionError
from ..utils.text_processing import normalize_whitespace, parse_literal
from .filters import (
    Condition,
    ConditionFilter,
    Filter,
    FilterGroup,
    GroupReference,
    GroupScope,
    InvalidFilter,
    LiteralFilter,
    Operator,
)

logger = logging.getLogger(__name__)

IN_PATTERN = re.compile(r'^(\w+)\s+IN\s+\[([^\]]+)\]$')
COMPARISON_PATTERN = re.compile(r'^(\w+)\s*(!=|=|>|<)\s*(.+)$')

OR_SEPARATOR = ' OR '
AND_SEPARATOR = ' AND '


def parse_condition(text: str) -> Condition:
    """
    Parse a leaf condition.

    Args:
        text: Condition text such as ``age > 30`` or ``tag IN ["a", NULL]``

    Returns:
        The parsed Condition

    Raises:
        InvalidConditionError: If the text matches neither condition form
    """
    condition = text.strip()

    in_match = IN_PATTERN.match(condition)
    if in_match:
        field, values = in_match.groups()
        parsed_values = []
        for raw in values.split(','):
            item = raw.strip().replace('"', '')
            parsed_values.append(None if item == 'NULL' else item)
        return Condition(field, Operator.IN, parsed_values)

    match = COMPARISON_PATTERN.match(condition)
    if match:
        field, operator, value = match.groups()
        return Condition(field, Operator(operator), parse_literal(value))

    raise InvalidConditionError(text)


def _scan_top_level(text: str) -> List[Tuple[int, int, str]]:
    """
    Walk the text once and report (index, depth, char) for every character
    that lies outside double quotes.
    """
    positions = []
    depth = 0
    in_quotes = False
    for index, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
            continue
        if in_quotes:
            continue
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        positions.append((index, depth, char))
    return positions


def split_top_level(text: str, separator: str) -> List[str]:
    """
    Split text on a separator that appears outside quotes and parentheses.

    Args:
        text: Normalized expression text
        separator: ``' OR '`` or ``' AND '``

    Returns:
        The parts, in order; a single-element list when nothing splits
    """
    top_level = {index for index, depth, char in _scan_top_level(text) if depth == 0}
    parts = []
    start = 0
    index = text.find(separator)
    while index != -1:
        # All separator characters must be at depth 0 and unquoted
        if all(i in top_level for i in range(index, index + len(separator))):
            parts.append(text[start:index])
            start = index + len(separator)
            index = text.find(separator, start)
        else:
            index = text.find(separator, index + 1)
    parts.append(text[start:])
    return parts


def _unwrap_group(text: str) -> Optional[str]:
    """Return the inner text when the whole text is one ``( ... )`` group."""
    if not (text.startswith('(') and text.endswith(')')):
        return None
    positions = _scan_top_level(text)
    if positions[-1] != (len(text) - 1, 0, ')'):
        return None
    # The opening parenthesis must stay open until the very last character
    if any(depth <= 0 for _, depth, _ in positions[:-1]):
        return None
    inner = text[1:-1].strip()
    return inner or None


def _has_parentheses(text: str) -> bool:
    return any(char in '()' for _, _, char in _scan_top_level(text))


class QueryParser:
    """Parser for structured queries."""

    def parse(self, expression: str) -> Filter:
        """
        Compile an expression into a filter tree.

        Invalid conjuncts become InvalidFilter nodes, which raise only if
        evaluation reaches them.

        Args:
            expression: Query text

        Returns:
            Root filter of the compiled tree
        """
        normalized = normalize_whitespace(expression)
        if not normalized:
            return LiteralFilter(True)
        return self.parse_group(normalized)

    def parse_group(self, group: str) -> Filter:
        """
        Compile a group into an OR of ANDs.

        Args:
            group: Expression text with whitespace already normalized

        Returns:
            A FilterGroup, or the single node when there is nothing to combine.
            Expressions containing parenthesized groups are wrapped in a
            GroupScope.
        """
        groups: List[GroupReference] = []
        body = self._parse_alternatives(group, groups)
        return GroupScope(body, groups) if groups else body

    def parse_factor(self, text: str) -> Filter:
        """
        Compile one conjunct: a literal, a condition or a parenthesized group.

        Args:
            text: Conjunct text

        Returns:
            The compiled node
        """
        groups: List[GroupReference] = []
        node = self._parse_factor(text, groups)
        return GroupScope(node, groups) if groups else node

    def _parse_alternatives(self, group: str, groups: List[GroupReference]) -> Filter:
        alternatives = []
        for alternative in split_top_level(group, OR_SEPARATOR):
            conjuncts = [self._parse_factor(part, groups) for part in split_top_level(alternative, AND_SEPARATOR)]
            alternatives.append(conjuncts[0] if len(conjuncts) == 1 else FilterGroup(conjuncts, "AND"))

        if len(alternatives) == 1:
            return alternatives[0]
        return FilterGroup(alternatives, "OR")

    def _parse_factor(self, text: str, groups: List[GroupReference]) -> Filter:
        stripped = text.strip()

        inner = _unwrap_group(stripped)
        if inner is not None:
            first_nested = len(groups)
            body = self._parse_alternatives(inner, groups)
            height = 1 + max((nested.height for nested in groups[first_nested:]), default=0)
            reference = GroupReference(body, height)
            groups.append(reference)
            return reference

        lowered = stripped.lower()
        if lowered == 'true':
            return LiteralFilter(True)
        if lowered == 'false':
            return LiteralFilter(False)

        # Stray or unbalanced parentheses
        if _has_parentheses(stripped):
            logger.debug(f"Unbalanced group in conjunct: {text}")
            return InvalidFilter(text)

        try:
            return ConditionFilter(parse_condition(text))
        except InvalidConditionError:
            return InvalidFilter(text)


_default_parser = QueryParser()


@lru_cache(maxsize=128)
def compile_expression(expression: str) -> Filter:
    """
    Compile an expression with the shared parser, caching the result.

    Args:
        expression: Query text

    Returns:
        Root filter of the compiled tree
    """
    return _default_parser.parse(expression)
