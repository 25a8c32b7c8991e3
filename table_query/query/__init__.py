"""
Query module for table_query.
This module handles parsing, classification and evaluation of query text.
"""

from .classification import classify_query, is_structured
from .filters import (
    Operator,
    Condition,
    Filter,
    FilterGroup,
    GroupReference,
    GroupScope,
    ConditionFilter,
    LiteralFilter,
    InvalidFilter,
    apply_condition,
)
from .parser import QueryParser, parse_condition, compile_expression

__all__ = [
    'classify_query',
    'is_structured',
    'Operator',
    'Condition',
    'Filter',
    'FilterGroup',
    'GroupReference',
    'GroupScope',
    'ConditionFilter',
    'LiteralFilter',
    'InvalidFilter',
    'apply_condition',
    'QueryParser',
    'parse_condition',
    'compile_expression',
]
