"""
Utils package for table_query.
Contains error types and value coercion helpers.
"""

from .errors import (
    TableQueryError,
    InvalidConditionError,
    QueryError,
    ConfigurationError,
    DataSourceError,
    ValidationError,
    safe_execute,
    validate_data_source,
    validate_query,
)
from .text_processing import (
    normalize_whitespace,
    tokenize,
    is_nullish,
    to_search_text,
)

__all__ = [
    'TableQueryError',
    'InvalidConditionError',
    'QueryError',
    'ConfigurationError',
    'DataSourceError',
    'ValidationError',
    'safe_execute',
    'validate_data_source',
    'validate_query',
    'normalize_whitespace',
    'tokenize',
    'is_nullish',
    'to_search_text',
]
