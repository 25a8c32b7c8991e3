"""
Error handling utilities for table_query.

This module provides a consistent approach to error handling throughout
the table_query system, including custom exceptions, error logging,
and utility functions for error handling.

Example:
    try:
        ids = engine.filter_objects('status = "active" AND')
    except QueryError as e:
        logger.error(f"Query failed: {e}")
"""

import os
import logging
from typing import Any, Optional, Tuple, Dict, Callable

logger = logging.getLogger(__name__)

QUERY_ERROR_PREFIX = "Query error: "
INVALID_CONDITION_PREFIX = "Invalid condition: "


class TableQueryError(Exception):
    """Base exception for all table_query errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidConditionError(TableQueryError):
    """Raised when a conjunct is neither a boolean literal nor a valid condition."""

    def __init__(self, condition: str):
        self.condition = condition
        super().__init__(f"{INVALID_CONDITION_PREFIX}{condition}", details={'condition': condition})


class QueryError(TableQueryError):
    """
    Raised when a structured query fails against any record.

    The message is always the cause message prefixed with ``"Query error: "``,
    so callers see one error type whichever record triggered the failure.
    """

    def __init__(self, cause: Exception, query: Optional[str] = None):
        self.cause = cause
        cause_message = getattr(cause, 'message', None) or str(cause)
        super().__init__(
            f"{QUERY_ERROR_PREFIX}{cause_message}",
            details={
                'query': query,
                'error': cause_message,
                'error_type': type(cause).__name__
            }
        )


class ConfigurationError(TableQueryError):
    """Exception raised for configuration errors."""
    pass


class DataSourceError(TableQueryError):
    """Exception raised for data source errors."""
    pass


class ValidationError(TableQueryError):
    """Exception raised for validation errors."""
    pass


def safe_execute(func: Callable,
                *args,
                default_return: Any = None,
                error_message: str = "Error executing function",
                reraise: bool = False,
                log_error: bool = True,
                **kwargs) -> Any:
    """
    Safely execute a function and handle exceptions.

    Args:
        func: Function to execute
        *args: Function arguments
        default_return: Default return value if function fails
        error_message: Message to log if function fails
        reraise: Whether to reraise the exception
        log_error: Whether to log the error
        **kwargs: Function keyword arguments

    Returns:
        Function result or default return value

    Raises:
        Exception: If reraise is True and an exception occurs
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        if log_error:
            logger.error(f"{error_message}: {str(e)}")

        if reraise:
            raise

        return default_return


SUPPORTED_EXTENSIONS = ('.csv', '.json')


def validate_data_source(source_path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a data source path.

    Args:
        source_path: Path to the data source

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not os.path.exists(source_path):
        return False, f"Data source not found: {source_path}"

    _, ext = os.path.splitext(source_path)

    if ext.lower() not in SUPPORTED_EXTENSIONS:
        return False, f"Unsupported file type: {ext}"

    return True, None


def validate_query(query: str, max_length: int = 1000) -> Tuple[bool, Optional[str]]:
    """
    Validate a query string before it reaches the engine.

    An empty query is valid: it selects every record.

    Args:
        query: Query text
        max_length: Maximum accepted length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if query is None:
        return False, "Query cannot be None"

    if len(query) > max_length:
        return False, f"Query is too long (maximum {max_length} characters)"

    return True, None
