"""
Query results module for table_query.

This module provides functionality for formatting and summarizing the
records matched by a query.

Example:
    from table_query.search.results import display_results

    display_results(table.filtered_records)
"""

from .formatter import (
    display_results,
    format_as_json,
    format_as_csv,
    count_results_by_field,
    summarize_results
)

__all__ = [
    'display_results',
    'format_as_json',
    'format_as_csv',
    'count_results_by_field',
    'summarize_results'
]
