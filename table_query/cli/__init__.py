"""
Command-line interface package for table_query.

This package provides a command-line interface for filtering CSV and JSON
record files with the query language and for describing their fields.

Example:
    from table_query.cli import main

    main(['filter', '--data-source', 'users.csv', '--query', 'age > 30'])
"""

from .commands import main, run_filter, run_fields, run_config
from .parser import create_parser

__all__ = [
    'main',
    'run_filter',
    'run_fields',
    'run_config',
    'create_parser'
]
