"""
Search package for table_query.
Contains the query engine and result formatting.
"""

from .engine import QueryEngine

__all__ = ['QueryEngine']
