"""
Table Query - filter in-memory record collections with a small query language.
"""

from .search.engine import QueryEngine
from .table import RecordTable
from .config.settings import QueryConfig, load_config
from .utils.errors import TableQueryError, QueryError, InvalidConditionError

__version__ = '0.1.0'

__all__ = [
    'QueryEngine',
    'RecordTable',
    'QueryConfig',
    'load_config',
    'TableQueryError',
    'QueryError',
    'InvalidConditionError',
]
