"""
Query engine implementation for the table_query system.

This module owns a record collection and answers queries against it,
returning primary-key values of the matching records in collection order.
Text that looks like an expression is evaluated as a structured query;
anything else is treated as a free-text search.

Example:
    engine = QueryEngine(records, primary_key_field='id')
    engine.filter_objects('status = "active" AND age > 29')   # [1, 3]
    engine.filter_objects('john')                            # [1, 3]

Callers must not call ``set_objects`` while ``filter_objects`` is scanning.
"""

import logging
import time
from collections import defaultdict
from typing import Any, Dict, List, Optional

from ..query.classification import SEARCH, STRUCTURED, classify_query
from ..query.filters import Condition, apply_condition
from ..query.parser import QueryParser, compile_expression, parse_condition
from ..utils.errors import QueryError
from ..utils.text_processing import normalize_whitespace, to_search_text, tokenize

logger = logging.getLogger(__name__)


class QueryEngine:
    """
    Filters an in-memory record collection with query text.

    Attributes:
        objects: The current record collection (held by reference)
        primary_key_field: Field whose value identifies a record in results
    """

    def __init__(self, objects: Optional[List[Dict[str, Any]]] = None, primary_key_field: str = 'id'):
        """
        Initialize the query engine.

        Args:
            objects: Initial record collection
            primary_key_field: Name of the primary key field
        """
        self.objects = objects if objects is not None else []
        self.primary_key_field = primary_key_field
        self.parser = QueryParser()

        self.metrics = {
            'filter_time': 0.0,
            'total_queries': 0,
            'count_by_mode': defaultdict(int)
        }

    def set_objects(self, objects: List[Dict[str, Any]]) -> None:
        """Replace the record collection. The list is not copied."""
        self.objects = objects

    def _primary_key(self, record: Dict[str, Any]) -> Any:
        return record.get(self.primary_key_field)

    def _all_keys(self) -> List[Any]:
        return [self._primary_key(record) for record in self.objects]

    def filter_objects(self, query: str) -> List[Any]:
        """
        Return primary keys of the records matching a query.

        Args:
            query: Structured expression, search text or empty string

        Returns:
            Primary-key values in collection order

        Raises:
            QueryError: If a structured query fails on any record
        """
        start_time = time.time()
        mode = classify_query(query)
        self.metrics['total_queries'] += 1
        self.metrics['count_by_mode'][mode] += 1

        if mode == SEARCH:
            results = self.search_objects(query)
        elif mode == STRUCTURED:
            results = self._filter_structured(query)
        else:
            results = self._all_keys()

        self.metrics['filter_time'] = time.time() - start_time
        logger.debug(f"{mode} query '{query}' matched {len(results)} of {len(self.objects)} records")
        return results

    def _filter_structured(self, query: str) -> List[Any]:
        expression = compile_expression(normalize_whitespace(query))

        results = []
        for record in self.objects:
            try:
                matched = expression.apply(record)
            except Exception as e:
                raise QueryError(e, query=query) from e
            if matched:
                results.append(self._primary_key(record))
        return results

    def search_objects(self, search_terms: str) -> List[Any]:
        """
        Case-insensitive multi-term search across all field values.

        A record matches when every term occurs somewhere in its values.
        Never raises.

        Args:
            search_terms: Whitespace-separated search terms

        Returns:
            Primary-key values in collection order
        """
        terms = tokenize(search_terms)
        if not terms:
            return self._all_keys()

        results = []
        for record in self.objects:
            searchable = ' '.join(to_search_text(value).lower() for value in record.values())
            if all(term in searchable for term in terms):
                results.append(self._primary_key(record))
        return results

    def evaluate_expression(self, record: Dict[str, Any], expression: str) -> bool:
        """
        Evaluate an expression, including parenthesized groups, against one record.

        Args:
            record: The record to test
            expression: Query text; empty text matches everything

        Returns:
            True if the record matches
        """
        if not expression.strip():
            return True
        return self.parser.parse(expression).apply(record)

    def process_group(self, record: Dict[str, Any], group: str) -> bool:
        """
        Evaluate an OR-of-ANDs group against one record.

        Raises:
            InvalidConditionError: If a reached conjunct cannot be parsed
        """
        return self.parser.parse_group(normalize_whitespace(group)).apply(record)

    def parse_condition(self, condition: str) -> Condition:
        """Parse a single leaf condition."""
        return parse_condition(condition)

    def apply_condition(self, record: Dict[str, Any], condition: Condition) -> bool:
        """Test one record against one parsed condition."""
        return apply_condition(record, condition)
