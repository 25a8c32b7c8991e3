"""
Record table: the owner of a record collection and its query engine.

This module provides a simplified API around the query engine for code that
holds a changing collection of records, such as a data grid. It keeps the
engine in sync when records are added, updated or removed, remembers the
current query, and exposes field metadata for query editors.

Example:
    table = RecordTable.from_file('users.csv')
    table.apply_query('status = "active"')
    for record in table.filtered_records:
        ...
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .config.settings import QueryConfig
from .providers import create_provider
from .search.engine import QueryEngine
from .utils.errors import QueryError, ValidationError, validate_query
from .utils.field_metadata import build_field_names, generate_placeholder

logger = logging.getLogger(__name__)


class RecordTable:
    """
    A record collection with a current query and the records it selects.

    Records are matched to each other by the string form of their primary
    key, so ``1`` and ``"1"`` name the same record.

    Attributes:
        records: All records, in insertion order
        filtered_records: Records selected by the current query
        current_query: The last applied query text
        engine: The QueryEngine filtering ``records``
    """

    def __init__(self,
                 records: Optional[List[Dict[str, Any]]] = None,
                 primary_key_field: Optional[str] = None,
                 config: Optional[QueryConfig] = None):
        """
        Initialize the record table.

        Args:
            records: Initial records (the list is used as is)
            primary_key_field: Primary key field; defaults to the configured one
            config: Configuration settings
        """
        self.config = config or QueryConfig()
        self.primary_key_field = primary_key_field or self.config.primary_key_field
        self.records = records if records is not None else []
        self.engine = QueryEngine(self.records, self.primary_key_field)
        self.current_query = ''
        self.filtered_records = list(self.records)

    @classmethod
    def from_file(cls,
                  source_path: str,
                  provider_type: Optional[str] = None,
                  config: Optional[QueryConfig] = None) -> 'RecordTable':
        """
        Load a table from a CSV or JSON file.

        Args:
            source_path: Path to the data file
            provider_type: 'csv' or 'json'; inferred from the extension if None
            config: Configuration settings

        Returns:
            A RecordTable holding the file's records

        Raises:
            DataSourceError: If the file cannot be loaded
        """
        config = config or QueryConfig()
        provider = create_provider(source_path, provider_type=provider_type, config=config)
        return cls(provider.get_all_records(), config=config)

    def __len__(self) -> int:
        return len(self.records)

    def _key(self, value: Any) -> str:
        return str(value)

    def _find_index(self, key: Any) -> int:
        wanted = self._key(key)
        for index, record in enumerate(self.records):
            if self._key(record.get(self.primary_key_field)) == wanted:
                return index
        return -1

    def _sync(self) -> None:
        self.engine.set_objects(self.records)
        self.apply_query(self.current_query)

    def filter(self, query: str) -> List[Any]:
        """
        Return primary keys matching a query without changing the current query.

        Raises:
            ValidationError: If the query is too long
            QueryError: If a structured query is malformed
        """
        is_valid, message = validate_query(query, self.config.get_engine_setting('max_query_length', 1000))
        if not is_valid:
            raise ValidationError(message, details={'query': query})
        return self.engine.filter_objects(query)

    def apply_query(self, query: str) -> List[Dict[str, Any]]:
        """
        Make a query current and select the records it matches.

        When the query fails and ``fallback_on_error`` is set, every record is
        selected and the failure is logged instead of raised.

        Args:
            query: Query text

        Returns:
            The selected records, in collection order
        """
        self.current_query = query

        if not query.strip():
            self.filtered_records = list(self.records)
            return self.filtered_records

        try:
            keys = {self._key(key) for key in self.filter(query)}
        except (QueryError, ValidationError) as e:
            if not self.config.get_engine_setting('fallback_on_error', True):
                raise
            logger.warning(f"Showing all records, query failed: {e}")
            self.filtered_records = list(self.records)
            return self.filtered_records

        self.filtered_records = [
            record for record in self.records
            if self._key(record.get(self.primary_key_field)) in keys
        ]
        return self.filtered_records

    def get_record(self, key: Any) -> Optional[Dict[str, Any]]:
        """Get a record by primary key, or None."""
        index = self._find_index(key)
        return self.records[index] if index >= 0 else None

    def _is_valid_record(self, record: Any) -> bool:
        return isinstance(record, dict) and bool(record.get(self.primary_key_field))

    def add_record(self, record: Dict[str, Any]) -> bool:
        """
        Add a record, or replace the record with the same primary key.

        Args:
            record: The record to add

        Returns:
            True if the record was stored, False if it was rejected
        """
        if not isinstance(record, dict):
            logger.warning("add_record requires a valid record object")
            return False

        if not record.get(self.primary_key_field):
            logger.warning(f"add_record: Record must have a {self.primary_key_field} field")
            return False

        key = record[self.primary_key_field]
        index = self._find_index(key)
        if index >= 0:
            self.records[index] = dict(record)
            logger.debug(f"add_record: Updated existing record with {self.primary_key_field} '{key}'")
        else:
            self.records.append(record)
            logger.debug(f"add_record: Added new record with {self.primary_key_field} '{key}'")

        self._sync()
        return True

    def remove_record(self, key: Any) -> Union[Dict[str, Any], bool]:
        """
        Remove a record by primary key.

        Args:
            key: Primary key value

        Returns:
            The removed record, or False when there is no such record
        """
        if key is None:
            logger.warning("remove_record requires a valid ID")
            return False

        index = self._find_index(key)
        if index < 0:
            logger.warning(f"remove_record: Record with {self.primary_key_field} '{key}' not found")
            return False

        removed = self.records.pop(index)
        self._sync()
        return removed

    def append_data(self, records: List[Any]) -> Dict[str, Any]:
        """
        Add or update many records at once.

        Records that are not mappings or lack a primary key are skipped.

        Args:
            records: Records to upsert

        Returns:
            ``{'added': int, 'updated': int, 'invalid': list}``
        """
        added = 0
        updated = 0
        invalid = []

        for record in records:
            if not self._is_valid_record(record):
                invalid.append(record)
                logger.warning(f"append_data: Skipping record without {self.primary_key_field}: {record!r}")
                continue

            index = self._find_index(record[self.primary_key_field])
            if index >= 0:
                self.records[index] = dict(record)
                updated += 1
            else:
                self.records.append(record)
                added += 1

        if added or updated:
            self._sync()

        return {'added': added, 'updated': updated, 'invalid': invalid}

    def replace_data(self, records: List[Any]) -> Dict[str, Any]:
        """
        Replace every record and re-apply the current query.

        Records that are not mappings or lack a primary key are skipped, as
        are later records repeating a primary key already seen.

        Args:
            records: The new records

        Returns:
            ``{'success': bool, 'replaced': int, 'invalid': list, 'duplicates': list}``
        """
        if not isinstance(records, list):
            logger.warning("replace_data requires a valid list")
            return {'success': False, 'replaced': 0, 'invalid': [], 'duplicates': []}

        valid = []
        invalid = []
        duplicates = []
        seen = set()

        for record in records:
            if not self._is_valid_record(record):
                invalid.append(record)
                logger.warning(f"replace_data: Skipping record without {self.primary_key_field}: {record!r}")
                continue

            key = self._key(record[self.primary_key_field])
            if key in seen:
                duplicates.append(key)
                logger.warning(f"replace_data: Skipping duplicate {self.primary_key_field} '{key}' within new data")
                continue

            seen.add(key)
            valid.append(record)

        self.records = valid
        self._sync()
        return {'success': True, 'replaced': len(valid), 'invalid': invalid, 'duplicates': duplicates}

    def field_names(self, field_types: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
        """
        Describe the table's fields for query editors.

        Args:
            field_types: Explicit types that override inference

        Returns:
            Mapping of field name to ``{'type': ..., 'values': ...}``
        """
        return build_field_names(self.records, field_types=field_types)

    def placeholder(self) -> str:
        """Example query text built from the table's fields."""
        return generate_placeholder(self.field_names())
