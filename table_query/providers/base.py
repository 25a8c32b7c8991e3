"""
Base data provider definition.

This module provides the abstract base class for all data providers,
defining the interface used to load records into a RecordTable.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional


class DataProvider(ABC):
    """
    Abstract base class for all data providers.

    A provider loads records from a data source into memory. The query
    engine only ever sees the list returned by ``get_all_records``.
    """

    def __init__(self, source_path: str, id_field: str = 'id'):
        """
        Initialize the data provider.

        Args:
            source_path: Path to the data source
            id_field: Primary key field of the records
        """
        self.source_path = source_path
        self.id_field = id_field
        self.records: List[Dict[str, Any]] = []

    @abstractmethod
    def connect(self) -> bool:
        """
        Load the data source into memory.

        Returns:
            True if loading succeeded, False otherwise
        """
        pass

    def get_all_records(self) -> List[Dict[str, Any]]:
        """Get all records from the data source."""
        return self.records

    def get_record_count(self) -> int:
        """Get the total number of records in the data source."""
        return len(self.records)

    def get_all_fields(self) -> List[str]:
        """
        Get all fields seen in the data source, in first-seen order.

        Returns:
            List of field names
        """
        fields = []
        for record in self.records:
            for field in record:
                if field not in fields:
                    fields.append(field)
        return fields

    def get_record_by_id(self, id_value: Any) -> Optional[Dict[str, Any]]:
        """
        Get a specific record by its primary key.

        Keys are compared as strings, so ``"2"`` finds a record with id ``2``.

        Args:
            id_value: Primary key value

        Returns:
            The record if found, None otherwise
        """
        wanted = str(id_value)
        for record in self.records:
            if str(record.get(self.id_field)) == wanted:
                return record
        return None
