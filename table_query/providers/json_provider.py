"""
JSON data provider for the query system.
"""

import json
import os
import logging
from typing import Any, Dict, Optional

from .base import DataProvider

logger = logging.getLogger(__name__)


class JSONProvider(DataProvider):
    """
    Data provider for JSON files.

    This provider loads records from JSON files, which can contain either a
    single object or an array of objects. Array values are kept as lists;
    nested objects are stored as JSON text because the query language only
    understands scalars and flat lists.
    """

    def __init__(self,
                 source_path: str,
                 id_field: str = 'id',
                 records_path: Optional[str] = None,
                 encoding: str = 'utf-8'):
        """
        Initialize JSON data provider.

        Args:
            source_path: Path to the JSON file
            id_field: Primary key field
            records_path: Dotted path to the array of records (e.g., "data.users")
            encoding: File encoding
        """
        super().__init__(source_path, id_field)
        self.records_path = records_path
        self.encoding = encoding

    def connect(self) -> bool:
        """
        Load the JSON file into memory.

        Returns:
            True if successful, False otherwise
        """
        if not os.path.exists(self.source_path):
            logger.error(f"JSON file not found at {self.source_path}")
            return False

        try:
            with open(self.source_path, 'r', encoding=self.encoding) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading JSON file: {e}")
            return False

        if self.records_path:
            for part in self.records_path.split('.'):
                data = data.get(part) if isinstance(data, dict) else None

        # A single object is a one-record collection
        if isinstance(data, dict):
            data = [data]

        if not isinstance(data, list):
            logger.error(f"No record array found in {self.source_path}")
            return False

        self.records = [self._process_record(item) for item in data if isinstance(item, dict)]
        logger.info(f"Successfully loaded JSON with {len(self.records)} records")
        return True

    def _process_record(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {field: self._process_field_value(value) for field, value in item.items()}

    def _process_field_value(self, value: Any) -> Any:
        """
        Process a field value based on its type.

        Args:
            value: Value from JSON

        Returns:
            Scalar, flat list, or JSON text for nested objects
        """
        if isinstance(value, dict):
            return json.dumps(value)

        if isinstance(value, list):
            return [json.dumps(item) if isinstance(item, (dict, list)) else item for item in value]

        return value
