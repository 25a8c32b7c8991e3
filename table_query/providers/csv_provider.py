"""
CSV data provider implementation.

This module provides a data provider for CSV files. Files are read with
pandas; missing cells become None and numpy scalars are converted to plain
Python values so records compare the same way as records built by hand.
"""

import os
import logging
import time
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .base import DataProvider

logger = logging.getLogger(__name__)


def _to_python(value: Any) -> Any:
    """Convert pandas/numpy cell values to plain Python values."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


class CSVProvider(DataProvider):
    """
    Data provider that reads from CSV files.

    Columns named in ``list_fields`` hold array values written as a single
    cell joined by ``list_delimiter`` (``dev|lead``).
    """

    def __init__(self,
                 source_path: str,
                 id_field: str = 'id',
                 delimiter: str = ',',
                 encoding: str = 'utf-8',
                 list_fields: Optional[List[str]] = None,
                 list_delimiter: str = '|'):
        """
        Initialize the CSV provider.

        Args:
            source_path: Path to the CSV file
            id_field: Primary key field
            delimiter: Column delimiter
            encoding: File encoding
            list_fields: Columns to split into lists
            list_delimiter: Separator used inside list cells
        """
        super().__init__(source_path, id_field)
        self.delimiter = delimiter
        self.encoding = encoding
        self.list_fields = set(list_fields or [])
        self.list_delimiter = list_delimiter
        self.headers: List[str] = []

    def connect(self) -> bool:
        """
        Load the CSV file into memory.

        Returns:
            True if successful, False otherwise
        """
        if not os.path.exists(self.source_path):
            logger.error(f"CSV file not found at {self.source_path}")
            return False

        try:
            start_time = time.time()
            frame = pd.read_csv(self.source_path, sep=self.delimiter, encoding=self.encoding)
        except (OSError, ValueError, pd.errors.ParserError) as e:
            logger.error(f"Error loading CSV file: {e}", exc_info=True)
            return False

        self.headers = [str(column) for column in frame.columns]
        self.records = [self._process_row(row) for row in frame.to_dict(orient='records')]

        load_time = time.time() - start_time
        logger.info(f"Successfully loaded CSV with {len(self.records)} rows and {len(self.headers)} columns in {load_time:.4f} seconds")
        return True

    def _process_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        record = {}
        for field, value in row.items():
            value = _to_python(value)
            if field in self.list_fields:
                value = self._split_list(value)
            record[str(field)] = value
        return record

    def _split_list(self, value: Any) -> List[Any]:
        if value is None or value == '':
            return []
        return [item.strip() for item in str(value).split(self.list_delimiter) if item.strip()]

    def get_all_fields(self) -> List[str]:
        """Get the CSV header columns."""
        return self.headers
