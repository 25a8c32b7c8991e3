"""
Data providers for table_query.

Providers load records from files; ``create_provider`` picks one from the
file extension and loads it.
"""

import os
from typing import Optional

from ..config.settings import QueryConfig
from ..utils.errors import DataSourceError, validate_data_source
from .base import DataProvider
from .csv_provider import CSVProvider
from .json_provider import JSONProvider

PROVIDER_TYPES = {
    '.csv': 'csv',
    '.json': 'json',
}


def create_provider(source_path: str,
                    provider_type: Optional[str] = None,
                    config: Optional[QueryConfig] = None) -> DataProvider:
    """
    Create and connect a provider for a data file.

    Args:
        source_path: Path to the data file
        provider_type: 'csv' or 'json'; inferred from the extension if None
        config: Configuration holding provider settings

    Returns:
        A connected DataProvider

    Raises:
        DataSourceError: If the file is missing, unsupported or unreadable
    """
    config = config or QueryConfig()

    if provider_type is None:
        is_valid, message = validate_data_source(source_path)
        if not is_valid:
            raise DataSourceError(message, details={'source_path': source_path})
        provider_type = PROVIDER_TYPES[os.path.splitext(source_path)[1].lower()]

    id_field = config.primary_key_field
    if provider_type == 'csv':
        provider = CSVProvider(
            source_path,
            id_field=id_field,
            delimiter=config.get_provider_setting('csv', 'delimiter', ','),
            encoding=config.get_provider_setting('csv', 'encoding', 'utf-8'),
            list_fields=config.get_provider_setting('csv', 'list_fields', []),
            list_delimiter=config.get_provider_setting('csv', 'list_delimiter', '|')
        )
    elif provider_type == 'json':
        provider = JSONProvider(
            source_path,
            id_field=id_field,
            records_path=config.get_provider_setting('json', 'records_path'),
            encoding=config.get_provider_setting('json', 'encoding', 'utf-8')
        )
    else:
        raise DataSourceError(f"Unknown provider type: {provider_type}",
                              details={'provider_type': provider_type})

    if not provider.connect():
        raise DataSourceError(f"Could not load data source: {source_path}",
                              details={'source_path': source_path, 'provider_type': provider_type})
    return provider


__all__ = [
    'DataProvider',
    'CSVProvider',
    'JSONProvider',
    'create_provider',
]
