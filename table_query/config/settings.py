"""
Configuration settings for the table_query system.

This module provides centralized configuration settings for table_query,
including engine settings, output settings and data provider settings.

Example:
    # Load configuration
    config = load_config('table_query.json')

    # Use configuration in a record table
    table = RecordTable(records, config=config)
"""

import os
import json
import logging
from typing import Dict, Any, Optional

from ..utils.errors import ConfigurationError, safe_execute

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_CONFIG_FILENAME = 'table_query.json'

logger = logging.getLogger(__name__)


def configure_logging(debug_mode: bool = False) -> None:
    """
    Set up root logging for command-line use.

    Args:
        debug_mode: Log at DEBUG instead of INFO
    """
    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        format=LOG_FORMAT
    )


class QueryConfig:
    """
    Configuration settings for the table_query system.

    Attributes:
        engine_settings: Dictionary with query engine settings
        output_settings: Dictionary with result output settings
        provider_settings: Dictionary with data provider settings
        debug_mode: Whether to enable debug mode
    """

    def __init__(self,
                 engine_settings: Optional[Dict[str, Any]] = None,
                 output_settings: Optional[Dict[str, Any]] = None,
                 provider_settings: Optional[Dict[str, Any]] = None,
                 debug_mode: bool = False):
        """
        Initialize the configuration.

        Args:
            engine_settings: Query engine settings
            output_settings: Result output settings
            provider_settings: Provider-specific settings
            debug_mode: Whether to enable debug mode
        """
        self.engine_settings = {
            'primary_key_field': 'id',
            'max_query_length': 1000,
            'fallback_on_error': True   # RecordTable shows all rows when a query fails
        }
        self.engine_settings.update(engine_settings or {})

        self.output_settings = {
            'output_format': 'console',
            'max_results': None,
            'max_width': None
        }
        self.output_settings.update(output_settings or {})

        self.provider_settings = {
            'csv': {
                'delimiter': ',',
                'encoding': 'utf-8',
                'list_fields': [],
                'list_delimiter': '|'
            },
            'json': {
                'records_path': None,
                'encoding': 'utf-8'
            }
        }
        for provider_type, settings in (provider_settings or {}).items():
            self.provider_settings.setdefault(provider_type, {}).update(settings or {})

        self.debug_mode = debug_mode

    def get_engine_setting(self, key: str, default: Any = None) -> Any:
        """
        Get a specific engine setting.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        return self.engine_settings.get(key, default)

    def get_output_setting(self, key: str, default: Any = None) -> Any:
        """
        Get a specific output setting.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        return self.output_settings.get(key, default)

    def get_provider_setting(self, provider_type: str, key: str, default: Any = None) -> Any:
        """
        Get a specific provider setting.

        Args:
            provider_type: Provider type (csv, json)
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        provider_dict = self.provider_settings.get(provider_type, {})
        return provider_dict.get(key, default)

    @property
    def primary_key_field(self) -> str:
        return self.engine_settings['primary_key_field']

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        return {
            'engine_settings': self.engine_settings,
            'output_settings': self.output_settings,
            'provider_settings': self.provider_settings,
            'debug_mode': self.debug_mode
        }

    def save(self, file_path: str) -> bool:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path to save the configuration

        Returns:
            True if successful, False otherwise
        """
        return safe_execute(
            self._write,
            file_path,
            default_return=False,
            error_message=f"Error saving configuration to {file_path}"
        )

    def _write(self, file_path: str) -> bool:
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        return True

    @classmethod
    def load(cls, file_path: str) -> 'QueryConfig':
        """
        Load configuration from a JSON file.

        Args:
            file_path: Path to the configuration file

        Returns:
            QueryConfig instance

        Raises:
            ConfigurationError: If the file cannot be read or is not valid JSON
        """
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Error loading configuration from {file_path}: {e}",
                details={'path': file_path}
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {file_path} must be a JSON object",
                details={'path': file_path}
            )

        return cls(
            engine_settings=data.get('engine_settings'),
            output_settings=data.get('output_settings'),
            provider_settings=data.get('provider_settings'),
            debug_mode=data.get('debug_mode', False)
        )


def load_config(file_path: Optional[str] = None) -> QueryConfig:
    """
    Load configuration from a file or return default configuration.

    Args:
        file_path: Path to the configuration file (optional)

    Returns:
        QueryConfig instance

    Raises:
        ConfigurationError: If an explicit path does not exist
    """
    if file_path:
        if not os.path.exists(file_path):
            raise ConfigurationError(f"Configuration file not found: {file_path}",
                                     details={'path': file_path})
        return QueryConfig.load(file_path)

    location = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILENAME)
    if os.path.exists(location):
        logger.debug(f"Loading configuration from {location}")
        return QueryConfig.load(location)

    logger.debug("Using default configuration")
    return QueryConfig()
