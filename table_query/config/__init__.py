"""
Configuration module for table_query.

This module provides configuration functionality for the table_query system,
including settings loading, saving and access.

Example:
    from table_query.config import load_config

    config = load_config()
    key_field = config.primary_key_field
"""

from .settings import QueryConfig, load_config, configure_logging

__all__ = ['QueryConfig', 'load_config', 'configure_logging']
