"""
Command-line interface argument parsing for table_query.

This module provides the argument parsing functionality for the table_query
command-line interface, including command definitions, argument
specifications, and help text.

Example:
    # Create a parser
    parser = create_parser()

    # Parse arguments
    args = parser.parse_args()
"""

import argparse
import os
from typing import Optional, Tuple

OUTPUT_FORMATS = ['console', 'json', 'csv', 'ids']


def create_parser() -> argparse.ArgumentParser:
    """
    Create an argument parser for the table_query CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='table-query',
        description='Table Query: filter record files with a small query language',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--config', '-c',
        help='Path to configuration file'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        help='Command to run'
    )

    filter_parser = subparsers.add_parser(
        'filter',
        help='Filter records with a query or search text',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_filter_arguments(filter_parser)

    fields_parser = subparsers.add_parser(
        'fields',
        help='Describe the fields of a data source',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_common_arguments(fields_parser)

    config_parser = subparsers.add_parser(
        'config',
        help='Manage configuration',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    _add_config_arguments(config_parser)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Add common arguments to a parser.

    Args:
        parser: ArgumentParser to add arguments to
    """
    parser.add_argument(
        '--data-source',
        required=True,
        help='Path to the data source file'
    )

    parser.add_argument(
        '--primary-key',
        help='Field to use as primary key (defaults to the configured one)'
    )

    parser.add_argument(
        '--provider',
        choices=['csv', 'json'],
        help='Provider type to use (inferred from the file extension if omitted)'
    )

    parser.add_argument(
        '--list-fields',
        nargs='*',
        default=[],
        help='CSV columns holding delimiter-joined lists'
    )


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Add filter-specific arguments to a parser.

    Args:
        parser: ArgumentParser to add arguments to
    """
    _add_common_arguments(parser)

    parser.add_argument(
        '--query', '-q',
        default='',
        help='Structured query or search text; empty selects every record'
    )

    parser.add_argument(
        '--max-results',
        type=int,
        help='Maximum number of results to print'
    )

    parser.add_argument(
        '--max-width',
        type=int,
        help='Maximum width for console output (auto-detect if not specified)'
    )

    parser.add_argument(
        '--output-format',
        choices=OUTPUT_FORMATS,
        help='Output format (defaults to the configured one)'
    )

    parser.add_argument(
        '--count-by',
        metavar='FIELD',
        help='Print match counts per value of FIELD instead of the records'
    )


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Add configuration-specific arguments to a parser.

    Args:
        parser: ArgumentParser to add arguments to
    """
    parser.add_argument(
        '--show',
        action='store_true',
        help='Show the current configuration'
    )

    parser.add_argument(
        '--create',
        metavar='PATH',
        help='Create a default configuration file at the specified path'
    )


def validate_args(args: argparse.Namespace) -> Tuple[bool, Optional[str]]:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments

    Returns:
        Tuple of (is_valid, error_message)
    """
    data_source = getattr(args, 'data_source', None)
    if data_source and not os.path.exists(data_source):
        return False, f"Data source not found: {data_source}"

    max_results = getattr(args, 'max_results', None)
    if max_results is not None and max_results <= 0:
        return False, f"Max results must be positive, got {max_results}"

    max_width = getattr(args, 'max_width', None)
    if max_width is not None and max_width <= 0:
        return False, f"Max width must be positive, got {max_width}"

    return True, None
