"""
Command implementations for the table_query command-line interface.
"""

import json
import logging
import sys
from typing import List, Optional

from ..config.settings import QueryConfig, configure_logging, load_config
from ..search.results.formatter import (
    count_results_by_field,
    display_results,
    format_as_csv,
    format_as_json,
    json_serializable,
    summarize_results,
)
from ..table import RecordTable
from ..utils.errors import TableQueryError
from .parser import create_parser, validate_args

logger = logging.getLogger(__name__)


def _load_table(args, config: QueryConfig) -> RecordTable:
    if args.primary_key:
        config.engine_settings['primary_key_field'] = args.primary_key
    if args.list_fields:
        csv_settings = config.provider_settings.setdefault('csv', {})
        csv_settings['list_fields'] = list(csv_settings.get('list_fields', [])) + args.list_fields
    return RecordTable.from_file(args.data_source, provider_type=args.provider, config=config)


def run_filter(args, config: QueryConfig) -> int:
    """
    Run the 'filter' command.

    Args:
        args: Parsed arguments
        config: Configuration settings

    Returns:
        Exit code
    """
    # The command line reports failures instead of showing everything
    config.engine_settings['fallback_on_error'] = False
    table = _load_table(args, config)

    results = table.apply_query(args.query)
    summary = summarize_results(results, len(table), args.query, id_field=table.primary_key_field)
    logger.info(summary['message'])

    if args.count_by:
        print(json.dumps(count_results_by_field(results, args.count_by), indent=2))
        return 0

    max_results = args.max_results or config.get_output_setting('max_results')
    if max_results:
        results = results[:max_results]

    output_format = args.output_format or config.get_output_setting('output_format', 'console')
    if output_format == 'ids':
        for record in results:
            print(json.dumps(json_serializable(record.get(table.primary_key_field))))
    elif output_format == 'json':
        print(format_as_json(results))
    elif output_format == 'csv':
        list_delimiter = config.get_provider_setting('csv', 'list_delimiter', '|')
        print(format_as_csv(results, id_field=table.primary_key_field, list_delimiter=list_delimiter), end='')
    else:
        max_width = args.max_width or config.get_output_setting('max_width')
        display_results(results, max_width=max_width, id_field=table.primary_key_field)

    return 0


def run_fields(args, config: QueryConfig) -> int:
    """
    Run the 'fields' command: print field metadata as JSON.

    Args:
        args: Parsed arguments
        config: Configuration settings

    Returns:
        Exit code
    """
    table = _load_table(args, config)
    print(json.dumps(json_serializable(table.field_names()), indent=2))
    logger.info(table.placeholder())
    return 0


def run_config(args, config: QueryConfig) -> int:
    """
    Run the 'config' command.

    Args:
        args: Parsed arguments
        config: Configuration settings

    Returns:
        Exit code
    """
    if args.create:
        if not QueryConfig().save(args.create):
            return 1
        print(f"Created default configuration at {args.create}")

    if args.show or not args.create:
        print(json.dumps(config.to_dict(), indent=2))

    return 0


COMMANDS = {
    'filter': run_filter,
    'fields': run_fields,
    'config': run_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Arguments to parse (if None, use sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    is_valid, message = validate_args(args)
    if not is_valid:
        print(f"Error: {message}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
        if config.debug_mode:
            logging.getLogger().setLevel(logging.DEBUG)
        return COMMANDS[args.command](args, config)
    except TableQueryError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
