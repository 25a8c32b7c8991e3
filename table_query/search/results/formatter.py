"""
Query result formatting utilities.

This module provides functions for formatting matched records for display
in the console or for export as JSON or CSV.
"""

import csv
import json
import shutil
import datetime
import logging
from io import StringIO
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def json_serializable(obj: Any) -> Any:
    """Convert a value to a JSON-serializable form."""
    if obj is None:
        return None
    elif isinstance(obj, (datetime.date, datetime.datetime)):
        return obj.isoformat()
    elif hasattr(obj, 'tolist'):  # numpy arrays and scalars
        return obj.tolist()
    elif isinstance(obj, (list, tuple)):
        return [json_serializable(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: json_serializable(v) for k, v in obj.items()}
    else:
        return obj


def _format_value(value: Any, limit: int = 30) -> str:
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        value_str = "[" + ", ".join(_format_value(item, limit) for item in value) + "]"
    else:
        value_str = str(value)
    if len(value_str) > limit:
        value_str = value_str[:limit - 3] + "..."
    return value_str


def display_results(results: List[Dict[str, Any]],
                   max_width: Optional[int] = None,
                   id_field: str = 'id') -> None:
    """
    Display matched records in a readable format.

    Args:
        results: List of records
        max_width: Maximum width for display (auto-detect if None)
        id_field: Primary key field, shown in its own column
    """
    if not results:
        print("No results found.")
        return

    if max_width is None:
        terminal_width, _ = shutil.get_terminal_size(fallback=(120, 24))
        max_width = max(80, min(terminal_width, 160))

    id_width = 10
    details_width = max_width - id_width - 3

    header = f"{id_field.upper():<{id_width}} | Details"
    print("\n" + header)
    print("-" * max_width)

    for result in results:
        id_value = _format_value(result.get(id_field, ''))[:id_width]

        details = [
            f"{field}: {_format_value(value)}"
            for field, value in result.items()
            if field != id_field
        ]
        details_text = ", ".join(details)
        if len(details_text) > details_width:
            details_text = details_text[:details_width - 3] + "..."

        print(f"{id_value:<{id_width}} | {details_text}")


def format_as_json(results: List[Dict[str, Any]],
                  pretty_print: bool = True) -> str:
    """
    Format matched records as JSON.

    Args:
        results: List of records
        pretty_print: Whether to format the JSON with indentation

    Returns:
        JSON string
    """
    indent = 2 if pretty_print else None
    return json.dumps([json_serializable(result) for result in results], indent=indent)


def format_as_csv(results: List[Dict[str, Any]],
                 id_field: str = 'id',
                 list_delimiter: str = '|') -> str:
    """
    Format matched records as CSV.

    The primary key column comes first, remaining columns follow in the
    order they are first seen. List values are joined with list_delimiter.

    Args:
        results: List of records
        id_field: Primary key field
        list_delimiter: Separator for list-valued fields

    Returns:
        CSV string
    """
    if not results:
        return ""

    fieldnames = []
    for result in results:
        for field in result.keys():
            if field not in fieldnames:
                fieldnames.append(field)
    if id_field in fieldnames:
        fieldnames.remove(id_field)
        fieldnames.insert(0, id_field)

    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=fieldnames)
    writer.writeheader()

    for result in results:
        row = {}
        for field in fieldnames:
            value = result.get(field)
            if value is None:
                row[field] = ""
            elif isinstance(value, (list, tuple)):
                row[field] = list_delimiter.join("" if item is None else str(item) for item in value)
            elif isinstance(value, dict):
                row[field] = json.dumps(json_serializable(value))
            else:
                row[field] = str(value)
        writer.writerow(row)

    return output.getvalue()


def count_results_by_field(results: List[Dict[str, Any]],
                         field: str) -> Dict[str, int]:
    """
    Count records by a specific field value.

    List-valued fields count once per element.

    Args:
        results: List of records
        field: Field to count by

    Returns:
        Dictionary mapping field values to counts
    """
    counts = {}

    for result in results:
        value = result.get(field)
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            key = 'null' if item is None else str(item)
            counts[key] = counts.get(key, 0) + 1

    return counts


def summarize_results(results: List[Dict[str, Any]],
                    total: int,
                    query: str,
                    id_field: str = 'id') -> Dict[str, Any]:
    """
    Create a summary of a query run.

    Args:
        results: Matched records
        total: Number of records the query ran against
        query: Query text
        id_field: Primary key field

    Returns:
        Summary dictionary
    """
    if not results:
        return {
            "query": query,
            "count": 0,
            "total": total,
            "message": "No results found."
        }

    return {
        "query": query,
        "count": len(results),
        "total": total,
        "ids": [json_serializable(result.get(id_field)) for result in results],
        "message": f"{len(results)} of {total} records matched."
    }
