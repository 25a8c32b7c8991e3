"""
Field metadata utilities.

Editors and other front ends need to know which fields a record collection
has, what type each one holds and which values occur, to offer completion
and build example queries. The query engine never reads this metadata; it
only describes the records.

Example:
    field_names = build_field_names(records)
    # {'status': {'type': 'string', 'values': ['active', 'pending', 'NULL']},
    #  'age': {'type': 'number', 'values': None}, ...}
"""

from typing import Any, Dict, Iterable, List, Optional

from .text_processing import is_nullish

STRING = 'string'
NUMBER = 'number'
BOOLEAN = 'boolean'
ARRAY = 'array'

NULL_VALUE = 'NULL'


def infer_field_type(value: Any) -> str:
    """
    Infer the metadata type of a sample value.

    Args:
        value: Field value from a sample record

    Returns:
        'boolean', 'number', 'array' or 'string'
    """
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, (list, tuple)):
        return ARRAY
    return STRING


def collect_values(records: Iterable[Dict[str, Any]], field: str) -> List[Any]:
    """
    Collect the distinct values of a field, flattening list values.

    Nullish values are left out; if any occurred, ``"NULL"`` is appended.

    Args:
        records: Records to scan
        field: Field name

    Returns:
        Distinct values in first-seen order
    """
    defined = []
    seen = set()
    has_nullish = False

    for record in records:
        value = record.get(field)
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            if is_nullish(item):
                has_nullish = True
                continue
            key = (type(item).__name__, repr(item))
            if key not in seen:
                seen.add(key)
                defined.append(item)

    return defined + [NULL_VALUE] if has_nullish else defined


def build_field_names(records: List[Dict[str, Any]],
                      fields: Optional[List[str]] = None,
                      field_types: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Build the field metadata mapping for a record collection.

    Types come from ``field_types`` when given, otherwise from the first
    record. String and array fields list their distinct values.

    Args:
        records: The record collection
        fields: Fields to describe (defaults to the first record's fields)
        field_types: Explicit type per field

    Returns:
        Mapping of field name to ``{'type': ..., 'values': ...}``
    """
    field_types = field_types or {}

    if not records:
        return {
            field: {'type': field_types.get(field, STRING), 'values': []}
            for field in (fields or [])
        }

    sample = records[0]
    field_names = {}
    for field in (fields if fields is not None else list(sample.keys())):
        field_type = field_types.get(field) or infer_field_type(sample.get(field))
        values = collect_values(records, field) if field_type in (STRING, ARRAY) else None
        field_names[field] = {'type': field_type, 'values': values}
    return field_names


def _example_condition(field: str, info: Dict[str, Any]) -> Optional[str]:
    field_type = info.get('type')
    if field_type == NUMBER:
        return f"{field} > 100"
    if field_type == BOOLEAN:
        return f"{field} = true"
    if field_type in (STRING, ARRAY):
        sample_value = next((v for v in (info.get('values') or []) if v != NULL_VALUE), None)
        return f'{field} = "{sample_value if sample_value is not None else "text"}"'
    return None


def generate_placeholder(field_names: Dict[str, Dict[str, Any]]) -> str:
    """
    Build example query text from the first two described fields.

    Args:
        field_names: Field metadata from build_field_names

    Returns:
        Placeholder text such as ``Filter data... (e.g., age > 100 AND name = "John")``
    """
    if not field_names:
        return 'Filter data... (e.g., column > value)'

    examples = []
    for field in list(field_names)[:2]:
        example = _example_condition(field, field_names[field])
        if example:
            examples.append(example)

    if not examples:
        return 'Filter data... (e.g., column = value)'

    return f"Filter data... (e.g., {' AND '.join(examples)})"
