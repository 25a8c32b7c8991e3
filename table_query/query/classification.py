"""
Query classification to determine the evaluation mode.
"""

import re

STRUCTURED_PATTERN = re.compile(r'[=!<>()]|\b(?:AND|OR|IN)\b', re.IGNORECASE)

EMPTY = 'empty'
STRUCTURED = 'structured'
SEARCH = 'search'


def is_structured(query: str) -> bool:
    """
    Check whether a query looks like a structured expression.

    This is a textual heuristic, not a grammar check: any comparison
    character, parenthesis or the words AND/OR/IN (any case) make the query
    structured, so ``a<b`` is treated as an expression.
    """
    return bool(STRUCTURED_PATTERN.search(query))


def classify_query(query: str) -> str:
    """
    Classify query to determine the evaluation mode.

    Args:
        query: The query string

    Returns:
        Query type: 'empty', 'structured' or 'search'
    """
    if not query.strip():
        return EMPTY
    if is_structured(query):
        return STRUCTURED
    return SEARCH
