"""
Value normalization for JSON output.

PostgreSQL ``bigint`` values can exceed the range a JSON number carries
without loss in most clients (IEEE-754 doubles). Such integers are emitted as
decimal strings. Non-finite floats (``NaN``, ``Infinity``) have no JSON
number form and are emitted as their PostgreSQL text spelling. Everything else
is left for the wire encoder.
"""

import math
from typing import Any, Dict, Iterable, List, Mapping

MAX_SAFE_INTEGER = 2**53 - 1


def normalize_value(value: Any) -> Any:
    """Return a JSON-safe form of a single driver value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            return value
        return str(value)
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    # array columns, e.g. bigint[]
    if isinstance(value, (list, tuple)):
        return [normalize_value(item) for item in value]
    return value


def normalize_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize every field of a row, preserving column order."""
    return {key: normalize_value(value) for key, value in row.items()}


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_row(row) for row in rows]
