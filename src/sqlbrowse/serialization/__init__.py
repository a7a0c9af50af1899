"""
Wire-format helpers: value normalization and resource documents.
"""

from .envelope import attribute_keys, convert_key, error_document, infer_attributes, serialize
from .normalizer import MAX_SAFE_INTEGER, normalize_row, normalize_rows, normalize_value

__all__ = [
    "attribute_keys",
    "convert_key",
    "error_document",
    "infer_attributes",
    "serialize",
    "MAX_SAFE_INTEGER",
    "normalize_row",
    "normalize_rows",
    "normalize_value",
]
