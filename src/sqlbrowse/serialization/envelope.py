"""
JSON:API-style resource documents.

A document wraps records as ``{"type", "id", "attributes"}`` resources with an
optional document-level ``meta`` block. The attribute schema is inferred once
from the first record and applied to every record in the response; rows with a
different shape are not reconciled.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Union

KeyCase = Literal["camel", "kebab", "snake", "none"]

_WORD_BOUNDARY = re.compile(r"[\s_\-]+")
_CAMEL_HUMP = re.compile(r"([a-z\d])([A-Z])")


def convert_key(key: str, case: KeyCase = "camel") -> str:
    """Convert an attribute key to the requested case convention."""
    if case == "none":
        return key

    underscored = _CAMEL_HUMP.sub(r"\1_\2", key).lower()
    words = [word for word in _WORD_BOUNDARY.split(underscored) if word]
    if not words:
        return key

    if case == "camel":
        return words[0] + "".join(word.capitalize() for word in words[1:])
    if case == "kebab":
        return "-".join(words)
    if case == "snake":
        return "_".join(words)
    raise ValueError(f"Unknown key case: {case}")


def infer_attributes(records: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> List[str]:
    """Attribute keys of the first record, in column order."""
    if isinstance(records, Mapping):
        return list(records.keys())
    if not records:
        return []
    return list(records[0].keys())


def _resource_id(record: Mapping[str, Any], id_key: str, position: int) -> str:
    value = record.get(id_key)
    if value is None:
        return str(position)
    return str(value)


def attribute_keys(
    attributes: Sequence[str],
    key_case: KeyCase = "camel",
    id_key: str = "id",
) -> Dict[str, str]:
    """
    Map each attribute column to its output key, in column order.

    Columns already spelled in the target case keep their name. Any other
    column whose converted key is taken falls back to its raw name, so no
    column is dropped.
    """
    names = [name for name in attributes if name != id_key]
    keys: Dict[str, str] = {}
    taken = set()

    for name in names:
        if convert_key(name, key_case) == name:
            keys[name] = name
            taken.add(name)

    for name in names:
        if name in keys:
            continue
        key = convert_key(name, key_case)
        if key in taken:
            key = name
        keys[name] = key
        taken.add(key)

    return {name: keys[name] for name in names}


def _resource(
    kind: str,
    record: Mapping[str, Any],
    keys: Mapping[str, str],
    id_key: str,
    position: int,
) -> Dict[str, Any]:
    return {
        "type": kind,
        "id": _resource_id(record, id_key, position),
        "attributes": {key: record.get(name) for name, key in keys.items()},
    }


def serialize(
    kind: str,
    records: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
    meta: Optional[Dict[str, Any]] = None,
    key_case: KeyCase = "camel",
    id_key: str = "id",
    id_offset: int = 0,
) -> Dict[str, Any]:
    """
    Build a resource document.

    ``records`` may be a single mapping (``data`` is then one resource) or a
    sequence of mappings. A record without a usable ``id_key`` value gets a
    synthetic 1-based index, shifted by ``id_offset`` so ids stay unique across
    pages.
    """
    keys = attribute_keys(infer_attributes(records), key_case, id_key)

    if isinstance(records, Mapping):
        data: Union[Dict[str, Any], List[Dict[str, Any]]] = _resource(
            kind, records, keys, id_key, id_offset + 1
        )
    else:
        data = [
            _resource(kind, record, keys, id_key, id_offset + index + 1)
            for index, record in enumerate(records)
        ]

    document: Dict[str, Any] = {"data": data}
    if meta is not None:
        document["meta"] = meta
    return document


def error_document(status: int, title: str, detail: str) -> Dict[str, Any]:
    """Build an error document; ``status`` is rendered as a string."""
    return {
        "errors": [
            {
                "status": str(status),
                "title": title,
                "detail": detail,
            }
        ]
    }
