"""Filter normalization: rewrite identifier-like strings as ObjectIds.

Agents send filters as plain JSON, so a lookup such as
``{"userId": "507f1f77bcf86cd799439011"}`` arrives with a string where the
collection stores an ObjectId, and would match nothing. This module rewrites
those values before the filter reaches MongoDB.

A value is converted when all of the following hold:
    - its key ends with ``"Id"`` or ``"_id"`` (case-sensitive suffix match)
    - the value is a string
    - the string is exactly 24 hexadecimal characters

Nested mappings are normalized recursively, including mappings held in
sequences, so each branch of ``{"$or": [{"userId": "<hex>"}]}`` is converted.
Bare values inside sequences have no key of their own and are never converted:
``{"userId": {"$in": ["<hex>", ...]}}`` keeps its strings.

Example:
    >>> normalize_filter({"_id": "507f1f77bcf86cd799439011", "status": "active"})
    {'_id': ObjectId('507f1f77bcf86cd799439011'), 'status': 'active'}
"""

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")
ID_FIELD_SUFFIXES = ("Id", "_id")


def is_id_field(key: Any) -> bool:
    """Return True if the key names an identifier field (``userId``, ``_id``, ``owner_id``)."""
    return isinstance(key, str) and key.endswith(ID_FIELD_SUFFIXES)


def looks_like_object_id(value: Any) -> bool:
    """Return True for strings of exactly 24 hex characters (either case)."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def to_object_id(field: str, value: str) -> ObjectId | None:
    """Convert a hex string to an ObjectId.

    Failure is reported as ``None`` rather than raised: the caller keeps the
    original value and normalization carries on.

    Args:
        field: Name of the filter field, used in the log message
        value: 24-character hex string

    Returns:
        The ObjectId, or None if it could not be constructed
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        logger.warning(f"Invalid ObjectId for field '{field}': {value!r} ({e})")
        return None


def normalize_filter(query_filter: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of the filter with identifier strings converted to ObjectIds.

    The input is never mutated and the result shares no mutable containers
    with it.

    Args:
        query_filter: JSON-compatible filter mapping, possibly nested; None is
            treated as an empty filter

    Returns:
        New filter dict
    """
    if query_filter is None:
        return {}
    return {key: _normalize_value(key, value) for key, value in query_filter.items()}


def _normalize_value(key: Any, value: Any) -> Any:
    if is_id_field(key) and looks_like_object_id(value):
        object_id = to_object_id(key, value)
        return value if object_id is None else object_id

    if isinstance(value, Mapping):
        return normalize_filter(value)

    if isinstance(value, (list, tuple)):
        return _normalize_sequence(value)

    return value


def _normalize_sequence(values: list | tuple) -> list | tuple:
    """Normalize mappings held in a sequence; other elements are copied unchanged."""
    items = []
    for item in values:
        if isinstance(item, Mapping):
            items.append(normalize_filter(item))
        elif isinstance(item, (list, tuple)):
            items.append(_normalize_sequence(item))
        else:
            items.append(copy.deepcopy(item))
    return type(values)(items)
