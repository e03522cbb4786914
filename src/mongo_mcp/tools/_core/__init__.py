"""Core building blocks shared by the MongoDB tools.

Filter normalization and result serialization have no dependency on the MCP
layer and are usable on their own.
"""

from .filter_normalization import (
    ID_FIELD_SUFFIXES,
    OBJECT_ID_PATTERN,
    is_id_field,
    looks_like_object_id,
    normalize_filter,
    to_object_id,
)
from .result_serialization import serialize_mongodb_result

__all__ = [
    "ID_FIELD_SUFFIXES",
    "OBJECT_ID_PATTERN",
    "is_id_field",
    "looks_like_object_id",
    "normalize_filter",
    "to_object_id",
    "serialize_mongodb_result",
]
