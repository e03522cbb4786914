"""Result serialization for converting MongoDB documents to JSON text.

Documents returned by Motor contain BSON types (ObjectId, datetime, Decimal128,
Binary) that the json module cannot encode on its own. bson.json_util renders
them as relaxed Extended JSON, e.g. ``{"$oid": "507f1f77bcf86cd799439011"}``.
Non-finite doubles become ``{"$numberDouble": "NaN"}`` so the output is always
strict JSON.
"""

import logging
from typing import Any

from bson import json_util

from ...exceptions import SerializationError

logger = logging.getLogger(__name__)


def serialize_mongodb_result(data: Any) -> str:
    """Serialize MongoDB query results to a pretty-printed JSON string.

    Args:
        data: MongoDB result data (document, list of documents or BSON values)

    Returns:
        JSON text indented by two spaces

    Raises:
        SerializationError: If data contains values json_util cannot encode

    Example:
        >>> serialize_mongodb_result([{"_id": ObjectId("507f1f77bcf86cd799439011")}])
        '[\\n  {\\n    "_id": {\\n      "$oid": "507f1f77bcf86cd799439011"\\n    }\\n  }\\n]'
    """
    try:
        return json_util.dumps(data, indent=2, allow_nan=False)

    except (TypeError, ValueError) as e:
        logger.error(f"Failed to serialize MongoDB result: {e}")
        raise SerializationError(
            message="Failed to serialize query results",
            details={"error": str(e)},
            original_exception=e,
        ) from e
