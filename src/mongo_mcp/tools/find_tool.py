"""Bounded find queries for MCP agents.

This module implements the ``find`` tool: it resolves the target collection,
normalizes identifier fields in the filter, and runs a single read that is
always field-limited by the caller's projection and capped at MAX_LIMIT
documents, whatever limit the caller asked for.

Safety Features:
    - Collection is validated before any query is issued
    - Hard result ceiling (MAX_LIMIT) enforced here, not only in the schema
    - Optional server-side time limit (maxTimeMS) per query
    - Read-only: no writes, no retries
"""

import logging
import time

from ._core.filter_normalization import normalize_filter
from ._core.result_serialization import serialize_mongodb_result
from ..database.store import DocumentStore
from .base_tool import BaseTool
from .models import DEFAULT_LIMIT, MAX_LIMIT, ErrorResponse, FindRequest, FindResponse
from .utils import handle_mongo_errors

logger = logging.getLogger(__name__)


def effective_limit(limit: int | None) -> int:
    """Return the limit actually sent to MongoDB.

    None means "not provided" and yields DEFAULT_LIMIT. Anything else is
    clamped into [1, MAX_LIMIT]; a limit of 0 would mean "no limit" to the
    driver, so it is never passed through.

    Example:
        >>> effective_limit(None), effective_limit(5), effective_limit(5000), effective_limit(0)
        (10, 5, 1000, 1)
    """
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(int(limit), MAX_LIMIT))


class FindTool(BaseTool):
    """Query documents in a collection using MongoDB query syntax."""

    name = "find"
    description = "Query documents in a collection using MongoDB query syntax"

    def __init__(self, store: DocumentStore, query_timeout_ms: int | None = None) -> None:
        """Initialize the tool.

        Args:
            store: Store used to resolve collections
            query_timeout_ms: Server-side time limit per query; None disables it
        """
        super().__init__(store)
        self.query_timeout_ms = query_timeout_ms

    @handle_mongo_errors
    async def execute(self, request: FindRequest) -> FindResponse | ErrorResponse:
        """Run one bounded find query.

        Steps:
            1. Resolve the collection (fails fast, no query issued)
            2. Normalize the filter on a copy of the request's filter
            3. Issue find with projection and the effective limit
            4. Drain the cursor and serialize the documents

        Args:
            request: Validated find request

        Returns:
            FindResponse with the serialized documents, or ErrorResponse on any failure
        """
        collection = await self.validate_collection(request.collection)

        query_filter = normalize_filter(request.filter)
        limit = effective_limit(request.limit)
        # An empty projection would make the driver return only _id
        projection = request.projection or None

        logger.info(
            f"Executing find on '{request.collection}': filter={query_filter!r} "
            f"projection={projection!r} limit={limit}"
        )

        start_time = time.perf_counter()

        cursor = collection.find(query_filter, projection).limit(limit)
        if self.query_timeout_ms:
            cursor = cursor.max_time_ms(self.query_timeout_ms)
        documents = await cursor.to_list(length=limit)

        execution_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Query on '{request.collection}' returned {len(documents)} documents "
            f"in {execution_time:.2f}ms"
        )

        return FindResponse(
            collection=request.collection,
            count=len(documents),
            limit_applied=limit,
            results=serialize_mongodb_result(documents),
        )
