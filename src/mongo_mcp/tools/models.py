"""Pydantic models for the find tool's request and responses.

Using Pydantic provides validation of the loosely-typed arguments an agent
sends, and a stable serialized shape for what the tool returns.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..exceptions import MCPServerError

DEFAULT_LIMIT = 10
MAX_LIMIT = 1000


class FindRequest(BaseModel):
    """Request model for querying documents in one collection.

    ``filter`` and ``projection`` are arbitrary nested JSON objects written in
    MongoDB query syntax. Explicit nulls are treated as "not provided".
    """

    collection: str = Field(..., min_length=1, description="Name of the collection to query")
    filter: dict[str, Any] = Field(
        default_factory=dict, description="MongoDB query filter (e.g. {'userId': '...'})"
    )
    limit: int = Field(
        DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description=f"Maximum documents to return (1-{MAX_LIMIT})",
    )
    projection: dict[str, Any] = Field(
        default_factory=dict, description="Fields to include/exclude (e.g. {'_id': 0, 'name': 1})"
    )

    @field_validator("filter", "projection", mode="before")
    @classmethod
    def default_empty_mapping(cls, value: Any) -> Any:
        """Treat null filter/projection as an empty mapping."""
        return {} if value is None else value

    @field_validator("limit", mode="before")
    @classmethod
    def default_limit(cls, value: Any) -> Any:
        """Treat null limit as the default."""
        return DEFAULT_LIMIT if value is None else value


class FindResponse(BaseModel):
    """Successful find result."""

    success: bool = Field(True, description="Always True for a successful query")
    collection: str = Field(..., description="Collection that was queried")
    count: int = Field(..., description="Number of documents returned")
    limit_applied: int = Field(..., description="Effective result limit sent to MongoDB")
    results: str = Field(..., description="Pretty-printed JSON array of the matching documents")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always False for a failed operation")
    error: str = Field(..., description="Error message")
    error_code: str | None = Field(None, description="Machine-readable error identifier")
    details: dict[str, Any] | None = Field(None, description="Additional error details")
    operation: str | None = Field(None, description="Operation that failed")

    @classmethod
    def from_exception(cls, error: MCPServerError, operation: str | None = None) -> "ErrorResponse":
        """Build the response for an MCP exception.

        Only JSON-safe detail values are kept; the original exception and its
        traceback stay in the logs.
        """
        details = {
            key: value if isinstance(value, (str, int, float, bool, list, dict)) or value is None
            else str(value)
            for key, value in error.details.items()
        }
        return cls(
            error=error.message,
            error_code=error.error_code,
            details=details or None,
            operation=operation,
        )
