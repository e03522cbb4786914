"""Exception hierarchy for the MongoDB find MCP server.

Design:
-------
1. **Single Root Exception**: All server exceptions inherit from MCPServerError,
   so the tool boundary can catch everything it knows how to report with one clause.

2. **Failure Domains**:
   - DatabaseError: connectivity, query rejection and timeouts raised by the driver
   - ValidationError: malformed requests and invalid collection names
   - SerializationError: results that cannot be rendered as JSON
   - ConfigurationError: startup failures

3. **Structured Context**: every exception carries
   - error_code: machine-readable identifier (e.g. "INVALID_COLLECTION")
   - message: human-readable description, returned to the calling agent
   - details: extra context (collection, reason, driver error)
   - timestamp / request_id: for correlating log lines

Usage Example:
--------------
```python
try:
    documents = await cursor.to_list(length=limit)
except pymongo.errors.OperationFailure as e:
    raise QueryExecutionError(
        message="Query execution failed",
        details={"collection": "users", "error": str(e)},
        original_exception=e,
    )
```
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================


@dataclass(frozen=True)
class MCPServerError(Exception):
    """Base exception for all MCP server errors.

    Attributes:
    -----------
    message : str
        Human-readable error description for the caller and logs
    error_code : str
        Machine-readable error identifier (e.g., "VALIDATION_ERROR")
    details : dict
        Additional context about the error (collection, reason, ...)
    timestamp : str
        ISO 8601 timestamp when the error occurred
    request_id : str
        Unique identifier for correlating this error across log lines
    original_exception : Optional[Exception]
        The underlying exception that caused this error

    Example:
    --------
    >>> raise MCPServerError(
    ...     message="Request validation failed",
    ...     error_code="VALIDATION_ERROR",
    ...     details={"field": "collection"},
    ... )
    """

    message: str
    error_code: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = field(default_factory=lambda: str(uuid4()))
    original_exception: Exception | None = None

    def __str__(self) -> str:
        """Human-readable error representation for logs."""
        error_msg = f"[{self.error_code}] {self.message}"
        if self.details:
            error_msg += f" | Details: {self.details}"
        if self.original_exception:
            error_msg += (
                f" | Caused by: {type(self.original_exception).__name__}: {self.original_exception}"
            )
        return error_msg

    def __repr__(self) -> str:
        """Developer-friendly representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}', "
            f"request_id='{self.request_id}', "
            f"timestamp='{self.timestamp}'"
            f")"
        )


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================


@dataclass(frozen=True)
class DatabaseError(MCPServerError):
    """Base class for all database-related errors."""

    error_code: str = "DATABASE_ERROR"


@dataclass(frozen=True)
class DatabaseConnectionError(DatabaseError):
    """Database connection failures.

    Use Case:
    ---------
    - MongoDB server unreachable
    - Server selection timeout
    - Authentication failure

    Example:
    --------
    >>> raise DatabaseConnectionError(
    ...     message="Failed to connect to MongoDB",
    ...     details={"host": "mongodb://localhost:27017", "timeout_ms": 5000},
    ... )
    """

    error_code: str = "DB_CONNECTION_FAILED"


@dataclass(frozen=True)
class QueryExecutionError(DatabaseError):
    """The store rejected or failed to run the query.

    Use Case:
    ---------
    - Unknown query operator in the filter ($foo)
    - Invalid projection (mixing inclusion and exclusion)
    """

    error_code: str = "QUERY_EXECUTION_FAILED"


@dataclass(frozen=True)
class DatabaseTimeoutError(DatabaseError):
    """Query exceeded its server-side time limit (maxTimeMS)."""

    error_code: str = "DB_TIMEOUT"


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================
# Client errors: reported immediately, never retried.


@dataclass(frozen=True)
class ValidationError(MCPServerError):
    """Input validation failures.

    Example:
    --------
    >>> raise ValidationError(
    ...     message="Request validation failed",
    ...     details={"errors": [{"field": "limit", "error": "Must be between 1 and 1000"}]},
    ... )
    """

    error_code: str = "VALIDATION_ERROR"


@dataclass(frozen=True)
class InvalidCollectionError(ValidationError):
    """Collection name is malformed, not allowed or does not exist.

    The query is never issued when this is raised. ``details["reason"]`` is one of
    ``empty``, ``illegal_character``, ``system_collection``, ``too_long``,
    ``not_allowed`` or ``not_found``.

    Example:
    --------
    >>> raise InvalidCollectionError(
    ...     message="Collection '__does_not_exist__' does not exist",
    ...     details={"collection": "__does_not_exist__", "reason": "not_found"},
    ... )
    """

    error_code: str = "INVALID_COLLECTION"


# =============================================================================
# SERIALIZATION / CONFIGURATION EXCEPTIONS
# =============================================================================


@dataclass(frozen=True)
class SerializationError(MCPServerError):
    """Query results could not be rendered as JSON."""

    error_code: str = "SERIALIZATION_FAILED"


@dataclass(frozen=True)
class ConfigurationError(MCPServerError):
    """Configuration errors.

    These should crash the application at startup rather than being caught
    and handled.

    Example:
    --------
    >>> raise ConfigurationError(
    ...     message="MongoDB database name not configured",
    ...     details={"env_var": "MONGODB_DATABASE"},
    ... )
    """

    error_code: str = "CONFIGURATION_ERROR"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def convert_to_mcp_exception(
    exception: Exception,
    default_message: str = "An unexpected error occurred",
    context: dict[str, Any] | None = None,
) -> MCPServerError:
    """Convert any exception to an appropriate MCP exception.

    Used at the tool boundary so every failure reaches the caller in the same shape.

    Args:
    -----
    exception : Exception
        The original exception to convert
    default_message : str
        Fallback message if exception type is unknown
    context : dict, optional
        Additional context to include in error details

    Returns:
    --------
    MCPServerError or subclass
        Appropriate MCP exception for the given error

    Example:
    --------
    >>> try:
    ...     await collection.find(query).to_list(length=10)
    ... except Exception as e:
    ...     raise convert_to_mcp_exception(e, context={"collection": "users"})
    """
    import pydantic
    import pymongo.errors
    from bson.errors import InvalidDocument

    context = context or {}

    if isinstance(exception, MCPServerError):
        return exception

    if isinstance(
        exception, (pymongo.errors.ConnectionFailure, pymongo.errors.ServerSelectionTimeoutError)
    ):
        return DatabaseConnectionError(
            message="Failed to connect to database",
            details={**context, "error": str(exception)},
            original_exception=exception,
        )

    # ExecutionTimeout inherits from OperationFailure, so it is checked first
    if isinstance(exception, pymongo.errors.ExecutionTimeout):
        return DatabaseTimeoutError(
            message="Database operation timed out",
            details={**context, "error": str(exception)},
            original_exception=exception,
        )

    if isinstance(exception, pymongo.errors.OperationFailure):
        return QueryExecutionError(
            message="Database query failed",
            details={**context, "error": str(exception), "code": exception.code},
            original_exception=exception,
        )

    if isinstance(exception, (InvalidDocument, pymongo.errors.PyMongoError)):
        return DatabaseError(
            message="Database error occurred",
            details={**context, "error": str(exception)},
            original_exception=exception,
        )

    if isinstance(exception, pydantic.ValidationError):
        return ValidationError(
            message="Request validation failed",
            details={
                **context,
                "validation_errors": [
                    {
                        "field": ".".join(str(part) for part in err["loc"]),
                        "error": err["msg"],
                    }
                    for err in exception.errors()
                ],
            },
            original_exception=exception,
        )

    return MCPServerError(
        message=default_message,
        error_code="INTERNAL_ERROR",
        details={**context, "error_type": type(exception).__name__, "error": str(exception)},
        original_exception=exception,
    )
