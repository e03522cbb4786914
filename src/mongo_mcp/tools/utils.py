"""Shared utilities for MCP tools.

Key Features:
    - Decorator that turns any failure inside a tool into an ErrorResponse
"""

import logging
from collections.abc import Callable
from functools import wraps

from ..exceptions import ValidationError, convert_to_mcp_exception
from .models import ErrorResponse

logger = logging.getLogger(__name__)


def handle_mongo_errors(func: Callable) -> Callable:
    """Decorator for consistent error handling across MongoDB tool operations.

    Every exception raised by the wrapped coroutine is converted to the MCP
    exception hierarchy, logged, and returned as an ErrorResponse, so nothing
    escapes the tool boundary. Nothing is retried.

    Args:
        func: The coroutine function to decorate

    Returns:
        Wrapped function with error handling

    Example:
        @handle_mongo_errors
        async def execute(self, request):
            # MongoDB operations here
            return result
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            error = convert_to_mcp_exception(
                e,
                default_message=f"Unexpected error in {func.__name__}",
                context={"operation": func.__name__},
            )
            if isinstance(error, ValidationError):
                logger.warning(f"Rejected request in {func.__name__}: {error}")
            else:
                logger.error(f"{func.__name__} failed: {error}", exc_info=e)

            operation = getattr(args[0], "name", None) if args else None
            return ErrorResponse.from_exception(error, operation=operation or func.__name__)

    return wrapper
