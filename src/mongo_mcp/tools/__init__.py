"""MongoDB MCP Tools Package.

Available Tool Classes:
    - FindTool: bounded find queries with identifier normalization

All tools receive a DocumentStore at construction and report failures as
ErrorResponse instead of raising.
"""

from .find_tool import FindTool, effective_limit
from .models import DEFAULT_LIMIT, MAX_LIMIT, ErrorResponse, FindRequest, FindResponse

__all__ = [
    "FindTool",
    "effective_limit",
    "FindRequest",
    "FindResponse",
    "ErrorResponse",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
]
