"""Base tool class for async database access.

Tools receive their DocumentStore at construction time instead of reaching
for a global connection, so tests can hand them a mocked database.

Example:
    >>> from src.mongo_mcp.tools.base_tool import BaseTool
    >>> class MyTool(BaseTool):
    ...     name = "my_tool"
    ...     async def run(self, collection_name):
    ...         collection = await self.validate_collection(collection_name)
    ...         return await collection.count_documents({})
"""

import logging

from motor.motor_asyncio import AsyncIOMotorCollection

from ..database.store import DocumentStore

logger = logging.getLogger(__name__)


class BaseTool:
    """Base class for all MCP tools.

    Attributes:
        name: Tool name registered with the MCP server
        description: Tool description shown to the calling agent
        store: Injected store used to resolve collections
    """

    name: str = ""
    description: str = ""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        logger.debug(f"Initialized {self.__class__.__name__} with {store!r}")

    async def validate_collection(self, name: str) -> AsyncIOMotorCollection:
        """Resolve a caller-supplied collection name to a collection handle.

        Raises:
            InvalidCollectionError: If the collection is invalid, not allowed or missing
        """
        return await self.store.resolve_collection(name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
