"""MongoDB find MCP Server using FastMCP.

This module exposes a single ``find`` tool that lets an MCP client (Claude
Desktop, an IDE agent, ...) query documents in a MongoDB collection with a
JSON filter, projection and limit.

Key Features:
    - FastMCP-based server implementation (stdio or HTTP transport)
    - Identifier strings in filters are converted to ObjectIds
    - Every query is validated, projected and capped before it runs
    - Failures come back as structured error payloads, never as exceptions

Usage:
    python -m src.mongo_mcp.server
    MCP_TRANSPORT=http MCP_PORT=8000 python -m src.mongo_mcp.server
"""

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from src.config.settings import settings

from .database import database
from .database.store import DocumentStore
from .exceptions import ConfigurationError, convert_to_mcp_exception
from .tools.find_tool import FindTool
from .tools.models import DEFAULT_LIMIT, MAX_LIMIT, ErrorResponse, FindRequest

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVER_NAME = "mongodb-find-mcp"
SERVER_INSTRUCTIONS = (
    "Read-only access to a MongoDB database. Use the 'find' tool to query documents in a "
    "collection with MongoDB query syntax. String values of fields ending in 'Id' or '_id' "
    "that look like ObjectIds are matched as ObjectIds. At most 1000 documents are returned "
    "per call; use 'projection' to request only the fields you need."
)


def build_find_handler(find_tool: FindTool):
    """Build the async function registered as the ``find`` MCP tool.

    The parameter annotations become the tool's input schema.

    Args:
        find_tool: Tool instance that executes the query

    Returns:
        Coroutine function returning a JSON-serializable dict
    """

    async def find(
        collection: Annotated[str, Field(description="Name of the collection to query")],
        # Dict defaults are never mutated: FindRequest copies them and normalization
        # works on its own copy.
        filter: Annotated[
            dict[str, Any] | None, Field(description="MongoDB query filter")
        ] = {},
        limit: Annotated[
            int | None,
            Field(ge=1, le=MAX_LIMIT, description="Maximum documents to return"),
        ] = DEFAULT_LIMIT,
        projection: Annotated[
            dict[str, Any] | None, Field(description="Fields to include/exclude")
        ] = {},
    ) -> dict[str, Any]:
        try:
            request = FindRequest(
                collection=collection,
                filter=filter,
                limit=limit,
                projection=projection,
            )
        except PydanticValidationError as e:
            error = convert_to_mcp_exception(e, context={"operation": find_tool.name})
            logger.warning(f"Rejected find request: {error}")
            return ErrorResponse.from_exception(error, operation=find_tool.name).model_dump()

        result = await find_tool.execute(request)
        return result.model_dump()

    find.__doc__ = find_tool.description
    return find


def create_server(store: DocumentStore | None = None) -> FastMCP:
    """Create and configure the FastMCP server.

    Args:
        store: Store to query. When omitted, the Motor pool is initialized from
            settings and wrapped in a DocumentStore.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    if store is None:
        logger.info(f"Initializing database connection to {settings.masked_mongodb_uri}...")
        db = database.initialize(
            connection_uri=settings.mongodb_connection_string,
            database_name=settings.mongodb_database,
            min_pool_size=settings.mongodb_min_pool_size,
            max_pool_size=settings.mongodb_max_pool_size,
            timeout_ms=settings.mongodb_timeout * 1000,
        )
        store = DocumentStore(db, allowed_collections=settings.allowed_collections)

    find_tool = FindTool(store, query_timeout_ms=settings.mongodb_timeout * 1000)
    server.tool(name=find_tool.name, description=find_tool.description)(
        build_find_handler(find_tool)
    )

    if store.allowed_collections:
        logger.info(f"Collection allow-list: {sorted(store.allowed_collections)}")
    logger.info(f"Registered tool: {find_tool.name}")
    return server


def main() -> None:
    """Main entry point for the MCP server."""
    try:
        logger.info("Starting MongoDB find MCP Server...")
        try:
            settings.validate_configuration()
        except ValueError as e:
            raise ConfigurationError(
                message=str(e),
                details={"database": settings.mongodb_database},
                original_exception=e,
            ) from e
        settings.print_config()

        server = create_server()
        logger.info(f"Serving database '{database.get_database_name()}'")

        if settings.mcp_transport == "http":
            logger.info(f"HTTP transport on {settings.mcp_server_url}")
            server.run(transport="http", host=settings.mcp_host, port=settings.mcp_port)
        else:
            server.run()

    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
    finally:
        database.shutdown()


if __name__ == "__main__":
    main()
