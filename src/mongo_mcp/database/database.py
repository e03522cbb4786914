"""Process-wide Motor connection pool.

Connect once at startup, hand the database to whoever needs it, close on exit.
Tools never import this module directly: the server wraps the database in a
DocumentStore and injects it.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


# ============================================================================
# MODULE STATE
# ============================================================================

_client: AsyncIOMotorClient | None = None
_database: AsyncIOMotorDatabase | None = None
_database_name: str | None = None


# ============================================================================
# INITIALIZATION (Call Once at Startup)
# ============================================================================


def initialize(
    connection_uri: str,
    database_name: str,
    min_pool_size: int = 10,
    max_pool_size: int = 50,
    timeout_ms: int = 5000,
) -> AsyncIOMotorDatabase:
    """Initialize the database connection pool.

    Call this ONCE when the application starts. Motor handles connection pooling
    and reconnection; the client connects lazily on first use.

    Args:
        connection_uri: MongoDB connection string
        database_name: Name of database to use
        min_pool_size: Minimum connections in pool
        max_pool_size: Maximum connections in pool
        timeout_ms: Server selection and connect timeout in milliseconds

    Returns:
        The Motor database handle
    """
    global _client, _database, _database_name

    if _client is not None:
        logger.debug("Database pool already initialized, reusing it")
        return _database

    logger.info(f"Initializing Motor connection pool for database: {database_name}")

    _client = AsyncIOMotorClient(
        connection_uri,
        minPoolSize=min_pool_size,
        maxPoolSize=max_pool_size,
        maxIdleTimeMS=45000,
        serverSelectionTimeoutMS=timeout_ms,  # Fail fast if MongoDB unavailable
        connectTimeoutMS=timeout_ms,
        retryReads=True,
    )
    _database = _client[database_name]
    _database_name = database_name

    logger.info(f"Database connection pool ready (pool: {min_pool_size}-{max_pool_size})")
    return _database


# ============================================================================
# ACCESS
# ============================================================================


def get_database() -> AsyncIOMotorDatabase:
    """Get the database instance.

    Raises:
        RuntimeError: If database not initialized
    """
    if _database is None:
        raise RuntimeError("Database not initialized. Call database.initialize() at startup.")
    return _database


def get_database_name() -> str:
    """Get the current database name."""
    if _database_name is None:
        raise RuntimeError("Database not initialized.")
    return _database_name


# ============================================================================
# SHUTDOWN (Call on Application Exit)
# ============================================================================


def shutdown() -> None:
    """Close database connections gracefully. Safe to call more than once."""
    global _client, _database, _database_name

    if _client is not None:
        logger.info("Closing database connections...")
        _client.close()
        _client = None
        _database = None
        _database_name = None
        logger.info("Database connections closed")
