"""Pytest configuration and shared fixtures for the MongoDB find MCP server tests.

Test Organization:
-------------------
tests/
├── unit/                    # Fast, isolated tests, Motor fully mocked
│   ├── test_filter_normalization.py
│   ├── test_find_tool.py
│   ├── test_store.py
│   └── ...
├── integration/             # Real MongoDB (TEST_MONGODB_URI), skipped if unreachable
│   └── test_find_integration.py
└── conftest.py              # This file - shared fixtures

Mocked Motor objects:
---------------------
Motor's cursor is synchronous to build (find/limit/max_time_ms return the
cursor) and asynchronous to drain (to_list). The fixtures below mirror that:
chain methods are MagicMocks returning the same cursor, to_list is an AsyncMock.

Example Usage:
--------------
```python
async def test_find(find_tool, mock_collection):
    response = await find_tool.execute(FindRequest(collection="users"))
    mock_collection.find.assert_called_once()
```
"""

import os
import time
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from src.mongo_mcp.database.store import DocumentStore
from src.mongo_mcp.tools.find_tool import FindTool

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Register custom markers.

    - @pytest.mark.unit: Fast, isolated unit tests
    - @pytest.mark.integration: Tests requiring a real MongoDB

    ```bash
    pytest -m unit              # Only unit tests (fast)
    pytest -m integration       # Only integration tests
    ```
    """
    config.addinivalue_line("markers", "unit: Fast unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: Integration tests with real dependencies")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location.

    - tests/unit/* → @pytest.mark.unit
    - tests/integration/* → @pytest.mark.integration
    """
    for item in items:
        test_path = Path(item.fspath)

        if "unit" in test_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in test_path.parts:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# MOCK DATABASE FIXTURES
# =============================================================================


def make_cursor(documents: list[dict]) -> MagicMock:
    """Create a mocked Motor cursor that yields ``documents``.

    ``to_list(length=n)`` returns at most n documents, so the limit the tool
    passes is honoured the way the driver would.
    """
    cursor = MagicMock(name="cursor")
    cursor.limit.return_value = cursor
    cursor.max_time_ms.return_value = cursor
    cursor.to_list = AsyncMock(
        side_effect=lambda length=None: list(documents)[:length] if length else list(documents)
    )
    return cursor


def matches(document: dict, query_filter: dict) -> bool:
    """Top-level equality matching, enough to stand in for MongoDB in unit tests."""
    return all(document.get(key) == value for key, value in query_filter.items())


@pytest.fixture
def cursor_factory():
    """Expose make_cursor to tests that need a hand-built cursor."""
    return make_cursor


@pytest.fixture
def sample_users() -> list[dict]:
    """Documents of the ``users`` collection."""
    return [
        {
            "_id": ObjectId("507f1f77bcf86cd799439011"),
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "teamId": ObjectId("65a1b2c3d4e5f60718293a4b"),
            "active": True,
        },
        {
            "_id": ObjectId("507f1f77bcf86cd799439012"),
            "name": "Grace Hopper",
            "email": "grace@example.com",
            "teamId": ObjectId("65a1b2c3d4e5f60718293a4b"),
            "active": False,
        },
        {
            "_id": ObjectId("507f1f77bcf86cd799439013"),
            "name": "Edsger Dijkstra",
            "email": "edsger@example.com",
            "teamId": ObjectId("65a1b2c3d4e5f60718293a4c"),
            "active": True,
        },
    ]


@pytest.fixture
def mock_collection(sample_users: list[dict]) -> MagicMock:
    """Mocked ``users`` collection whose find() filters ``sample_users`` by equality.

    Every cursor handed out is appended to ``collection.cursors`` so tests can
    assert on limit/max_time_ms calls.
    """
    collection = MagicMock(name="users")
    collection.name = "users"
    collection.cursors = []

    def find(query_filter=None, projection=None):
        cursor = make_cursor([doc for doc in sample_users if matches(doc, query_filter or {})])
        collection.cursors.append(cursor)
        return cursor

    collection.find.side_effect = find
    return collection


@pytest.fixture
def mock_database(mock_collection: MagicMock) -> MagicMock:
    """Mocked Motor database holding a single ``users`` collection."""
    db = MagicMock(name="database")
    db.name = "test_db"
    db.list_collection_names = AsyncMock(
        side_effect=lambda filter=None: [
            name for name in ["users"] if not filter or filter.get("name") == name
        ]
    )
    db.__getitem__.return_value = mock_collection
    return db


@pytest.fixture
def store(mock_database: MagicMock) -> DocumentStore:
    return DocumentStore(mock_database)


@pytest.fixture
def find_tool(store: DocumentStore) -> FindTool:
    return FindTool(store)


# =============================================================================
# INTEGRATION FIXTURES
# =============================================================================


@pytest.fixture
async def test_mongodb_client() -> AsyncGenerator[AsyncIOMotorClient, None]:
    """Provide a real MongoDB client for integration tests.

    Environment Variables:
    ----------------------
    TEST_MONGODB_URI: MongoDB connection string (default: mongodb://localhost:27017)
    """
    mongodb_uri = os.getenv("TEST_MONGODB_URI", "mongodb://localhost:27017")
    client = AsyncIOMotorClient(mongodb_uri, serverSelectionTimeoutMS=2000)

    try:
        await client.admin.command("ping")
    except Exception as e:
        client.close()
        pytest.skip(f"MongoDB not available for integration tests: {e}")

    yield client

    client.close()


@pytest.fixture
async def test_database(
    test_mongodb_client: AsyncIOMotorClient,
) -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """Provide a uniquely named database, dropped after the test."""
    db_name = f"test_find_mcp_{int(time.time() * 1000)}"
    db = test_mongodb_client[db_name]

    yield db

    await test_mongodb_client.drop_database(db_name)
