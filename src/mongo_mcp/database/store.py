"""Collection resolution over an injected Motor database.

DocumentStore is the store-access capability handed to tools. It validates
collection names, applies the optional allow-list and confirms the collection
exists before any query touches it.

Example:
    >>> store = DocumentStore(database.get_database(), allowed_collections=["users"])
    >>> users = await store.resolve_collection("users")
    >>> async for doc in users.find({"active": True}).limit(10):
    ...     print(doc)
"""

import logging
from collections.abc import Iterable

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from ..exceptions import InvalidCollectionError

logger = logging.getLogger(__name__)

MAX_COLLECTION_NAME_LENGTH = 255
SYSTEM_COLLECTION_PREFIX = "system."


class DocumentStore:
    """Validated access to the collections of a single database.

    Attributes:
        database: Motor database the collections belong to
        allowed_collections: Allow-list of collection names; empty allows all
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        allowed_collections: Iterable[str] | None = None,
    ) -> None:
        self.database = database
        self.allowed_collections = frozenset(allowed_collections or ())

    @staticmethod
    def check_collection_name(name: str) -> str:
        """Check a collection name against MongoDB naming rules.

        Args:
            name: Collection name supplied by the caller

        Returns:
            The name unchanged

        Raises:
            InvalidCollectionError: If the name is empty, contains '$' or a NUL
                character, targets a system collection or is too long
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidCollectionError(
                message="Collection name must be a non-empty string",
                details={"collection": name, "reason": "empty"},
            )

        if "$" in name or "\x00" in name:
            raise InvalidCollectionError(
                message=f"Collection name '{name}' contains an illegal character",
                details={"collection": name, "reason": "illegal_character"},
            )

        if name.startswith(SYSTEM_COLLECTION_PREFIX):
            raise InvalidCollectionError(
                message=f"System collection '{name}' cannot be queried",
                details={"collection": name, "reason": "system_collection"},
            )

        if len(name) > MAX_COLLECTION_NAME_LENGTH:
            raise InvalidCollectionError(
                message=f"Collection name exceeds {MAX_COLLECTION_NAME_LENGTH} characters",
                details={"collection": name[:64], "reason": "too_long"},
            )

        return name

    def validate_collection_name(self, name: str) -> str:
        """Check naming rules and the allow-list.

        Raises:
            InvalidCollectionError: If the name is malformed or not allowed
        """
        self.check_collection_name(name)

        if self.allowed_collections and name not in self.allowed_collections:
            raise InvalidCollectionError(
                message=f"Collection '{name}' is not allowed",
                details={"collection": name, "reason": "not_allowed"},
            )

        return name

    async def resolve_collection(self, name: str) -> AsyncIOMotorCollection:
        """Return a handle for an existing, allowed collection.

        Args:
            name: Collection name supplied by the caller

        Returns:
            Motor collection handle

        Raises:
            InvalidCollectionError: If the name is invalid, not allowed or the
                collection does not exist
            pymongo.errors.PyMongoError: If the existence check itself fails
        """
        self.validate_collection_name(name)

        existing = await self.database.list_collection_names(filter={"name": name})
        if name not in existing:
            logger.warning(f"Collection '{name}' does not exist")
            raise InvalidCollectionError(
                message=f"Collection '{name}' does not exist",
                details={"collection": name, "reason": "not_found"},
            )

        return self.database[name]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(database={getattr(self.database, 'name', '?')!r})"
