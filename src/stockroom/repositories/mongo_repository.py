"""MongoDB implementation of DocumentStore.

Documents are stored with MongoDB's ObjectId primary key and exposed with
a string "id" instead. Ids that are not valid ObjectIds simply match nothing.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from stockroom.config import Settings, get_mongo_client, settings
from stockroom.protocols import Document

logger = logging.getLogger(__name__)


def to_object_id(id_: Any) -> ObjectId | None:
    """Parse an id, None when it is not a valid ObjectId."""
    if isinstance(id_, ObjectId):
        return id_
    try:
        return ObjectId(id_)
    except (InvalidId, TypeError):
        return None


def from_document(document: dict[str, Any]) -> Document:
    """Replace MongoDB's "_id" with a string "id"."""
    document = dict(document)
    document["id"] = str(document.pop("_id"))
    return document


class MongoDocumentStore:
    """DocumentStore backed by MongoDB.

    This class satisfies the DocumentStore protocol through structural
    typing. Creation stamps createdAt / updatedAt, updates stamp updatedAt.
    """

    def __init__(
        self,
        client: AsyncMongoClient | None = None,
        database: str | None = None,
    ) -> None:
        """Initialize the MongoDB document store.

        Args:
            client: MongoDB client instance. If None, creates default.
            database: Database name. Defaults to settings.
        """
        self._client = client or get_mongo_client()
        self._database_name = database or settings.mongo_database
        self._db: AsyncDatabase = self._client[self._database_name]

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "MongoDocumentStore":
        """Factory method to create MongoDocumentStore from settings.

        Args:
            config: Settings to connect with. If None, uses global settings.

        Returns:
            Configured MongoDocumentStore
        """
        config = config or settings
        return cls(client=get_mongo_client(config), database=config.mongo_database)

    async def create(self, collection: str, data: Document) -> Document:
        now = datetime.now(timezone.utc)
        document = {key: value for key, value in data.items() if key not in ("id", "_id")}
        document["createdAt"] = now
        document["updatedAt"] = now

        result = await self._db[collection].insert_one(document)
        document["_id"] = result.inserted_id
        return from_document(document)

    async def get_by_id(self, collection: str, id_: str) -> Document | None:
        object_id = to_object_id(id_)
        if object_id is None:
            return None
        return await self.find_one(collection, {"_id": object_id})

    async def get_all(self, collection: str) -> list[Document]:
        return await self.find_all(collection, {})

    async def find_one(self, collection: str, filters: dict[str, Any]) -> Document | None:
        document = await self._db[collection].find_one(self._to_filter(filters))
        return from_document(document) if document else None

    async def find_all(self, collection: str, filters: dict[str, Any]) -> list[Document]:
        cursor = self._db[collection].find(self._to_filter(filters))
        return [from_document(document) async for document in cursor]

    async def update(self, collection: str, data: Document) -> Document | None:
        object_id = to_object_id(data.get("id"))
        if object_id is None:
            return None

        changes = {key: value for key, value in data.items() if key not in ("id", "_id", "createdAt")}
        changes["updatedAt"] = datetime.now(timezone.utc)

        document = await self._db[collection].find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return from_document(document) if document else None

    async def delete(self, collection: str, id_: str) -> bool:
        object_id = to_object_id(id_)
        if object_id is None:
            return False
        result = await self._db[collection].delete_one({"_id": object_id})
        return result.deleted_count == 1

    async def health_check(self) -> bool:
        """Check if MongoDB is reachable.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self._client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB health check failed: %s", e)
            return False

    async def on_destroy(self) -> None:
        await self._client.close()
        logger.info("Disconnected from MongoDB")

    @staticmethod
    def _to_filter(filters: dict[str, Any]) -> dict[str, Any]:
        query = dict(filters)
        if "id" in query:
            query["_id"] = to_object_id(query.pop("id"))
        return query

    @property
    def client(self) -> AsyncMongoClient:
        """Get the MongoDB client."""
        return self._client
