"""Generic data access for one document collection.

Controllers never talk to the store directly: they go through a DataService
bound to their collection, which applies the collection's sanitization to
everything it hands out.
"""

import asyncio
import logging

from stockroom.protocols import Document, DocumentStore

logger = logging.getLogger(__name__)


class DataService:
    """CRUD operations over a single collection.

    Every read returns sanitized documents unless skip_sanitization is set,
    which only trusted callers (e.g. password checks) should do.

    Example:
        ```python
        items = DataService("items", store)
        item = await items.create({"name": "Rope"})
        await items.update({"id": item["id"], "amount": 3})
        ```
    """

    def __init__(self, collection: str, store: DocumentStore) -> None:
        """Initialize the data service.

        Args:
            collection: Name of the backing collection.
            store: Document storage backend.
        """
        self.collection = collection
        self._store = store

    async def init(self) -> None:
        """Startup hook, seeds the collection when needed."""

    async def seed(self, documents: list[Document]) -> int:
        """Insert documents only when the collection is still empty.

        Returns:
            Number of inserted documents
        """
        if await self._store.get_all(self.collection):
            return 0

        for document in documents:
            await self._store.create(self.collection, document)
        logger.info("Seeded %d documents into %s", len(documents), self.collection)
        return len(documents)

    async def get_all(self, skip_sanitization: bool = False) -> list[Document]:
        documents = await self._store.get_all(self.collection)
        return self._out_many(documents, skip_sanitization)

    async def get_by_id(self, id_: str, skip_sanitization: bool = False) -> Document | None:
        document = await self._store.get_by_id(self.collection, id_)
        return self._out(document, skip_sanitization)

    async def find_one(self, filters: dict, skip_sanitization: bool = False) -> Document | None:
        document = await self._store.find_one(self.collection, filters)
        return self._out(document, skip_sanitization)

    async def find_all(self, filters: dict, skip_sanitization: bool = False) -> list[Document]:
        documents = await self._store.find_all(self.collection, filters)
        return self._out_many(documents, skip_sanitization)

    async def create(self, data: Document, skip_sanitization: bool = False) -> Document:
        document = await self._store.create(self.collection, data)
        return self._out(document, skip_sanitization)

    async def update(self, data: Document, skip_sanitization: bool = False) -> Document | None:
        """Update the document identified by data["id"].

        Returns:
            The updated document, None if no document has that id
        """
        document = await self._store.update(self.collection, data)
        return self._out(document, skip_sanitization)

    async def update_many(self, documents: list[Document], skip_sanitization: bool = False) -> list[Document | None]:
        """Update several documents concurrently, results in input order."""
        return list(await asyncio.gather(*(self.update(d, skip_sanitization) for d in documents)))

    async def delete(self, id_: str) -> bool:
        return await self._store.delete(self.collection, id_)

    def sanitize(self, document: Document) -> Document:
        """Strip fields that must never leave the service."""
        return document

    def on_destroy(self) -> None:
        logger.debug("Releasing %s service", self.collection)

    def _out(self, document: Document | None, skip_sanitization: bool) -> Document | None:
        if document is None or skip_sanitization:
            return document
        return self.sanitize(document)

    def _out_many(self, documents: list[Document], skip_sanitization: bool) -> list[Document]:
        if skip_sanitization:
            return documents
        return [self.sanitize(d) for d in documents]
