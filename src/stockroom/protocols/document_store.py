"""Document store protocol.

Defines the interface of the schemaless store holding users, items and
settings. Documents cross this boundary with a string "id" field; the
store's own primary key representation never leaks out.

Queries are conjunctions of equality filters, e.g. {"name": "admin"}.
"""

from typing import Any, Protocol, runtime_checkable

Document = dict[str, Any]


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document storage backends."""

    async def create(self, collection: str, data: Document) -> Document:
        """Insert a document.

        Args:
            collection: Collection name
            data: Document without an id

        Returns:
            The stored document including its new "id"
        """
        ...

    async def get_by_id(self, collection: str, id_: str) -> Document | None:
        """Fetch a document by id, None when it does not exist."""
        ...

    async def get_all(self, collection: str) -> list[Document]:
        """Fetch every document of a collection."""
        ...

    async def find_one(self, collection: str, filters: dict[str, Any]) -> Document | None:
        """Fetch the first document matching all equality filters."""
        ...

    async def find_all(self, collection: str, filters: dict[str, Any]) -> list[Document]:
        """Fetch every document matching all equality filters."""
        ...

    async def update(self, collection: str, data: Document) -> Document | None:
        """Replace the fields of the document identified by data["id"].

        Returns:
            The updated document, None if no document has that id
        """
        ...

    async def delete(self, collection: str, id_: str) -> bool:
        """Delete a document by id.

        Returns:
            True if a document was deleted
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
