"""Protocol interfaces for the external stores.

Services depend on these structural types, not on MongoDB or Redis, so the
stores can be swapped for in-memory implementations in tests.

Usage:
    ```python
    from stockroom.protocols import DocumentStore, SessionStore

    store: DocumentStore = MongoDocumentStore.from_settings()
    sessions: SessionStore = RedisSessionStore.from_settings()
    ```
"""

from .document_store import Document, DocumentStore
from .session_store import SessionStore

__all__ = [
    "Document",
    "DocumentStore",
    "SessionStore",
]
