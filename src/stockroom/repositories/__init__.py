"""Repository layer for data access.

Concrete implementations of the store protocols:
- MongoDocumentStore: DocumentStore over MongoDB
- RedisSessionStore: SessionStore over Redis

Both satisfy their protocols structurally, no inheritance needed.
"""

from stockroom.protocols import DocumentStore, SessionStore

from .mongo_repository import MongoDocumentStore
from .redis_repository import RedisSessionStore

__all__ = [
    "DocumentStore",
    "SessionStore",
    "MongoDocumentStore",
    "RedisSessionStore",
]
