"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
so tests can run them against in-memory stores.

Architecture:
    Controller -> Service -> Repository
    (HTTP)     -> (Business) -> (Data Access)

Usage:
    ```python
    from stockroom.services import ItemService

    items = ItemService(MongoDocumentStore.from_settings())
    await items.init()
    ```
"""

from .authorization_service import AUTH_ID_HEADER, AUTH_TOKEN_HEADER, AuthorizationService
from .data_service import DataService
from .item_service import ItemService
from .settings_service import SettingsService
from .user_service import UserService

__all__ = [
    "DataService",
    "UserService",
    "ItemService",
    "SettingsService",
    "AuthorizationService",
    "AUTH_ID_HEADER",
    "AUTH_TOKEN_HEADER",
]
