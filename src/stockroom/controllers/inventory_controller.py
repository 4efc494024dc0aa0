"""Inventory items, readable without a session."""

from datetime import timedelta

from stockroom.core import DataController, Middleware
from stockroom.services import ItemService

INVENTORY_CACHE_LIFETIME = timedelta(minutes=5)


class InventoryController(DataController):
    prefix = "/items"
    middlewares = (Middleware.NO_AUTH,)

    def __init__(self, service: ItemService) -> None:
        super().__init__(service, cache_lifetime=INVENTORY_CACHE_LIFETIME)
