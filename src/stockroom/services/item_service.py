"""Inventory items collection."""

from stockroom.entities import ItemType
from stockroom.protocols import DocumentStore
from stockroom.services.data_service import DataService


class ItemService(DataService):
    def __init__(self, store: DocumentStore) -> None:
        super().__init__("items", store)

    async def init(self) -> None:
        await self.seed(
            [
                {
                    "type": ItemType.EQUIPMENT.value,
                    "brand": "Ballistol",
                    "name": "Universal oil",
                    "quantity": 1,
                    "tags": ["maintenance"],
                    "price": 9.95,
                    "image": "",
                    "category": "care",
                    "description": "Multi-purpose gun oil, 200 ml",
                }
            ]
        )
