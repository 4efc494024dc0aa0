"""Application settings collection.

Runtime preferences editable through the API, as opposed to the process
configuration in stockroom.config.
"""

from stockroom.protocols import DocumentStore
from stockroom.services.data_service import DataService

DEFAULT_SETTINGS_NAME = "default-settings"

STAY_SIGNED_IN_TTL_MS = 14 * 24 * 60 * 60 * 1000


class SettingsService(DataService):
    def __init__(self, store: DocumentStore) -> None:
        super().__init__("settings", store)

    async def init(self) -> None:
        await self.seed(
            [
                {
                    "name": DEFAULT_SETTINGS_NAME,
                    "currencySymbol": "€",
                    "language": "en-GB",
                    "staySignedInTtl": STAY_SIGNED_IN_TTL_MS,
                }
            ]
        )

    async def get_defaults(self):
        return await self.find_one({"name": DEFAULT_SETTINGS_NAME})
