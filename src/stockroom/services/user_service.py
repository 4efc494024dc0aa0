"""Users collection."""

from stockroom.protocols import Document, DocumentStore
from stockroom.services.data_service import DataService
from stockroom.utils import hash_password, new_salt

SECRET_FIELDS = ("password", "salt")


class UserService(DataService):
    """Users, with credentials hidden from every sanitized read."""

    def __init__(self, store: DocumentStore) -> None:
        super().__init__("users", store)

    async def init(self) -> None:
        salt = new_salt()
        await self.seed(
            [
                {
                    "name": "admin",
                    "password": hash_password("admin", salt),
                    "salt": salt,
                    "email": "",
                    "language": "en-GB",
                    "roles": ["admin"],
                    "deleted": False,
                }
            ]
        )

    def sanitize(self, document: Document) -> Document:
        return {key: value for key, value in document.items() if key not in SECRET_FIELDS}
