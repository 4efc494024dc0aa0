"""User management.

Passwords are hashed with a fresh salt whenever they are set; neither the
hash nor the salt ever leaves the service layer.
"""

from typing import Any

from fastapi import Request
from pydantic import ValidationError

from stockroom.core import DataController, Envelope, Middleware, ResponseHandle, respond
from stockroom.dto import CreateUserRequest
from stockroom.errors import ApiError, BadRequestError, NotFoundError
from stockroom.services import UserService
from stockroom.utils import hash_password, new_salt


class UserController(DataController):
    prefix = "/users"
    middlewares = (Middleware.AUTH,)

    service: UserService

    async def create(self, request: Request, response: ResponseHandle) -> None:
        try:
            body = await self.read_document(request)
            try:
                user = CreateUserRequest.model_validate(body)
            except ValidationError as e:
                raise BadRequestError(f"Invalid user: {e.errors()[0]['msg']}") from None

            document = user.model_dump()
            document["deleted"] = False
            result = await self.service.create(self.with_password(document, user.password))

            self.destroy_caches()
            respond(Envelope(response=response, data=result))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    async def update(self, request: Request, response: ResponseHandle) -> None:
        try:
            document = await self.read_document(request)
            id_ = document.get("id")
            if not id_:
                raise BadRequestError("No ID given")

            if await self.service.get_by_id(id_) is None:
                raise NotFoundError(f"Can't find object with id: {id_}")

            password = document.pop("password", None)
            document.pop("salt", None)
            if password:
                document = self.with_password(document, password)

            result = await self.service.update(document)
            self.destroy_caches()

            if result is None:
                raise NotFoundError(f"Can't find object with id: {id_}")
            respond(Envelope(response=response, data=result))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    def filter(self, value: dict[str, Any]) -> bool:
        return not value.get("deleted")

    @staticmethod
    def with_password(document: dict[str, Any], password: str) -> dict[str, Any]:
        """Return a copy of document carrying the salted hash of password."""
        salt = new_salt()
        return {**document, "password": hash_password(password, salt), "salt": salt}
