"""Controller base classes.

Handlers are coroutine methods taking (request, response) and answering via
respond(). DataController provides the standard CRUD endpoints over a
DataService, with a checksum-cached listing.
"""

import json
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from fastapi import Request

from stockroom.config import settings
from stockroom.core.cache import CHECKSUM_HEADER, CacheResult, ChecksumCache, sort_by_key
from stockroom.core.envelope import Envelope, ResponseHandle, respond
from stockroom.core.routing import ControllerRoutes, Middleware, RouteRegistry
from stockroom.errors import ApiError, BadRequestError, NotFoundError

if TYPE_CHECKING:
    from stockroom.services import DataService

P = TypeVar("P", datetime, str, int, float, bool)


class ControllerInstance:
    """Anything the dispatcher can bind routes to.

    Attributes:
        prefix: Registration prefix, derived from the class name when None.
        middlewares: Default middleware of every route of the controller.
    """

    prefix: str | None = None
    middlewares: tuple[Middleware, ...] = ()

    @classmethod
    def register(cls, registry: RouteRegistry) -> ControllerRoutes:
        """Register this controller and its routes with a registry."""
        routes = registry.controller(cls, prefix=cls.prefix, middlewares=cls.middlewares)
        cls.declare_routes(routes)
        return routes

    def on_destroy(self) -> None:
        """Lifecycle hook called on container teardown."""

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        """Append this controller's routes to the registry builder."""


class BaseController(ControllerInstance):
    """Parameter helpers shared by all controllers."""

    @staticmethod
    def get_param(request: Request, key: str, default: P | None) -> P | Any:
        """Read a path parameter, falling back to a default.

        When the default is a datetime the raw value is parsed as ISO-8601.

        Raises:
            BadRequestError: If a datetime parameter is not valid ISO-8601.
        """
        value = request.path_params.get(key)
        if value is None:
            return default

        if isinstance(default, datetime):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                raise BadRequestError(f"Invalid date format: {value}. Suggested format: ISO8601") from None

        return value

    @staticmethod
    def get_id(request: Request, should_throw: bool = True) -> str | None:
        """Read the "id" path parameter.

        Raises:
            BadRequestError: If the id is missing and should_throw is set.
        """
        id_ = BaseController.get_param(request, "id", None)
        if id_ is None and should_throw:
            raise BadRequestError("No ID given")
        return id_

    @staticmethod
    def get_params(request: Request, definition: dict[str, Any]) -> dict[str, Any]:
        """Read several path parameters; definition maps names to defaults."""
        return {key: BaseController.get_param(request, key, default) for key, default in definition.items()}

    @staticmethod
    async def read_json(request: Request) -> Any:
        """Parse the request body as JSON; an empty body reads as None.

        Raises:
            BadRequestError: If the body is not valid JSON.
        """
        raw = await request.body()
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            raise BadRequestError("Request body is not valid JSON") from None

    @classmethod
    async def read_document(cls, request: Request) -> dict[str, Any]:
        """Parse the request body as a JSON object.

        Raises:
            BadRequestError: If the body is missing or not an object.
        """
        body = await cls.read_json(request)
        if not isinstance(body, dict):
            raise BadRequestError("Request body must be a JSON object")
        return body


class DataController(BaseController):
    """CRUD endpoints over a DataService.

    Args:
        service: Data access for the controller's collection.
        cache_lifetime: Freshness window of listing caches; None disables caching.
    """

    def __init__(
        self,
        service: "DataService",
        cache_lifetime: timedelta | None = settings.cache_lifetime,
    ) -> None:
        self.service = service
        self.caches = ChecksumCache(lifetime=cache_lifetime)

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        (
            routes.get("get_all")
            .get("get_by_id", "/:id")
            .post("create")
            .put("update")
            .delete("delete", "/:id")
        )

    async def load_data_and_generate_checksum(self, request: Request, loader) -> CacheResult:
        """Run a loader through the listing cache for this request's shape."""
        return await self.caches.load(
            path=request.url.path,
            params=dict(request.path_params),
            body=await self.read_json(request),
            loader=loader,
            requested_checksum=request.headers.get(CHECKSUM_HEADER),
        )

    async def get_all(self, request: Request, response: ResponseHandle) -> None:
        async def load() -> list[dict[str, Any]]:
            rows = await self.service.get_all()
            return [self.sanitize_from_db(row) for row in rows if self.filter(row)]

        try:
            result = await self.load_data_and_generate_checksum(request, load)
        except ApiError as e:
            respond(Envelope.from_exception(response, e))
            return

        if result.not_modified:
            respond(Envelope(response=response, status=result.status))
            return

        data = result.entry.data
        if len(data) > 1 and "id" in data[0]:
            data = sort_by_key(data, "id")

        respond(Envelope(response=response, data=data, headers=result.entry.headers()))

    async def get_by_id(self, request: Request, response: ResponseHandle) -> None:
        try:
            id_ = self.get_id(request)
            document = await self.service.get_by_id(id_)
            if not document:
                raise NotFoundError(f"Can't find object with id: {id_}")

            respond(Envelope(response=response, data=self.sanitize_from_db(document)))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    async def create(self, request: Request, response: ResponseHandle) -> None:
        try:
            document = self.sanitize_for_db(await self.read_document(request))
            result = self.sanitize_from_db(await self.service.create(document))

            # Force cache rebuild for all clients
            self.destroy_caches()

            respond(Envelope(response=response, data=result))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    async def update(self, request: Request, response: ResponseHandle) -> None:
        try:
            document = self.sanitize_for_db(await self.read_document(request))
            if not document.get("id"):
                raise BadRequestError("No ID given")

            result = await self.service.update(document)
            self.destroy_caches()

            if result is None:
                raise NotFoundError(f"Can't find object with id: {document['id']}")

            respond(Envelope(response=response, data=self.sanitize_from_db(result)))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    async def delete(self, request: Request, response: ResponseHandle) -> None:
        try:
            id_ = self.get_id(request)
            deleted = await self.service.delete(id_)
            self.destroy_caches()

            if not deleted:
                raise ApiError("Unable to delete object")

            respond(Envelope(response=response, data=deleted))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))

    def destroy_caches(self) -> None:
        """Drop all listing caches so the next listing reloads from the store."""
        self.caches.destroy()

    def sanitize_for_db(self, value: dict[str, Any]) -> dict[str, Any]:
        return value

    def sanitize_from_db(self, value: dict[str, Any]) -> dict[str, Any]:
        return value

    def filter(self, value: dict[str, Any]) -> bool:
        return True
