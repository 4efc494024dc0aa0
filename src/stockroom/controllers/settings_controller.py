"""Application settings documents."""

from fastapi import Request

from stockroom.core import DataController, Envelope, Middleware, ResponseHandle, respond
from stockroom.core.routing import ControllerRoutes
from stockroom.errors import ApiError, NotFoundError
from stockroom.services import SettingsService


class SettingsController(DataController):
    prefix = "/settings"
    middlewares = (Middleware.AUTH,)

    service: SettingsService

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        # Before the CRUD routes, "/:id" would match "/defaults" too
        routes.get("get_defaults", "/defaults")
        super().declare_routes(routes)

    async def get_defaults(self, request: Request, response: ResponseHandle) -> None:
        try:
            defaults = await self.service.get_defaults()
            if defaults is None:
                raise NotFoundError("No default settings stored")
            respond(Envelope(response=response, data=defaults))
        except ApiError as e:
            respond(Envelope.from_exception(response, e))
