"""Smoke-test page."""

from fastapi import Request

from stockroom.core import BaseController, Envelope, ResponseHandle, ResponseType, respond
from stockroom.core.routing import ControllerRoutes

PAGE = """
<h1>Test</h1>
<p>This is a test.</p>
"""


class IndexController(BaseController):
    prefix = "/test"

    @classmethod
    def declare_routes(cls, routes: ControllerRoutes) -> None:
        routes.get("index")

    async def index(self, request: Request, response: ResponseHandle) -> None:
        respond(Envelope(response=response, data=PAGE, type=ResponseType.HTML))
