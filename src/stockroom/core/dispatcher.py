"""Request dispatcher.

Wires the route registry, the container and the auth gate into a FastAPI
application. Each route becomes one transport binding running:

    middleware gate -> handler(request, response) -> written envelope

The binding is the single recovery boundary: any exception escaping the
gate or a handler is logged and answered with a 500 envelope carrying its
message.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from stockroom.core.container import Container
from stockroom.core.envelope import Envelope, ResponseHandle, respond
from stockroom.core.routing import Middleware, RouteDescriptor, RouteRegistry, Verb, requires_auth, sanitize_path
from stockroom.errors import UnauthorizedError

logger = logging.getLogger(__name__)

_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@runtime_checkable
class Authorizer(Protocol):
    """Authentication check run for routes gated with Middleware.AUTH."""

    async def authorized(self, request: Request) -> bool:
        """Return True when the request carries a valid session."""
        ...


@dataclass(frozen=True)
class Binding:
    """One installed transport route."""

    verb: Verb
    path: str
    transport_path: str
    controller: type
    handler_name: str


def to_transport_path(path: str) -> str:
    """Convert ":param" segments to Starlette's "{param}" syntax."""
    return _PARAM.sub(r"{\1}", path)


class Dispatcher:
    """Installs controller routes on a FastAPI app.

    Args:
        app: The transport application.
        container: Container holding the controller singletons.
        registry: Route declarations; frozen on install.
        authorizer: Gate used for Middleware.AUTH.
    """

    def __init__(self, app: FastAPI, container: Container, registry: RouteRegistry, authorizer: Authorizer) -> None:
        self._app = app
        self._container = container
        self._registry = registry
        self._authorizer = authorizer
        self.bindings: list[Binding] = []

    def install(self, controllers: Iterable[type] | None = None) -> list[Binding]:
        """Bind every route of the given controllers, then the not-found fallback.

        Args:
            controllers: Controller types, defaults to all registered controllers
                in registration order.

        Returns:
            The installed bindings, in installation order.
        """
        self._registry.freeze()

        for controller_type in controllers or self._registry.controllers():
            instance = self._container.resolve(controller_type)
            descriptor = self._registry.descriptor(controller_type)

            for route in descriptor.routes:
                path = sanitize_path(descriptor.prefix + route.path)
                middlewares = self._registry.effective_middlewares(controller_type, route)
                binding = Binding(
                    verb=route.verb,
                    path=path,
                    transport_path=to_transport_path(path),
                    controller=controller_type,
                    handler_name=route.handler_name,
                )
                self._app.add_api_route(
                    binding.transport_path,
                    self._make_endpoint(instance, route, middlewares),
                    methods=[route.verb.value],
                    name=f"{controller_type.__name__}.{route.handler_name}",
                    include_in_schema=False,
                )
                self.bindings.append(binding)
                logger.debug("Bound [%s] %s -> %s", route.verb.value, path, binding.handler_name)

        # Unmatched path or verb. Registered as the router's 404/405 handler so
        # the router still gets to redirect "/items" to "/items/" first.
        self._app.add_exception_handler(StarletteHTTPException, self._handle_http_exception)

        logger.info("Installed %d routes", len(self.bindings))
        return self.bindings

    def _make_endpoint(self, instance: object, route: RouteDescriptor, middlewares: tuple[Middleware, ...]):
        handler = getattr(instance, route.handler_name)
        handler_label = f"{type(instance).__name__}.{route.handler_name}"

        async def endpoint(request: Request) -> Response:
            response = ResponseHandle()

            try:
                if not await self.run_middlewares(middlewares, request, response):
                    return response.response

                await handler(request, response)
                if not response.sent:
                    raise RuntimeError(f"Handler {handler_label} did not respond")
            except Exception as e:
                logger.error("%s %s failed: %s", request.method, request.url.path, e, exc_info=True)
                if response.sent:
                    return response.response
                respond(Envelope(response=response, status=status.HTTP_500_INTERNAL_SERVER_ERROR, data=str(e)))

            return response.response

        endpoint.__name__ = route.handler_name
        return endpoint

    async def run_middlewares(
        self,
        middlewares: tuple[Middleware, ...],
        request: Request,
        response: ResponseHandle,
    ) -> bool:
        """Run the authentication gate for a route's middleware.

        NO_AUTH anywhere in the list overrides AUTH.

        Returns:
            False when the request was rejected (a 401 envelope has been written).
        """
        if requires_auth(middlewares) and not await self._authorizer.authorized(request):
            respond(Envelope.from_exception(response, UnauthorizedError("Unauthorized")))
            return False
        return True

    async def _handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code not in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return await http_exception_handler(request, exc)
        return self.not_found(request)

    def not_found(self, request: Request) -> Response:
        """Answer 404 naming the attempted verb and path."""
        response = ResponseHandle()
        respond(
            Envelope(
                response=response,
                status=status.HTTP_404_NOT_FOUND,
                data=f"Path not found: {request.method}:{request.url.path}",
            )
        )
        return response.response
