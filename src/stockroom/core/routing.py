"""Declarative route registry.

Controllers register a descriptor (path prefix plus default middleware) and
an ordered list of routes pointing at handler method names. The registry is
plain data: the dispatcher reads it once at startup and installs the
bindings on the transport.

Example:
    ```python
    registry = RouteRegistry()
    routes = registry.controller(InventoryController, prefix="/items", middlewares=[Middleware.NO_AUTH])
    routes.get("get_all").get("get_by_id", "/:id").post("create")
    ```
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from stockroom.errors import UsageError


class Middleware(str, Enum):
    """Gate markers evaluated before a handler runs."""

    AUTH = "auth"
    NO_AUTH = "no_auth"


class Verb(str, Enum):
    """HTTP verbs a route can be bound to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class RouteDescriptor:
    """A single endpoint of a controller."""

    verb: Verb
    path: str
    middlewares: tuple[Middleware, ...]
    handler_name: str


@dataclass
class ControllerDescriptor:
    """Prefix and default middleware shared by all routes of a controller."""

    owner: type
    prefix: str
    middlewares: tuple[Middleware, ...] = ()
    routes: list[RouteDescriptor] = field(default_factory=list)


_SLASHES = re.compile(r"/{2,}")


def sanitize_path(path: str | None = None) -> str:
    """Normalize a path to start with exactly one slash and contain no doubled slashes."""
    if not path:
        return "/"
    return _SLASHES.sub("/", "/" + path)


def default_prefix(owner: type) -> str:
    """Derive a prefix from a controller type name, e.g. InventoryController -> /inventory."""
    name = owner.__name__
    if name.endswith("Controller") and name != "Controller":
        name = name[: -len("Controller")]
    return sanitize_path(name.strip().lower())


class ControllerRoutes:
    """Builder returned by RouteRegistry.controller(); each call appends one route."""

    def __init__(self, registry: "RouteRegistry", descriptor: ControllerDescriptor) -> None:
        self._registry = registry
        self._descriptor = descriptor

    def route(self, verb: Verb, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        """Append a route for the given verb.

        Args:
            verb: HTTP verb.
            handler_name: Name of the controller method handling the request.
            path: Path relative to the controller prefix. Defaults to the prefix root.
            middlewares: Route-specific middleware, added after the controller defaults.

        Returns:
            The builder, for chaining.
        """
        self._registry._check_open()
        self._descriptor.routes.append(
            RouteDescriptor(
                verb=Verb(verb),
                path=sanitize_path(path),
                middlewares=tuple(middlewares),
                handler_name=handler_name,
            )
        )
        return self

    def get(self, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        return self.route(Verb.GET, handler_name, path, middlewares)

    def post(self, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        return self.route(Verb.POST, handler_name, path, middlewares)

    def put(self, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        return self.route(Verb.PUT, handler_name, path, middlewares)

    def delete(self, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        return self.route(Verb.DELETE, handler_name, path, middlewares)

    def options(self, handler_name: str, path: str = "/", middlewares: Any = ()) -> "ControllerRoutes":
        return self.route(Verb.OPTIONS, handler_name, path, middlewares)

    @property
    def descriptor(self) -> ControllerDescriptor:
        return self._descriptor


class RouteRegistry:
    """Accumulates controller and route descriptors until frozen by the dispatcher."""

    def __init__(self) -> None:
        self._controllers: dict[type, ControllerDescriptor] = {}
        self._frozen = False

    def controller(
        self,
        owner: type,
        prefix: str | None = None,
        middlewares: Any = (),
    ) -> ControllerRoutes:
        """Register (or update) a controller and return its route builder.

        Declaring the same owner again updates prefix and default middleware
        but keeps the routes already declared for it.

        Args:
            owner: The controller type.
            prefix: Path prefix. Derived from the type name when omitted.
            middlewares: Default middleware applied to every route of the controller.
        """
        self._check_open()
        resolved_prefix = sanitize_path(prefix) if prefix else default_prefix(owner)

        descriptor = self._controllers.get(owner)
        if descriptor is None:
            descriptor = ControllerDescriptor(owner=owner, prefix=resolved_prefix, middlewares=tuple(middlewares))
            self._controllers[owner] = descriptor
        else:
            descriptor.prefix = resolved_prefix
            descriptor.middlewares = tuple(middlewares)

        return ControllerRoutes(self, descriptor)

    def descriptor(self, owner: type) -> ControllerDescriptor:
        """Return the descriptor of a registered controller.

        Raises:
            UsageError: If the controller was never registered.
        """
        try:
            return self._controllers[owner]
        except KeyError:
            raise UsageError(f"{owner.__name__} is not a registered controller") from None

    def routes(self, owner: type) -> list[RouteDescriptor]:
        """Return the routes of a controller in registration order."""
        return list(self.descriptor(owner).routes)

    def controllers(self) -> list[type]:
        """Return registered controller types in registration order."""
        return list(self._controllers)

    def effective_middlewares(self, owner: type, route: RouteDescriptor) -> tuple[Middleware, ...]:
        """Controller defaults followed by route-specific middleware."""
        return self.descriptor(owner).middlewares + route.middlewares

    def freeze(self) -> None:
        """Reject any further declaration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_open(self) -> None:
        if self._frozen:
            raise UsageError("Route registry is frozen, declare routes before installing controllers")


def requires_auth(middlewares: tuple[Middleware, ...]) -> bool:
    """True when AUTH is requested and not overridden by NO_AUTH."""
    return Middleware.AUTH in middlewares and Middleware.NO_AUTH not in middlewares
