"""Singleton dependency container.

Services and controllers are declared with the tokens they depend on, in
constructor order. The container builds each token at most once and keeps
every instance in construction order so they can be torn down together.

Example:
    ```python
    container = Container()
    container.provide(DocumentStore, MongoDocumentStore.from_settings())
    container.declare(UserService, DocumentStore)
    container.declare(UserController, UserService, AuthorizationService)

    controller = container.resolve(UserController)
    assert controller is container.resolve(UserController)
    ```
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from stockroom.errors import ResolutionError, token_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceDescriptor:
    """Declared construction recipe for one token.

    Attributes:
        token: Identity of the service, usually its class.
        dependencies: Tokens passed positionally to the factory, in order.
        factory: Callable building the instance. Defaults to the token.
    """

    token: Any
    dependencies: tuple[Any, ...]
    factory: Callable[..., Any]


class Container:
    """Resolves and memoizes singleton instances from a declared type graph."""

    def __init__(self) -> None:
        self._descriptors: dict[Any, ServiceDescriptor] = {}
        self._instances: dict[Any, Any] = {}
        self._order: list[Any] = []
        self._resolving: list[Any] = []

    def declare(self, token: Any, *dependencies: Any, factory: Callable[..., Any] | None = None) -> None:
        """Declare how to build a token.

        Args:
            token: The token to declare (usually a class).
            *dependencies: Tokens resolved and passed to the factory, in order.
            factory: Optional callable used instead of the token itself.

        Raises:
            ResolutionError: If the token already has a live instance.
        """
        if token in self._instances:
            raise ResolutionError(token, "already constructed, cannot redeclare")

        self._descriptors[token] = ServiceDescriptor(
            token=token,
            dependencies=tuple(dependencies),
            factory=factory or token,
        )

    def provide(self, token: Any, instance: Any) -> None:
        """Register a ready-made instance for a token."""
        if token in self._instances:
            raise ResolutionError(token, "already constructed, cannot provide another instance")

        self._descriptors[token] = ServiceDescriptor(token=token, dependencies=(), factory=lambda: instance)
        self._record(token, instance)

    def resolve(self, token: type[T] | Any) -> T:
        """Return the singleton for a token, building it and its dependencies on first use.

        Args:
            token: The declared token.

        Returns:
            The one live instance for the token.

        Raises:
            ResolutionError: If the token (or one of its dependencies) is not
                declared, the graph has a cycle, or the factory raised.
        """
        if token in self._instances:
            return self._instances[token]

        descriptor = self._descriptors.get(token)
        if descriptor is None:
            raise ResolutionError(token, "no declaration for this token")

        if token in self._resolving:
            cycle = " -> ".join(token_name(t) for t in [*self._resolving, token])
            raise ResolutionError(token, f"dependency cycle {cycle}")

        self._resolving.append(token)
        try:
            arguments = [self.resolve(dependency) for dependency in descriptor.dependencies]
            try:
                instance = descriptor.factory(*arguments)
            except Exception as e:
                raise ResolutionError(token, f"{type(e).__name__}: {e}") from e
        finally:
            self._resolving.pop()

        self._record(token, instance)
        return instance

    def inject(self, token: Any) -> Any | None:
        """Return an already constructed instance, or None. Never builds."""
        return self._instances.get(token)

    def build(self) -> list[Any]:
        """Construct every declared token, dependencies first.

        Returns:
            All instances in construction order.
        """
        for token in list(self._descriptors):
            self.resolve(token)
        return self.get_all()

    def get_all(self) -> list[Any]:
        """Return every constructed instance in construction order."""
        return [self._instances[token] for token in self._order]

    async def teardown(self) -> None:
        """Call on_destroy() on every instance in construction order, then forget them.

        Hooks may be plain functions or coroutines. Declarations are kept so
        the container can be rebuilt after a restart.
        """
        for instance in self.get_all():
            hook = getattr(instance, "on_destroy", None)
            if callable(hook):
                result = hook()
                if inspect.isawaitable(result):
                    await result

        logger.info("Tore down %d instances", len(self._order))
        self._instances.clear()
        self._order.clear()

    def __contains__(self, token: Any) -> bool:
        return token in self._descriptors

    def _record(self, token: Any, instance: Any) -> None:
        self._instances[token] = instance
        self._order.append(token)
