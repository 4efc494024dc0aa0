"""Dependency wiring for the FastAPI app.

Every service and controller is a singleton owned by one Container per app.
The stores are provided ready-made so tests can swap in in-memory ones.

Pattern:
    - build_container(): declares the type graph, builds nothing yet
    - build_registry(): collects controller route declarations
    - the container is kept on app.state and torn down on shutdown
"""

from stockroom.config import Settings, settings
from stockroom.controllers import (
    CONTROLLERS,
    AuthController,
    HealthController,
    IndexController,
    InventoryController,
    SettingsController,
    UserController,
)
from stockroom.core import Container, RouteRegistry
from stockroom.protocols import DocumentStore, SessionStore
from stockroom.repositories import MongoDocumentStore, RedisSessionStore
from stockroom.services import AuthorizationService, ItemService, SettingsService, UserService


def build_container(
    document_store: DocumentStore | None = None,
    session_store: SessionStore | None = None,
    config: Settings = settings,
) -> Container:
    """Declare every service and controller of the API.

    Args:
        document_store: Storage for users, items and settings. Defaults to MongoDB.
        session_store: Storage for session tokens. Defaults to Redis.
        config: Settings used for the default stores, the session lifetime
            and the listing cache lifetime.

    Returns:
        A container with the full graph declared and nothing constructed
        except the two stores.
    """
    container = Container()

    container.provide(DocumentStore, document_store or MongoDocumentStore.from_settings(config))
    container.provide(SessionStore, session_store or RedisSessionStore.from_settings(config))

    container.declare(UserService, DocumentStore)
    container.declare(ItemService, DocumentStore)
    container.declare(SettingsService, DocumentStore)
    container.declare(
        AuthorizationService,
        UserService,
        SessionStore,
        factory=lambda users, sessions: AuthorizationService(users, sessions, session_ttl=config.session_ttl),
    )

    container.declare(IndexController)
    container.declare(HealthController, DocumentStore, SessionStore)
    container.declare(AuthController, UserService, AuthorizationService)
    container.declare(
        UserController,
        UserService,
        factory=lambda users: UserController(users, cache_lifetime=config.cache_lifetime),
    )
    container.declare(
        SettingsController,
        SettingsService,
        factory=lambda service: SettingsController(service, cache_lifetime=config.cache_lifetime),
    )
    # Inventory keeps its own longer lifetime
    container.declare(InventoryController, ItemService)

    return container


def build_registry(controllers=CONTROLLERS) -> RouteRegistry:
    """Collect the route declarations of the given controllers."""
    registry = RouteRegistry()
    for controller in controllers:
        controller.register(registry)
    return registry

