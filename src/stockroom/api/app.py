"""FastAPI application factory.

Run with:
    uvicorn --factory stockroom.api.app:create_app
or through the restarting entry point:
    stockroom-api
"""

import inspect
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom.api.dependencies import build_container, build_registry
from stockroom.config import Settings, settings
from stockroom.controllers import CONTROLLERS
from stockroom.core import CHECKSUM_HEADER, Container, Dispatcher
from stockroom.observability import install_request_logging
from stockroom.services import AuthorizationService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run startup hooks of every singleton, tear them all down on shutdown.

    A failing startup hook (e.g. seeding against an unreachable store)
    aborts startup so the process supervisor can restart the server.
    """
    container: Container = app.state.container

    for instance in container.get_all():
        init = getattr(instance, "init", None)
        if callable(init):
            result = init()
            if inspect.isawaitable(result):
                await result

    logger.info("Stockroom API started with %d routes", len(app.state.dispatcher.bindings))

    yield

    await container.teardown()
    logger.info("Stockroom API shut down")


def create_app(container: Container | None = None, config: Settings = settings) -> FastAPI:
    """Build the application and bind every controller route.

    Args:
        container: Pre-declared container, e.g. with in-memory stores.
            Defaults to build_container(config=config).
        config: Settings for the default container.

    Returns:
        The configured FastAPI application
    """
    container = container or build_container(config=config)
    registry = build_registry(CONTROLLERS)

    app = FastAPI(
        title="Stockroom API",
        description="Inventory management REST API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CHECKSUM_HEADER],
    )
    install_request_logging(app)

    dispatcher = Dispatcher(app, container, registry, authorizer=container.resolve(AuthorizationService))
    dispatcher.install()
    container.build()

    app.state.container = container
    app.state.registry = registry
    app.state.dispatcher = dispatcher
    return app
