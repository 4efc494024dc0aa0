"""Process entry point with bounded hot restarts.

The server is rebuilt from scratch after a fatal error: a fresh app, a fresh
container, fresh store clients. After max_hot_restarts restarts the process
gives up and exits with status 1.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

import uvicorn
from fastapi import FastAPI

from stockroom.api.app import create_app
from stockroom.config import Settings, settings
from stockroom.observability import setup_logging

logger = logging.getLogger(__name__)


def uvicorn_server(app: FastAPI, config: Settings) -> uvicorn.Server:
    """Build a uvicorn server that logs through the root logger."""
    return uvicorn.Server(uvicorn.Config(app, host=config.api_host, port=config.api_port, log_config=None))


class Bootstrap:
    """Runs the API, restarting it after fatal errors.

    Args:
        config: Process settings (restart budget, delay, bind address).
        app_factory: Builds a new application for every run.
        server_factory: Wraps an application in a server exposing async serve().
        sleep: Delay function, replaceable in tests.
    """

    def __init__(
        self,
        config: Settings = settings,
        app_factory: Callable[..., FastAPI] = create_app,
        server_factory: Callable[[FastAPI, Settings], Any] = uvicorn_server,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.hot_restarts = 0
        self._app_factory = app_factory
        self._server_factory = server_factory
        self._sleep = sleep

    def run(self) -> None:
        """Serve until a clean shutdown.

        Raises:
            SystemExit: With status 1 once the restart budget is exhausted.
        """
        while True:
            app = self._app_factory(config=self.config)
            server = self._server_factory(app, self.config)

            try:
                asyncio.run(server.serve())
                # uvicorn returns normally when lifespan startup fails
                if getattr(server, "started", True):
                    logger.info("Server stopped")
                    return
                error: BaseException = RuntimeError("Server failed to start")
            except Exception as e:
                error = e

            logger.error("Fatal error: %s", error, exc_info=error)
            asyncio.run(app.state.container.teardown())
            self.restart()

    def restart(self) -> None:
        """Count one hot restart and wait before the next run.

        Raises:
            SystemExit: If the restart budget is exhausted.
        """
        self.hot_restarts += 1
        if self.hot_restarts >= self.config.max_hot_restarts:
            logger.critical("Too many hot restarts (%d), exiting", self.hot_restarts)
            raise SystemExit(1)

        logger.warning(
            "Restarting in %.1fs (%d/%d)",
            self.config.restart_delay,
            self.hot_restarts,
            self.config.max_hot_restarts,
        )
        self._sleep(self.config.restart_delay)


def main() -> None:
    """Console entry point."""
    setup_logging(settings.log_level, settings.log_format)

    if settings.api_reload:
        # Development mode: uvicorn's reloader owns the process
        uvicorn.run(
            "stockroom.api.app:create_app",
            factory=True,
            host=settings.api_host,
            port=settings.api_port,
            reload=True,
            log_config=None,
        )
        return

    Bootstrap().run()


if __name__ == "__main__":
    main()
