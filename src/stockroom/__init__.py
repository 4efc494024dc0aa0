"""Stockroom - inventory management REST API.

This package provides a layered architecture on top of FastAPI:

Layers:
    - core: container, route registry, response envelope, checksum cache, dispatcher
    - protocols: Interface contracts (DocumentStore, SessionStore)
    - repositories: Data access implementations (MongoDB, Redis)
    - services: Business logic
    - controllers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from stockroom.api import create_app

    app = create_app()
    ```
"""

from stockroom.config import Settings, get_settings, settings
from stockroom.errors import ApiError, BadRequestError, NotFoundError, ResolutionError, UnauthorizedError, UsageError

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    "Settings",
    # Errors
    "ApiError",
    "BadRequestError",
    "NotFoundError",
    "UnauthorizedError",
    "ResolutionError",
    "UsageError",
]
