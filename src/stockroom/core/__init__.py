"""Routing, dependency resolution and response caching between HTTP and services.

Layers:
    - container: singleton dependency container
    - routing: controller / route descriptors
    - envelope: one normalized response per request
    - cache: checksum cache for listing endpoints
    - controller: controller base classes
    - dispatcher: installs everything on the FastAPI app
"""

from .cache import CHECKSUM_HEADER, CacheEntry, CacheResult, ChecksumCache, compute_checksum
from .container import Container, ServiceDescriptor
from .controller import BaseController, ControllerInstance, DataController
from .dispatcher import Authorizer, Binding, Dispatcher
from .envelope import Envelope, ResponseHandle, ResponseType, respond, respond_async
from .routing import ControllerDescriptor, Middleware, RouteDescriptor, RouteRegistry, Verb

__all__ = [
    # Container
    "Container",
    "ServiceDescriptor",
    # Routing
    "RouteRegistry",
    "ControllerDescriptor",
    "RouteDescriptor",
    "Middleware",
    "Verb",
    # Envelope
    "Envelope",
    "ResponseHandle",
    "ResponseType",
    "respond",
    "respond_async",
    # Cache
    "ChecksumCache",
    "CacheEntry",
    "CacheResult",
    "CHECKSUM_HEADER",
    "compute_checksum",
    # Controllers
    "ControllerInstance",
    "BaseController",
    "DataController",
    # Dispatcher
    "Dispatcher",
    "Authorizer",
    "Binding",
]
