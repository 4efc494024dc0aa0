"""HTTP surface: application factory and dependency wiring."""

from .app import create_app
from .dependencies import build_container, build_registry

__all__ = ["create_app", "build_container", "build_registry"]
