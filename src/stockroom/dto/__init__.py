"""Data Transfer Objects for API contracts.

These Pydantic models validate the few request bodies that need it and
shape fixed responses. Stored documents themselves stay schemaless.
"""

from .requests import CreateUserRequest, LoginRequest
from .responses import HealthCheckResponse

__all__ = [
    "LoginRequest",
    "CreateUserRequest",
    "HealthCheckResponse",
]
