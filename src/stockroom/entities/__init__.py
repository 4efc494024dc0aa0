"""Domain entities for internal representation.

Pure dataclasses and enums used by services and controllers. They are NOT
API contracts - use DTOs from the dto package for that.
"""

from .auth_token import AuthToken
from .item import ItemType

__all__ = ["AuthToken", "ItemType"]
