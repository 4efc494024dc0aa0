"""Utility modules for the API."""

from .passwords import hash_password, new_salt, verify_password

__all__ = [
    "hash_password",
    "new_salt",
    "verify_password",
]
