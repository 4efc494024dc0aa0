"""Session store protocol.

Key-value store holding one session token per user id.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Protocol for session token storage."""

    async def get(self, key: str) -> str | None:
        """Return the value stored under key, None if absent."""
        ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store a value, optionally expiring after ttl seconds."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
