"""Per-controller checksum cache for listing endpoints.

Entries are keyed by a hash of the request shape (path, route parameters,
body) and carry a checksum of their payload. Clients echo the checksum they
last saw in the X-Cache-Checksum header; when it still matches, the endpoint
answers 304 without a body.

Lifecycle of an entry:
    missing -> populated -> expired -> populated (refreshed) -> ...
and destroy() drops everything after a write to the underlying resource.

Concurrent refreshes of the same key are not serialized: both loaders run and
the later write wins. Clients compare payload checksums, not ages, so the
race is harmless.
"""

import copy
import hashlib
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

from fastapi import status

from stockroom.core.envelope import to_jsonable

T = TypeVar("T")

CHECKSUM_HEADER = "X-Cache-Checksum"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_checksum(payload: Any) -> str:
    """Deterministic content hash of a payload (not a security digest)."""
    canonical = json.dumps(to_jsonable(payload), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def cache_key(path: str, params: dict[str, Any] | None, body: Any) -> str:
    """Key identifying one request shape."""
    return compute_checksum({"path": path, "params": dict(params or {}), "body": body})


class CacheEntry(Generic[T]):
    """Cached payload with its checksum and expiry.

    Args:
        key: Request-shape key.
        data: Payload.
        lifetime: How long the payload stays fresh. None means it is stale immediately.
        clock: Time source.
    """

    def __init__(self, key: str, data: T, lifetime: timedelta | None, clock: Clock = utcnow) -> None:
        self.key = key
        self.lifetime = lifetime
        self._clock = clock
        self.data = data
        self.checksum = compute_checksum(data)
        self.valid_until = clock() + (lifetime or timedelta(0))

    def update_data(self, data: T) -> "CacheEntry[T]":
        """Replace the payload, recompute the checksum and extend the expiry."""
        self.data = data
        self.checksum = compute_checksum(data)
        self.valid_until = self._clock() + (self.lifetime or timedelta(0))
        return self

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.valid_until <= (now or self._clock())

    def headers(self) -> dict[str, str]:
        return {CHECKSUM_HEADER: self.checksum}


@dataclass
class CacheResult(Generic[T]):
    """Outcome of a cache lookup.

    entry is None when status is 304 (the client already holds the payload).
    """

    entry: CacheEntry[T] | None
    status: int

    @property
    def not_modified(self) -> bool:
        return self.status == status.HTTP_304_NOT_MODIFIED


class ChecksumCache:
    """Cache of listing payloads owned by a single controller instance.

    Args:
        lifetime: Freshness window of an entry; None disables caching.
        clock: Time source, replaceable in tests.
    """

    def __init__(self, lifetime: timedelta | None = timedelta(minutes=1), clock: Clock = utcnow) -> None:
        self.lifetime = lifetime
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}

    @property
    def enabled(self) -> bool:
        return self.lifetime is not None

    def sweep(self) -> int:
        """Drop expired entries. Returns how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def load(
        self,
        path: str,
        params: dict[str, Any] | None,
        body: Any,
        loader: Callable[[], Awaitable[T]],
        requested_checksum: str | None = None,
    ) -> CacheResult[T]:
        """Return the cached payload for a request shape, loading it when needed.

        Args:
            path: Request path.
            params: Route parameters.
            body: Parsed request body, if any.
            loader: Coroutine function producing fresh data.
            requested_checksum: Checksum the client already holds.

        Returns:
            CacheResult with status 304 and no entry when requested_checksum
            matches, otherwise a copy of the entry with status 200.
        """
        key = cache_key(path, params, body)
        entry = self._entries.get(key)

        if entry is None:
            entry = CacheEntry(key, await loader(), self.lifetime, self._clock)
        elif entry.is_expired():
            entry.update_data(await loader())

        # The requested entry is fresh by now; drop the other expired ones
        self.sweep()

        if not self.enabled:
            return CacheResult(copy.deepcopy(entry), status.HTTP_200_OK)

        # Last write wins when two refreshes of the same key interleave
        self._entries[key] = entry

        if requested_checksum and requested_checksum == entry.checksum:
            return CacheResult(None, status.HTTP_304_NOT_MODIFIED)

        return CacheResult(copy.deepcopy(entry), status.HTTP_200_OK)

    def destroy(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def get(self, key: str) -> CacheEntry[Any] | None:
        return self._entries.get(key)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


def sort_by_key(rows: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    """Sort rows by one field: numbers descending, strings ascending.

    Raises:
        TypeError: If the field of the first row is neither a number nor a string.
    """
    sample = rows[0][key]
    if isinstance(sample, bool) or not isinstance(sample, (int, float, str)):
        raise TypeError(f'Can\'t sort by key "{key}" of type {type(sample).__name__}')
    return sorted(rows, key=lambda row: row[key], reverse=not isinstance(sample, str))
