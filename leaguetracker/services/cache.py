# leaguetracker/services/cache.py

# SECTION: MODULE DOCSTRING
"""Time-boxed in-memory caches.

``TTLCache`` is a small keyed store whose entries expire lazily: a read past
the TTL behaves as a miss, but nothing is evicted until it is overwritten or
invalidated. ``TaskCache`` holds the parsed task catalog and the per-player
completion overlays on top of two such caches.
"""

# SECTION: IMPORTS
from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, NamedTuple, TypeVar

from leaguetracker.config import CATALOG_CACHE_SECONDS, PLAYER_CACHE_SECONDS
from leaguetracker.helpers._logger import log
from leaguetracker.models.task import Task

# SECTION: TYPE VARIABLES
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]


# KLASS: CacheEntry
class CacheEntry(NamedTuple):
    payload: Any
    timestamp: float


# KLASS: TTLCache
class TTLCache(Generic[K, V]):
    """Keyed cache where an entry is valid while ``now - timestamp < ttl``."""

    def __init__(self, ttl: float | timedelta, name: str = "cache", clock: Clock = time.monotonic):
        self.ttl = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        self.name = name
        self._clock = clock
        self._entries: dict[K, CacheEntry] = {}

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp < self.ttl

    def get(self, key: K) -> V | None:
        """Return the payload for ``key`` if present and not expired, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry):
            log.debug(f"[{self.name}] entry for {key!r} expired")
            return None
        return entry.payload

    def peek(self, key: K) -> V | None:
        """Return the payload for ``key`` regardless of age."""
        entry = self._entries.get(key)
        return entry.payload if entry is not None else None

    def set(self, key: K, value: V) -> None:
        self._entries[key] = CacheEntry(value, self._clock())

    def age(self, key: K) -> float | None:
        """Seconds since ``key`` was stored, or None when absent."""
        entry = self._entries.get(key)
        return self._clock() - entry.timestamp if entry is not None else None

    def is_valid(self, key: K) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry)

    def invalidate(self, key: K | None = None) -> None:
        """Drop one entry, or every entry when ``key`` is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return self.is_valid(key)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TTLCache(name={self.name!r}, ttl={self.ttl}s, entries={len(self._entries)})"


# KLASS: TaskCache
class TaskCache:
    """Catalog and per-player overlay cache.

    Getters hand back the stored list itself, so two reads inside the TTL with
    no write in between return identical data. Callers must not mutate it.
    """

    CATALOG_KEY = "catalog"

    def __init__(
        self,
        catalog_ttl: float | timedelta = CATALOG_CACHE_SECONDS,
        player_ttl: float | timedelta = PLAYER_CACHE_SECONDS,
        clock: Clock = time.monotonic,
    ):
        self._catalog: TTLCache[str, list[Task]] = TTLCache(catalog_ttl, name="catalog", clock=clock)
        self._players: TTLCache[str, list[Task]] = TTLCache(player_ttl, name="player", clock=clock)
        self._catalog_fetched_at: datetime | None = None

    # --- Catalog ---

    def get_catalog(self) -> list[Task] | None:
        return self._catalog.get(self.CATALOG_KEY)

    def set_catalog(self, tasks: list[Task]) -> None:
        self._catalog.set(self.CATALOG_KEY, tasks)
        self._catalog_fetched_at = datetime.now(timezone.utc)
        log.debug(f"Catalog cached ({len(tasks)} tasks)")

    def invalidate_catalog(self) -> None:
        self._catalog.invalidate()
        self._catalog_fetched_at = None

    @property
    def catalog_fetched_at(self) -> datetime | None:
        """Wall-clock time of the last catalog write, None after invalidation."""
        return self._catalog_fetched_at

    # --- Player overlays ---

    def get_player_overlay(self, player_name: str) -> list[Task] | None:
        return self._players.get(player_name)

    def set_player_overlay(self, player_name: str, tasks: list[Task]) -> None:
        self._players.set(player_name, tasks)

    def invalidate_player(self, player_name: str | None = None) -> None:
        """Drop one player's overlay, or all overlays when no name is given."""
        self._players.invalidate(player_name)

    def __repr__(self) -> str:
        return f"TaskCache(catalog={len(self._catalog)}, players={len(self._players)})"
