"""
Explicit caching for record store fetches.

Leaderboards and character sheets are recomputed from scratch on every
request, so the expensive part is the fetch. A caller that wants to reuse
fetched records passes a RecordCache to CachedRecordStore; nothing in the
engine holds a cache of its own.

    cache = RecordCache(ttl_seconds=60)
    store = CachedRecordStore(SqlRecordStore(session), cache)
    service = StandingsService(store)
    ...
    cache.invalidate()   # after games are recorded or rules change

Writes through the wrapped store invalidate the whole cache.
"""

import logging
import threading
import time
from typing import Any, Callable, Hashable, Mapping, Optional

from leagueboard.records.store import RecordStore
from leagueboard.records.types import GameKind, GameRecord, PlayerRef, ScoringRule

logger = logging.getLogger(__name__)


class RecordCache:
    """
    Thread-safe TTL cache keyed by fetch arguments.

    A ttl of 0 disables storage entirely (every lookup misses).
    """

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds cannot be negative")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, calling loader on a miss.

        The loader runs outside the lock; two concurrent misses may both
        load, and the later result wins.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now - entry[0] < self.ttl_seconds:
                return entry[1]

        value = loader()
        if self.ttl_seconds > 0:
            with self._lock:
                self._entries[key] = (self._clock(), value)
        return value

    def invalidate(self, prefix: Optional[str] = None) -> None:
        """Drop every entry, or only entries whose key starts with `prefix`."""
        with self._lock:
            if prefix is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if isinstance(k, tuple) and k and k[0] == prefix]:
                del self._entries[key]

    def clear(self) -> None:
        self.invalidate()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CachedRecordStore:
    """RecordStore wrapper that serves repeated fetches from a RecordCache."""

    def __init__(self, store: RecordStore, cache: RecordCache):
        self.store = store
        self.cache = cache

    def fetch_games(
        self, league_id: Optional[int], game_kind: Optional[GameKind] = None
    ) -> list[GameRecord]:
        return list(self.cache.get_or_load(
            ("games", league_id, game_kind),
            lambda: tuple(self.store.fetch_games(league_id, game_kind)),
        ))

    def fetch_scoring_rules(
        self, league_id: Optional[int], game_kind: Optional[GameKind]
    ) -> list[ScoringRule]:
        return list(self.cache.get_or_load(
            ("rules", league_id, game_kind),
            lambda: tuple(self.store.fetch_scoring_rules(league_id, game_kind)),
        ))

    def fetch_players(self, league_id: Optional[int]) -> list[PlayerRef]:
        return list(self.cache.get_or_load(
            ("players", league_id),
            lambda: tuple(self.store.fetch_players(league_id)),
        ))

    def save_placement_points(self, game_id: int, points_by_player: Mapping[int, int]) -> None:
        self.store.save_placement_points(game_id, points_by_player)
        logger.debug("Points for game %s changed; invalidating cached games", game_id)
        self.cache.invalidate("games")
