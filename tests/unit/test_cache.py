"""
Unit tests for the record fetch cache.
"""

import pytest

from leagueboard.records.cache import CachedRecordStore, RecordCache
from leagueboard.records.store import InMemoryRecordStore


class FakeClock:
    """Manually advanced clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CountingStore(InMemoryRecordStore):
    """InMemoryRecordStore that counts fetches."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = {"games": 0, "rules": 0, "players": 0}

    def fetch_games(self, league_id, game_kind=None):
        self.calls["games"] += 1
        return super().fetch_games(league_id, game_kind)

    def fetch_scoring_rules(self, league_id, game_kind):
        self.calls["rules"] += 1
        return super().fetch_scoring_rules(league_id, game_kind)

    def fetch_players(self, league_id):
        self.calls["players"] += 1
        return super().fetch_players(league_id)


class TestRecordCache:

    @pytest.fixture
    def clock(self):
        return FakeClock()

    def test_hit_within_ttl(self, clock):
        cache = RecordCache(ttl_seconds=60, clock=clock)
        loads = []

        def loader():
            loads.append(1)
            return "value"

        assert cache.get_or_load("k", loader) == "value"
        clock.now = 59
        assert cache.get_or_load("k", loader) == "value"
        assert len(loads) == 1

    def test_expired_entry_reloads(self, clock):
        cache = RecordCache(ttl_seconds=60, clock=clock)
        cache.get_or_load("k", lambda: "old")
        clock.now = 60

        assert cache.get_or_load("k", lambda: "new") == "new"

    def test_zero_ttl_stores_nothing(self, clock):
        cache = RecordCache(ttl_seconds=0, clock=clock)
        cache.get_or_load("k", lambda: 1)

        assert len(cache) == 0
        assert cache.get_or_load("k", lambda: 2) == 2

    def test_invalidate_prefix(self, clock):
        cache = RecordCache(clock=clock)
        cache.get_or_load(("games", 1, None), lambda: "g")
        cache.get_or_load(("players", 1), lambda: "p")

        cache.invalidate("games")

        assert len(cache) == 1
        assert cache.get_or_load(("players", 1), lambda: "other") == "p"

    def test_clear(self, clock):
        cache = RecordCache(clock=clock)
        cache.get_or_load("a", lambda: 1)
        cache.clear()
        assert len(cache) == 0

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            RecordCache(ttl_seconds=-1)


class TestCachedRecordStore:

    @pytest.fixture
    def inner(self, league_store):
        return CountingStore(
            games=league_store.games,
            rules=league_store.rules,
            players=league_store.players,
        )

    def test_repeated_fetches_hit_cache(self, inner):
        store = CachedRecordStore(inner, RecordCache(clock=FakeClock()))

        first = store.fetch_games(1)
        second = store.fetch_games(1)
        store.fetch_players(1)
        store.fetch_players(1)

        assert first == second
        assert inner.calls == {"games": 1, "rules": 0, "players": 1}

    def test_different_arguments_are_different_keys(self, inner):
        store = CachedRecordStore(inner, RecordCache(clock=FakeClock()))
        store.fetch_games(1)
        store.fetch_games(2)

        assert inner.calls["games"] == 2

    def test_save_invalidates_games_only(self, inner):
        store = CachedRecordStore(inner, RecordCache(clock=FakeClock()))
        store.fetch_games(1)
        store.fetch_players(1)

        store.save_placement_points(1, {10: 9})

        assert store.fetch_games(1)[0].placement_for(10).points == 9
        store.fetch_players(1)
        assert inner.calls["games"] == 2
        assert inner.calls["players"] == 1
