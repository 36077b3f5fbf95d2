"""
Standings service: the entry point for leaderboards, character sheets,
player profiles and points recalculation.

Every call fetches a fresh snapshot from the record store and folds it into
new aggregates; the service keeps no state between calls. Concurrent calls
for the same or different leagues are safe because each one builds its own
aggregate map. The fetch is the only blocking step, and a caller that needs
to cancel abandons the whole call.

Usage:
    with get_session() as session:
        service = StandingsService.from_session(session)
        top10 = service.compute_leaderboard(league_id=1, game_kind="commander", limit=10)
        sheets = service.compute_character_sheets(league_id=1)
        profile = service.compute_player_profile(player_id=12, league_id=1)
        result = service.recalculate_points(league_id=1)
        print(result.summary())
"""

import logging
from dataclasses import replace
from typing import Mapping, Optional, Union

from sqlalchemy.orm import Session

from leagueboard.config import settings
from leagueboard.constants import RECENT_GAMES_WINDOW
from leagueboard.records.cache import CachedRecordStore, RecordCache
from leagueboard.records.store import RecordStore, SqlRecordStore
from leagueboard.records.types import GameKind
from leagueboard.scoring.recalculate import RecalculationResult, recalculate_games
from leagueboard.standings.aggregator import aggregate_games
from leagueboard.standings.character import CharacterSheet, build_character_sheets
from leagueboard.standings.leaderboard import LeaderboardEntry, build_leaderboard
from leagueboard.standings.profile import PlayerProfile, build_player_profile

logger = logging.getLogger(__name__)

GameKindFilter = Union[GameKind, str, None]


class StandingsService:
    """
    Computes league standings from a RecordStore.

    Args:
        store: Where games, rules and players are read from
        max_limit: Largest leaderboard limit a caller may request
                   (defaults to settings.leaderboard_max_limit)

    Raises:
        ValueError: If max_limit is below 1
    """

    def __init__(self, store: RecordStore, max_limit: Optional[int] = None):
        if max_limit is None:
            max_limit = settings.leaderboard_max_limit
        if max_limit < 1:
            raise ValueError(f"max_limit must be at least 1, got {max_limit}")
        self.store = store
        self.max_limit = max_limit

    @classmethod
    def from_session(cls, session: Session, cache: Optional[RecordCache] = None) -> "StandingsService":
        """Build a service over the SQL store, optionally wrapped in a cache."""
        store: RecordStore = SqlRecordStore(session)
        if cache is not None:
            store = CachedRecordStore(store, cache)
        return cls(store)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute_leaderboard(
        self,
        league_id: Optional[int],
        game_kind: GameKindFilter = None,
        limit: Optional[int] = None,
        previous_ranks: Optional[Mapping[int, int]] = None,
    ) -> list[LeaderboardEntry]:
        """
        Rank the players of a league (or of every league when league_id is None).

        Args:
            league_id: League to rank, None for all leagues
            game_kind: Only count games of this kind ("all"/None for every kind)
            limit: Return only the top `limit` entries (None for all)
            previous_ranks: Earlier player_id → rank snapshot for trend

        Returns:
            Entries ordered by rank. Every seeded player appears, including
            those with no games; an empty league gives an empty list.

        Raises:
            ValueError: If game_kind is unknown or limit is out of range
        """
        kind = GameKind.coerce(game_kind)
        self._check_limit(limit)

        names = self._player_names(league_id)
        games = self.store.fetch_games(league_id, kind)
        entries = build_leaderboard(games, names, previous_ranks=previous_ranks, limit=limit)

        logger.debug(
            "Leaderboard league=%s kind=%s: %d games, %d entries",
            league_id, kind.value if kind else "all", len(games), len(entries),
        )
        return entries

    def compute_character_sheets(
        self,
        league_id: Optional[int],
        game_kind: GameKindFilter = None,
    ) -> list[CharacterSheet]:
        """
        Build a character sheet for every player in scope.

        Raises:
            ValueError: If game_kind is unknown
        """
        kind = GameKind.coerce(game_kind)

        names = self._player_names(league_id)
        games = self.store.fetch_games(league_id, kind)
        aggregates = aggregate_games(games, names.keys())
        sheets = build_character_sheets(aggregates.values(), names)

        logger.debug(
            "Character sheets league=%s kind=%s: %d games, %d sheets",
            league_id, kind.value if kind else "all", len(games), len(sheets),
        )
        return sheets

    def compute_player_profile(
        self,
        player_id: int,
        league_id: Optional[int] = None,
        game_kind: GameKindFilter = None,
        recent: int = RECENT_GAMES_WINDOW,
    ) -> PlayerProfile:
        """
        Build one player's profile within a league (or across all leagues).

        Only the player's own placements are folded into their totals;
        the rank is their position on the scope's leaderboard, or None
        when they are not on it.

        Raises:
            ValueError: If game_kind is unknown
            LookupError: If the player is unknown and has no games in scope
        """
        kind = GameKind.coerce(game_kind)

        names = self._player_names(league_id)
        games = self.store.fetch_games(league_id, kind)
        profile = build_player_profile(games, player_id, names, recent=recent)

        if player_id not in names:
            # Not in this scope's player list; fall back to the global one
            name = self._player_names(None).get(player_id)
            if name is None and profile.aggregate.games_played == 0:
                raise LookupError(f"unknown player {player_id}")
            if name:
                profile = replace(profile, name=name)

        logger.debug(
            "Profile player=%s league=%s kind=%s: %d games, rank %s",
            player_id, league_id, kind.value if kind else "all",
            profile.aggregate.games_played, profile.rank,
        )
        return profile

    def recalculate_points(self, league_id: Optional[int], apply: bool = True) -> RecalculationResult:
        """
        Re-run the scoring rules over every stored game and report changes.

        Args:
            league_id: League to recalculate, None for all leagues
            apply: Write changed points back through the store. With
                   apply=False the result only reports what would change.

        Returns:
            RecalculationResult; `changed` is the number of placements whose
            points differ from the current rules. A second applied run
            reports zero changes.
        """
        games = self.store.fetch_games(league_id)
        result = recalculate_games(games, self.store.fetch_scoring_rules)

        if apply:
            for game_id, points in result.changes_by_game().items():
                self.store.save_placement_points(game_id, points)
            result.applied = True

        logger.info("Recalculation league=%s: %s", league_id, result.summary())
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _player_names(self, league_id: Optional[int]) -> dict[int, Optional[str]]:
        return {player.id: player.name for player in self.store.fetch_players(league_id)}

    def _check_limit(self, limit: Optional[int]) -> None:
        if limit is None:
            return
        if limit < 1 or limit > self.max_limit:
            raise ValueError(f"limit must be between 1 and {self.max_limit}, got {limit}")
