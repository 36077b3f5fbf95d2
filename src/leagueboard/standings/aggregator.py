"""
Aggregation of game records into per-player totals.

A single forward fold over a scope's games. Each placement adds its stored
points, one game played, a win (place 1) or a loss (any other place), its
place to the placement total and its objective counts, and moves the
player's last-active date forward. Only sums and a max are used, so the
result does not depend on the order games are folded in.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from leagueboard.records.types import GameRecord


@dataclass
class PlayerAggregate:
    """
    Cumulative totals for one player over a set of games.

    Derived on demand and never persisted; two passes over the same games
    produce equal aggregates.
    """
    player_id: int
    total_points: int = 0
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    last_active: Optional[date] = None
    placement_total: int = 0
    objectives: dict[str, int] = field(default_factory=dict)

    @property
    def win_rate(self) -> float:
        """Fraction of games won; 0.0 when no games were played."""
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played

    @property
    def average_placement(self) -> float:
        """Mean finishing place; 0.0 when no games were played."""
        if self.games_played == 0:
            return 0.0
        return self.placement_total / self.games_played

    def objective_count(self, tag: str) -> int:
        return self.objectives.get(tag, 0)


@dataclass(frozen=True)
class GameResult:
    """One game in a player's history."""
    game_id: int
    played_on: Optional[date]
    place: int
    points: int

    @property
    def won(self) -> bool:
        return self.place == 1


def aggregate_games(
    games: Iterable[GameRecord],
    player_ids: Optional[Iterable[int]] = None,
    track_only: bool = False,
) -> dict[int, PlayerAggregate]:
    """
    Fold games into per-player aggregates.

    Args:
        games: Games in any order
        player_ids: Players to seed with zero totals so they appear even
                    without games. Players found in placements but not
                    listed here are still aggregated unless track_only.
        track_only: Ignore placements of players not in player_ids

    Returns:
        Mapping of player_id → PlayerAggregate. Seeded players come first
        in seed order, then newly seen players in order of appearance.
    """
    aggregates: dict[int, PlayerAggregate] = {}
    for player_id in player_ids or ():
        aggregates.setdefault(player_id, PlayerAggregate(player_id=player_id))

    for game in games:
        for placement in game.placements:
            agg = aggregates.get(placement.player_id)
            if agg is None:
                if track_only:
                    continue
                agg = aggregates[placement.player_id] = PlayerAggregate(player_id=placement.player_id)

            agg.total_points += placement.points
            agg.games_played += 1
            agg.placement_total += placement.place
            if placement.won:
                agg.wins += 1
            else:
                agg.losses += 1

            if game.played_on is not None and (
                agg.last_active is None or game.played_on > agg.last_active
            ):
                agg.last_active = game.played_on

            for tag, count in game.objective_counts(placement.player_id).items():
                agg.objectives[tag] = agg.objectives.get(tag, 0) + count

    return aggregates


def collect_histories(
    games: Iterable[GameRecord],
    player_ids: Optional[Iterable[int]] = None,
    track_only: bool = False,
) -> dict[int, list[GameResult]]:
    """
    Build each player's chronological result history.

    Results are ordered by (date, game id) with undated games first, so
    streaks and form read the same regardless of fetch order. With
    track_only, only the seeded players are collected.

    Returns:
        Mapping of player_id → list of GameResult, oldest first
    """
    histories: dict[int, list[GameResult]] = {pid: [] for pid in player_ids or ()}

    for game in games:
        for placement in game.placements:
            if track_only and placement.player_id not in histories:
                continue
            histories.setdefault(placement.player_id, []).append(GameResult(
                game_id=game.id,
                played_on=game.played_on,
                place=placement.place,
                points=placement.points,
            ))

    for results in histories.values():
        results.sort(key=lambda r: (r.played_on is not None, r.played_on or date.min, r.game_id))
    return histories
