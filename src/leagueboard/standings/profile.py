"""
Single-player profiles.

A profile is one player's view of a scope: their own totals and history,
built with track_only so nobody else's placements are folded, plus their
position on the scope's full leaderboard.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from leagueboard.constants import RECENT_GAMES_WINDOW, UNKNOWN_PLAYER_NAME
from leagueboard.records.types import GameRecord
from leagueboard.standings.aggregator import (
    GameResult,
    PlayerAggregate,
    aggregate_games,
    collect_histories,
)
from leagueboard.standings.leaderboard import win_rate_percent
from leagueboard.standings.ranking import rank_aggregates
from leagueboard.standings.rating import FormSummary, summarise_form


@dataclass(frozen=True)
class PlayerProfile:
    """
    One player's standing, form and latest games.

    rank is None when the player is not on the scope's leaderboard
    (not seeded and without games in scope).
    """
    player_id: int
    name: str
    aggregate: PlayerAggregate
    rank: Optional[int]
    win_rate: float  # percent, one decimal place
    form: FormSummary
    recent_games: tuple[GameResult, ...] = ()  # newest first

    def to_dict(self) -> dict:
        agg = self.aggregate
        return {
            "playerId": self.player_id,
            "name": self.name,
            "rank": self.rank,
            "points": agg.total_points,
            "gamesPlayed": agg.games_played,
            "wins": agg.wins,
            "losses": agg.losses,
            "winRate": self.win_rate,
            "averagePlacement": agg.average_placement,
            "lastActive": agg.last_active.isoformat() if agg.last_active else None,
            "eloRating": self.form.elo_rating,
            "currentStreak": self.form.current_streak,
            "bestStreak": self.form.best_streak,
            "recentForm": list(self.form.recent_form),
            "recentGames": [
                {
                    "gameId": r.game_id,
                    "playedOn": r.played_on.isoformat() if r.played_on else None,
                    "place": r.place,
                    "points": r.points,
                }
                for r in self.recent_games
            ],
        }


def build_player_profile(
    games: Iterable[GameRecord],
    player_id: int,
    names: Mapping[int, Optional[str]],
    recent: int = RECENT_GAMES_WINDOW,
) -> PlayerProfile:
    """
    Build a profile for one player.

    Args:
        games: Games in scope (already filtered by league and kind)
        player_id: Player to profile
        names: player_id → display name for the scope's seeded players;
               they form the leaderboard the rank is read from
        recent: How many of the latest games to list

    Returns:
        PlayerProfile. A player without games gets zero totals.
    """
    games = list(games)

    aggregate = aggregate_games(games, [player_id], track_only=True)[player_id]
    history = collect_histories(games, [player_id], track_only=True)[player_id]

    rank = None
    for ranked in rank_aggregates(aggregate_games(games, names.keys()).values()):
        if ranked.aggregate.player_id == player_id:
            rank = ranked.rank
            break

    latest = tuple(reversed(history[-recent:])) if recent > 0 else ()

    return PlayerProfile(
        player_id=player_id,
        name=names.get(player_id) or UNKNOWN_PLAYER_NAME,
        aggregate=aggregate,
        rank=rank,
        win_rate=win_rate_percent(aggregate.wins, aggregate.games_played),
        form=summarise_form(history),
        recent_games=latest,
    )
