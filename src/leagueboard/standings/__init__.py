"""
Standings module.

Folds a league's games into per-player results and the three views built
from them:
- aggregator: Per-player totals and chronological histories
- ranking: Deterministic ordering with strict ordinal ranks and trend
- rating: Elo-like rating, win streaks and recent form
- character: RPG-style character sheets (stats, level/XP, achievements)
- leaderboard: Leaderboard rows combining ranking and rating
- profile: One player's totals, rank, form and latest games
- service: StandingsService, reading from a RecordStore
"""

from leagueboard.standings.aggregator import (
    GameResult,
    PlayerAggregate,
    aggregate_games,
    collect_histories,
)
from leagueboard.standings.ranking import RankedPlayer, rank_aggregates
from leagueboard.standings.rating import (
    FormSummary,
    best_streak,
    current_streak,
    elo_rating,
    recent_form,
    summarise_form,
)
from leagueboard.standings.character import (
    CharacterSheet,
    StatBlock,
    build_character_sheets,
    derive_character_sheet,
    stat_from_ratio,
)
from leagueboard.standings.leaderboard import LeaderboardEntry, build_leaderboard
from leagueboard.standings.profile import PlayerProfile, build_player_profile
from leagueboard.standings.service import StandingsService

__all__ = [
    "GameResult",
    "PlayerAggregate",
    "aggregate_games",
    "collect_histories",
    "RankedPlayer",
    "rank_aggregates",
    "FormSummary",
    "elo_rating",
    "current_streak",
    "best_streak",
    "recent_form",
    "summarise_form",
    "CharacterSheet",
    "StatBlock",
    "stat_from_ratio",
    "derive_character_sheet",
    "build_character_sheets",
    "LeaderboardEntry",
    "build_leaderboard",
    "PlayerProfile",
    "build_player_profile",
    "StandingsService",
]
