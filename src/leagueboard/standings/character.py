"""
Character sheets: RPG-style presentation of league performance.

Each player's aggregate is mapped onto five stats in the classic 8-20
range, a level/XP track and a set of achievement badges. The mapping is
purely presentational; it never feeds back into points or rankings.

Stat formula:
    pct  = clamp(value / max * 100, 0, 100)
    stat = 8 + round(12 * pct / 100)

Stats (value / max):
- power:         total points / 300
- consistency:   (100 - |win% - 60|) / 60
- victory_rate:  win% / 100
- adaptability:  (games*2 - |avg placement - 2.5|*10) / (games*2)
- experience:    games*10 / 120

Levels: 10 XP per point, a level every 200 XP, starting at level 1.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional

from leagueboard.constants import (
    ADAPTABILITY_TARGET_PLACEMENT,
    CONSISTENCY_TARGET_WIN_RATE,
    DEFAULT_ACHIEVEMENT,
    STAT_MAX,
    STAT_MAXIMUMS,
    STAT_MIN,
    UNKNOWN_PLAYER_NAME,
    XP_PER_LEVEL,
    XP_PER_POINT,
)
from leagueboard.standings.aggregator import PlayerAggregate
from leagueboard.standings.rating import round_half_up


# (badge, predicate(aggregate, level)) in display order
ACHIEVEMENTS: tuple[tuple[str, Callable[[PlayerAggregate, int], bool]], ...] = (
    ("Unstoppable", lambda agg, level: agg.wins >= 10),
    ("Gold Hunter", lambda agg, level: agg.objective_count("gold") >= 5),
    ("Dominator", lambda agg, level: agg.win_rate * 100 >= 75),
    ("Veteran", lambda agg, level: agg.games_played >= 15),
    ("Point Master", lambda agg, level: agg.total_points >= 200),
    ("First Blood", lambda agg, level: agg.games_played > 0 and agg.average_placement <= 1.5),
    ("Silver Collector", lambda agg, level: agg.objective_count("silver") >= 20),
    ("Level Master", lambda agg, level: level >= 10),
)


def stat_from_ratio(value: float, maximum: float) -> int:
    """
    Map value/maximum onto the 8-20 stat range.

    A non-positive maximum maps to the minimum stat. Out-of-range ratios
    are clamped, so the result is always an integer in [8, 20].

    Examples:
        stat_from_ratio(150, 300)   # → 14
        stat_from_ratio(999, 300)   # → 20
        stat_from_ratio(-5, 60)     # → 8
    """
    if maximum <= 0:
        pct = 0.0
    else:
        pct = min(100.0, max(0.0, (value / maximum) * 100))
    stat = STAT_MIN + round_half_up((STAT_MAX - STAT_MIN) * pct / 100)
    return min(STAT_MAX, max(STAT_MIN, stat))


@dataclass(frozen=True)
class StatBlock:
    """The five character sheet stats, each in [8, 20]."""
    power: int
    consistency: int
    victory_rate: int
    adaptability: int
    experience: int

    def to_dict(self) -> dict:
        return {
            "power": self.power,
            "consistency": self.consistency,
            "victoryRate": self.victory_rate,
            "adaptability": self.adaptability,
            "experience": self.experience,
        }


@dataclass(frozen=True)
class CharacterSheet:
    """A player's character sheet."""
    player_id: int
    name: str
    total_points: int
    games_played: int
    wins: int
    losses: int
    gold_objectives: int
    silver_objectives: int
    stats: StatBlock
    xp: int
    level: int
    next_level_xp: int
    win_rate: float
    average_placement: float
    achievements: tuple[str, ...]
    rank: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.player_id,
            "playerName": self.name,
            "rank": self.rank,
            "level": self.level,
            "totalPoints": self.total_points,
            "gamesPlayed": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "goldObjectives": self.gold_objectives,
            "silverObjectives": self.silver_objectives,
            "stats": self.stats.to_dict(),
            "xp": self.xp,
            "nextLevelXp": self.next_level_xp,
            "winRate": self.win_rate,
            "averagePlacement": self.average_placement,
            "achievements": list(self.achievements),
        }


def derive_stats(aggregate: PlayerAggregate) -> StatBlock:
    """Compute the five stats from an aggregate."""
    games = aggregate.games_played
    win_pct = aggregate.win_rate * 100
    average_placement = aggregate.average_placement

    return StatBlock(
        power=stat_from_ratio(aggregate.total_points, STAT_MAXIMUMS["power"]),
        consistency=stat_from_ratio(
            100 - abs(win_pct - CONSISTENCY_TARGET_WIN_RATE), STAT_MAXIMUMS["consistency"]
        ),
        victory_rate=stat_from_ratio(win_pct, STAT_MAXIMUMS["victory_rate"]),
        adaptability=stat_from_ratio(
            games * 2 - abs(average_placement - ADAPTABILITY_TARGET_PLACEMENT) * 10,
            games * 2,
        ),
        experience=stat_from_ratio(games * 10, STAT_MAXIMUMS["experience"]),
    )


def level_for_points(total_points: int) -> tuple[int, int, int]:
    """
    Compute (xp, level, next_level_xp) for a points total.

    Examples:
        level_for_points(0)    # → (0, 1, 200)
        level_for_points(45)   # → (450, 3, 600)
    """
    xp = total_points * XP_PER_POINT
    level = max(1, xp // XP_PER_LEVEL + 1)
    return xp, level, level * XP_PER_LEVEL


def achievements_for(aggregate: PlayerAggregate, level: int) -> tuple[str, ...]:
    """
    Evaluate every achievement threshold independently.

    Badges are additive; a player who earns none gets "Rising Star".
    """
    earned = tuple(badge for badge, earns in ACHIEVEMENTS if earns(aggregate, level))
    return earned or (DEFAULT_ACHIEVEMENT,)


def derive_character_sheet(
    aggregate: PlayerAggregate,
    name: Optional[str] = None,
    rank: Optional[int] = None,
) -> CharacterSheet:
    """
    Build a character sheet from an aggregate.

    Missing inputs default to zero: a player with no games gets level 1
    and the "Rising Star" badge. Their stats still follow the formulas, so
    consistency (distance from a 60% win rate) is not at the minimum.
    """
    xp, level, next_level_xp = level_for_points(aggregate.total_points)
    return CharacterSheet(
        player_id=aggregate.player_id,
        name=name or UNKNOWN_PLAYER_NAME,
        total_points=aggregate.total_points,
        games_played=aggregate.games_played,
        wins=aggregate.wins,
        losses=aggregate.losses,
        gold_objectives=aggregate.objective_count("gold"),
        silver_objectives=aggregate.objective_count("silver"),
        stats=derive_stats(aggregate),
        xp=xp,
        level=level,
        next_level_xp=next_level_xp,
        win_rate=aggregate.win_rate * 100,
        average_placement=aggregate.average_placement,
        achievements=achievements_for(aggregate, level),
        rank=rank,
    )


def build_character_sheets(
    aggregates: Iterable[PlayerAggregate],
    names: Mapping[int, Optional[str]],
) -> list[CharacterSheet]:
    """
    Derive and rank character sheets.

    Sheets are ordered by total points (higher first), then average
    placement (lower first), and numbered 1..N in that order.
    """
    ordered = sorted(aggregates, key=lambda agg: (-agg.total_points, agg.average_placement))
    return [
        derive_character_sheet(agg, name=names.get(agg.player_id), rank=index)
        for index, agg in enumerate(ordered, start=1)
    ]
