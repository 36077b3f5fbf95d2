"""
Points recalculation.

When a league changes its scoring rules, the points already stored on past
games go stale. Recalculation re-runs the evaluator over every game with the
current rules and reports which placements would change. Applying the
changes is the caller's decision (see StandingsService.recalculate_points).

Running it twice in a row is idempotent: once the changes from the first run
are applied, the second run finds nothing to change.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from leagueboard.records.types import GameKind, GameRecord, ScoringRule
from leagueboard.scoring.evaluator import score_game

logger = logging.getLogger(__name__)

# (league_id, game_kind) -> active rules
RuleLookup = Callable[[Optional[int], GameKind], list[ScoringRule]]


@dataclass(frozen=True)
class PointsChange:
    """One placement whose stored points differ from the current rules."""
    game_id: int
    player_id: int
    old_points: int
    new_points: int

    @property
    def delta(self) -> int:
        return self.new_points - self.old_points


@dataclass
class RecalculationResult:
    """
    Outcome of a recalculation pass.

    Attributes:
        examined: Placements evaluated
        changes: Placements whose points differ from the current rules
        skipped_games: Games not evaluated (unknown game kind)
        applied: Whether the changes were written back
    """
    examined: int = 0
    changes: list[PointsChange] = field(default_factory=list)
    skipped_games: int = 0
    applied: bool = False

    @property
    def changed(self) -> int:
        """Number of placements whose points changed."""
        return len(self.changes)

    def changes_by_game(self) -> dict[int, dict[int, int]]:
        """Group changes as game_id → {player_id: new_points}."""
        grouped: dict[int, dict[int, int]] = {}
        for change in self.changes:
            grouped.setdefault(change.game_id, {})[change.player_id] = change.new_points
        return grouped

    def summary(self) -> str:
        verb = "Updated" if self.applied else "Would update"
        return (
            f"{verb} {self.changed} of {self.examined} placements"
            f" ({self.skipped_games} games skipped)"
        )


def diff_game_points(game: GameRecord, rules: Iterable[ScoringRule]) -> list[PointsChange]:
    """Return the placements of one game whose stored points differ from the rules."""
    scored = score_game(game, rules)
    changes = []
    for placement in game.placements:
        new_points = scored[placement.player_id].total
        if new_points != placement.points:
            changes.append(PointsChange(
                game_id=game.id,
                player_id=placement.player_id,
                old_points=placement.points,
                new_points=new_points,
            ))
    return changes


def recalculate_games(games: Iterable[GameRecord], rules_for: RuleLookup) -> RecalculationResult:
    """
    Diff every game's stored points against the current rules.

    Rules are looked up once per (league, game kind) in the pass. Games of
    unknown kind are skipped and keep their stored points.

    Args:
        games: Games to check
        rules_for: Callable returning the active rules for a league and kind

    Returns:
        RecalculationResult (not applied)
    """
    result = RecalculationResult()
    rule_sets: dict[tuple[Optional[int], GameKind], list[ScoringRule]] = {}

    for game in games:
        if game.kind is None:
            logger.info("Skipping game %s with unknown kind during recalculation", game.id)
            result.skipped_games += 1
            continue

        key = (game.league_id, game.kind)
        if key not in rule_sets:
            rule_sets[key] = list(rules_for(game.league_id, game.kind))

        result.examined += len(game.placements)
        result.changes.extend(diff_game_points(game, rule_sets[key]))

    return result
