"""
Scoring rule evaluation.

Turns one player's raw result in a game (finishing place plus objective
counts) into league points, using the active rules for that game's league
and kind.

The evaluation:
  total = sum(rule.points * objective_count[tag]  for ObjectiveBonus rules)
        + sum(rule.points                         for PlacementBonus(place) rules)

If the total is zero, the participation fallback replaces it: the points of
the league's Participation rule when it has one, otherwise a floor of 1 point.
A league that sets "Placement 1st" to 0 therefore still awards the winner
1 point. The fallback is intentional and always applied.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from leagueboard.constants import PARTICIPATION_FLOOR_POINTS
from leagueboard.records.types import (
    GameRecord,
    ObjectiveBonus,
    Participation,
    PlacementBonus,
    ScoringRule,
)

PARTICIPATION_LINE = "Participation"


@dataclass(frozen=True)
class BreakdownLine:
    """One rule's contribution to a placement's points."""
    rule: str
    points: int
    count: Optional[int] = None

    def to_dict(self) -> dict:
        payload = {"rule": self.rule, "points": self.points}
        if self.count is not None:
            payload["count"] = self.count
        return payload


@dataclass
class PointsBreakdown:
    """
    Result of evaluating the rules for one placement.

    Attributes:
        total: Points awarded
        lines: Contributing rules (objective lines carry the claimed count)
        used_fallback: Whether the participation fallback set the total
    """
    total: int = 0
    lines: list[BreakdownLine] = field(default_factory=list)
    used_fallback: bool = False

    def to_dict(self) -> dict:
        return {
            "totalPoints": self.total,
            "breakdown": [line.to_dict() for line in self.lines],
        }


def evaluate_placement(
    place: int,
    objective_counts: Mapping[str, int],
    rules: Iterable[ScoringRule],
) -> PointsBreakdown:
    """
    Compute one player's points for one game.

    Args:
        place: The player's finishing position (1 = winner)
        objective_counts: Claimed objectives keyed by tag
        rules: Scoring rules for the game's league and kind (inactive
               rules are ignored)

    Returns:
        PointsBreakdown with the total and contributing rules

    Example:
        # 2nd place with one silver objective under the commander defaults
        evaluate_placement(2, {"silver": 1}, rules).total  # → 1 + 2 = 3
    """
    result = PointsBreakdown()
    participation_rule: Optional[ScoringRule] = None

    for rule in rules:
        if not rule.active:
            continue
        kind = rule.kind

        if isinstance(kind, ObjectiveBonus):
            count = int(objective_counts.get(kind.tag, 0))
            points = rule.points * count
            if points:
                result.lines.append(BreakdownLine(rule.name, points, count))
            result.total += points
        elif isinstance(kind, PlacementBonus):
            if kind.place == place:
                if rule.points:
                    result.lines.append(BreakdownLine(rule.name, rule.points))
                result.total += rule.points
        elif isinstance(kind, Participation):
            if participation_rule is None:
                participation_rule = rule
        # UnrecognisedRule contributes nothing

    if result.total == 0:
        if participation_rule is not None:
            fallback = participation_rule.points
            label = participation_rule.name
        else:
            fallback = PARTICIPATION_FLOOR_POINTS
            label = PARTICIPATION_LINE
        result.total = fallback
        result.used_fallback = True
        if fallback:
            result.lines.append(BreakdownLine(label, fallback))

    return result


def score_game(game: GameRecord, rules: Iterable[ScoringRule]) -> dict[int, PointsBreakdown]:
    """
    Evaluate every placement in a game.

    A game whose kind is unknown scores zero for every placement; it is
    skipped rather than failing the league computation.

    Returns:
        Mapping of player_id → PointsBreakdown
    """
    if game.kind is None:
        return {placement.player_id: PointsBreakdown() for placement in game.placements}

    rules = list(rules)
    return {
        placement.player_id: evaluate_placement(
            placement.place,
            game.objective_counts(placement.player_id),
            rules,
        )
        for placement in game.placements
    }
