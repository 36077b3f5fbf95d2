"""
Scoring rule compilation.

League admins name their rules in plain text ("Placement 1st",
"Gold Objective", "Participation"). This module decides once, when a rule
is loaded, which kind of rule a name describes:

- "Placement N", with or without an ordinal suffix -> PlacementBonus(N)
- "<Tag> Objective(s)"                              -> ObjectiveBonus(tag)
- anything mentioning "participation"               -> Participation()
- everything else                                   -> UnrecognisedRule()

Objective tags are normalized the same way for rule names and for stored
objective payloads, so "Gold Objective", "gold" and "goldObjectives" all
refer to the tag "gold".
"""

import logging
import re
from typing import Iterable, Optional

from leagueboard.records.types import (
    GameKind,
    ObjectiveBonus,
    Participation,
    PlacementBonus,
    RuleKind,
    ScoringRule,
    UnrecognisedRule,
)

logger = logging.getLogger(__name__)

_PLACEMENT_RE = re.compile(r"^placement\s+(\d+)\s*(?:st|nd|rd|th)?$", re.IGNORECASE)
_OBJECTIVE_RULE_RE = re.compile(r"^(.+?)\s+objectives?$", re.IGNORECASE)
# camelCase payload keys such as "goldObjectives" or "silverObjective"
OBJECTIVE_KEY_RE = re.compile(r"^([a-z][a-z0-9_]*?)_?objectives?$", re.IGNORECASE)


def ordinal(n: int) -> str:
    """Format an integer with its English ordinal suffix (1st, 2nd, 11th, 23rd)."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def objective_tag(name: str) -> str:
    """
    Normalize an objective name or payload key to its tag.

    Examples:
        objective_tag("Gold Objective")   # → "gold"
        objective_tag("goldObjectives")   # → "gold"
        objective_tag("Silver")           # → "silver"
    """
    text = name.strip()
    match = _OBJECTIVE_RULE_RE.match(text) or OBJECTIVE_KEY_RE.match(text)
    if match:
        text = match.group(1)
    return text.strip().lower()


def compile_rule_kind(name: str) -> RuleKind:
    """
    Decide which kind of rule a rule name describes.

    Args:
        name: Rule name as entered by a league admin

    Returns:
        PlacementBonus, ObjectiveBonus, Participation or UnrecognisedRule
    """
    text = (name or "").strip()

    match = _PLACEMENT_RE.match(text)
    if match:
        place = int(match.group(1))
        if place >= 1:
            return PlacementBonus(place=place)
        return UnrecognisedRule()

    if "participation" in text.lower():
        return Participation()

    match = _OBJECTIVE_RULE_RE.match(text)
    if match:
        return ObjectiveBonus(tag=objective_tag(match.group(1)))

    logger.debug("Scoring rule %r matches no known pattern; it will score nothing", name)
    return UnrecognisedRule()


def build_rule(
    name: str,
    points: int,
    league_id: Optional[int] = None,
    game_kind: Optional[GameKind] = None,
    active: bool = True,
    description: Optional[str] = None,
) -> ScoringRule:
    """Create a ScoringRule with its kind compiled from the name."""
    return ScoringRule(
        league_id=league_id,
        game_kind=game_kind,
        name=name,
        points=int(points),
        kind=compile_rule_kind(name),
        active=active,
        description=description,
    )


def active_rules(rules: Iterable[ScoringRule]) -> list[ScoringRule]:
    """Return only the active rules, preserving order."""
    return [rule for rule in rules if rule.active]
