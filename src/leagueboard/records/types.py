"""
Typed league records.

These are the decoded shapes the standings engine works with. Stored games
keep their placements and objective claims as JSON; the record store adapters
decode them into these dataclasses once, so nothing past the adapter ever
touches serialized text.

Rule kinds are tagged records rather than names: a scoring rule called
"Placement 2nd" is loaded as PlacementBonus(place=2) and evaluated by kind,
never by re-parsing its name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Union


class GameKind(str, enum.Enum):
    """The closed set of game formats a league records."""

    COMMANDER = "commander"
    DRAFT = "draft"
    STANDARD = "standard"

    @classmethod
    def coerce(cls, value: Union["GameKind", str, None]) -> Optional["GameKind"]:
        """
        Normalize a caller-supplied game kind filter.

        None, "" and "all" mean no filter. Strings are matched
        case-insensitively against the enum values.

        Raises:
            ValueError: If the value names no known game kind
        """
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("", "all"):
            return None
        try:
            return cls(text)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"game kind must be one of: all, {valid} (got {value!r})") from None

    @classmethod
    def from_stored(cls, value: Optional[str]) -> Optional["GameKind"]:
        """Decode a stored kind, returning None for kinds this engine does not know."""
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# =============================================================================
# Games
# =============================================================================

@dataclass(frozen=True)
class Placement:
    """
    One player's result within one game.

    Attributes:
        player_id: Player who finished at this place
        place: 1-based finishing position (1 = winner; ties allowed)
        points: Rule-evaluated points awarded for this game (>= 0)
        objectives: Objective counts recorded on the placement itself,
                    keyed by objective tag (e.g. {"gold": 1, "silver": 2})

    objectives is stored as a read-only mapping and left out of the hash,
    so placements hash by (player_id, place, points).
    """
    player_id: int
    place: int
    points: int = 0
    objectives: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "objectives", MappingProxyType(dict(self.objectives)))

    @property
    def won(self) -> bool:
        return self.place == 1


@dataclass(frozen=True)
class GameRecord:
    """
    A single played game (a pod or match) in a league.

    kind is None when the stored game kind is not one this engine knows;
    such games score zero and never match a kind filter.

    objective_claims is a read-only mapping and is not part of the hash.
    """
    id: int
    league_id: Optional[int]
    kind: Optional[GameKind]
    played_on: Optional[date]
    placements: tuple[Placement, ...] = ()
    players: tuple[int, ...] = ()
    objective_claims: Mapping[str, tuple[int, ...]] = field(default_factory=dict, hash=False)
    notes: Optional[str] = None

    def __post_init__(self):
        claims = {tag: tuple(claimants) for tag, claimants in self.objective_claims.items()}
        object.__setattr__(self, "objective_claims", MappingProxyType(claims))

    def placement_for(self, player_id: int) -> Optional[Placement]:
        """Return the player's placement, or None if they have none in this game."""
        for placement in self.placements:
            if placement.player_id == player_id:
                return placement
        return None

    def objective_counts(self, player_id: int) -> dict[str, int]:
        """
        Total objective counts for a player in this game.

        Combines counts stored on the player's placement with game-level
        claims naming the player.
        """
        counts: dict[str, int] = {}
        placement = self.placement_for(player_id)
        if placement is not None:
            for tag, count in placement.objectives.items():
                counts[tag] = counts.get(tag, 0) + count
        for tag, claimants in self.objective_claims.items():
            claimed = sum(1 for claimant in claimants if claimant == player_id)
            if claimed:
                counts[tag] = counts.get(tag, 0) + claimed
        return counts


# =============================================================================
# Scoring rules
# =============================================================================

@dataclass(frozen=True)
class PlacementBonus:
    """Awards the rule's points once to a player finishing at `place`."""
    place: int


@dataclass(frozen=True)
class ObjectiveBonus:
    """Awards the rule's points once per claimed objective with this tag."""
    tag: str


@dataclass(frozen=True)
class Participation:
    """Replaces a zero total with the rule's points."""


@dataclass(frozen=True)
class UnrecognisedRule:
    """A rule whose name matches no known pattern; it never contributes."""


RuleKind = Union[PlacementBonus, ObjectiveBonus, Participation, UnrecognisedRule]


@dataclass(frozen=True)
class ScoringRule:
    """
    A named point rule for one (league, game kind).

    Rule names are unique among active rules for a given league and kind.
    """
    league_id: Optional[int]
    game_kind: Optional[GameKind]
    name: str
    points: int
    kind: RuleKind
    active: bool = True
    description: Optional[str] = None


# =============================================================================
# Players
# =============================================================================

@dataclass(frozen=True)
class PlayerRef:
    """A player known to the record store, used to seed and label standings."""
    id: int
    name: Optional[str] = None
