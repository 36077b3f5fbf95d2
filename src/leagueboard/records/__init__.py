"""
League record module.

Typed game records and the adapters that load them:
- types: GameRecord, Placement, ScoringRule (with tagged rule kinds), PlayerRef
- rules: Compiles scoring rule names into tagged kinds when rules are loaded
- decode: Decoding of stored JSON payloads, absorbing malformed entries
- store: RecordStore protocol, SqlRecordStore, InMemoryRecordStore
- cache: Caller-owned fetch cache with explicit invalidation
"""

from leagueboard.records.types import (
    GameKind,
    GameRecord,
    ObjectiveBonus,
    Participation,
    Placement,
    PlacementBonus,
    PlayerRef,
    ScoringRule,
    UnrecognisedRule,
)
from leagueboard.records.rules import build_rule, compile_rule_kind, objective_tag, ordinal
from leagueboard.records.decode import RecordDecodeError, decode_game
from leagueboard.records.store import InMemoryRecordStore, RecordStore, SqlRecordStore
from leagueboard.records.cache import CachedRecordStore, RecordCache

__all__ = [
    "GameKind",
    "GameRecord",
    "Placement",
    "ScoringRule",
    "PlacementBonus",
    "ObjectiveBonus",
    "Participation",
    "UnrecognisedRule",
    "PlayerRef",
    "build_rule",
    "compile_rule_kind",
    "objective_tag",
    "ordinal",
    "RecordDecodeError",
    "decode_game",
    "RecordStore",
    "SqlRecordStore",
    "InMemoryRecordStore",
    "RecordCache",
    "CachedRecordStore",
]
