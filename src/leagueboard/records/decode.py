"""
Decoding of stored game payloads into typed records.

Games are stored with three JSON payloads, which older rows may hold as
serialized text and newer rows as native JSON:

- players:     [12, 15, 19, 23]  (ids, or dicts with an id key)
- placements:  [{"playerId": 12, "place": 1, "points": 3,
                 "objectives": {"silver": 1}}, ...]
- objectives:  {"gold": 12, "silver": [15, 19]}  (tag -> claimant(s)), or the
                commander form {"goldRoll": 3, "claims": {"a": {"playerId": 15}}}
                where the player finishing at the rolled place earns one gold
                objective and each claim is one silver objective

Placement entries also accept the legacy keys "player_id"/"id",
"placement", "goldObjectives"/"silverObjectives" and "goldObjective"
(a boolean).

Bad data is absorbed here, one entry at a time: a malformed placement is
dropped (other players in the same game keep their results) and an
unparsable blob decodes as empty. Every drop is logged.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import Any, Optional, Sequence

from leagueboard.records.types import GameKind, GameRecord, Placement
from leagueboard.records.rules import OBJECTIVE_KEY_RE, objective_tag

logger = logging.getLogger(__name__)

_PLAYER_ID_KEYS = ("player_id", "playerId", "id")
_PLACE_KEYS = ("place", "placement")
_RESERVED_PLACEMENT_KEYS = frozenset(_PLAYER_ID_KEYS + _PLACE_KEYS + ("points", "objectives"))
_INTEGER_RE = re.compile(r"-?\d+", re.ASCII)

# Commander payload keys, matched case-insensitively
_GOLD_ROLL_KEY = "goldroll"
_CLAIMS_KEY = "claims"
_GOLD_TAG = "gold"
_SILVER_TAG = "silver"


class RecordDecodeError(ValueError):
    """Raised when a stored payload cannot be decoded."""
    pass


def load_json(raw: Any, default: Any) -> Any:
    """
    Return the decoded form of a payload that may be JSON text.

    None decodes to `default`; non-text values are returned unchanged.

    Raises:
        RecordDecodeError: If text is not valid JSON
    """
    if raw is None:
        return default
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise RecordDecodeError(f"invalid JSON payload: {e}") from e
    return raw


def coerce_player_id(value: Any) -> int:
    """
    Coerce a stored player reference to an integer id.

    Accepts ints, digit strings, and dicts carrying one of the id keys.

    Raises:
        RecordDecodeError: If no usable id is present
    """
    if isinstance(value, dict):
        for key in _PLAYER_ID_KEYS:
            if value.get(key) is not None:
                return coerce_player_id(value[key])
        raise RecordDecodeError(f"no player id in {value!r}")
    return _coerce_int(value, "player id")


def _coerce_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise RecordDecodeError(f"{what} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        return int(value.strip())
    raise RecordDecodeError(f"{what} must be an integer, got {value!r}")


def _coerce_count(value: Any, what: str) -> int:
    """Objective counts: booleans count as 0/1, None as 0."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    count = _coerce_int(value, what)
    if count < 0:
        raise RecordDecodeError(f"{what} cannot be negative, got {count}")
    return count


def decode_placement(entry: Any) -> Placement:
    """
    Decode one placement entry.

    Raises:
        RecordDecodeError: If the player id or place is missing or invalid,
            points are negative, or objective counts are unusable
    """
    if not isinstance(entry, dict):
        raise RecordDecodeError(f"placement must be an object, got {entry!r}")

    player_id = coerce_player_id(entry)

    raw_place = next((entry[k] for k in _PLACE_KEYS if entry.get(k) is not None), None)
    if raw_place is None:
        raise RecordDecodeError(f"placement for player {player_id} has no place")
    place = _coerce_int(raw_place, "place")
    if place < 1:
        raise RecordDecodeError(f"place must be >= 1, got {place}")

    raw_points = entry.get("points")
    points = 0 if raw_points is None else _coerce_int(raw_points, "points")
    if points < 0:
        raise RecordDecodeError(f"points cannot be negative, got {points}")

    objectives: dict[str, int] = {}
    nested = entry.get("objectives")
    if nested is not None:
        if not isinstance(nested, dict):
            raise RecordDecodeError(f"objectives must be an object, got {nested!r}")
        for key, value in nested.items():
            tag = objective_tag(str(key))
            objectives[tag] = objectives.get(tag, 0) + _coerce_count(value, f"objective {key!r}")

    # Legacy flat keys: goldObjectives, silverObjectives, goldObjective
    for key, value in entry.items():
        if key in _RESERVED_PLACEMENT_KEYS or not OBJECTIVE_KEY_RE.match(key):
            continue
        tag = objective_tag(key)
        objectives[tag] = objectives.get(tag, 0) + _coerce_count(value, f"objective {key!r}")

    return Placement(
        player_id=player_id,
        place=place,
        points=points,
        objectives={tag: count for tag, count in objectives.items() if count},
    )


def decode_placements(raw: Any, game_id: Optional[int] = None) -> tuple[Placement, ...]:
    """
    Decode a game's placement list, dropping malformed entries.

    Each dropped entry is logged; the remaining placements are kept so one
    bad row only costs the affected player this game's contribution.
    """
    try:
        entries = load_json(raw, [])
    except RecordDecodeError as e:
        logger.warning("Game %s: unreadable placements, treating as empty: %s", game_id, e)
        return ()
    if not isinstance(entries, list):
        logger.warning("Game %s: placements is not a list (%s), treating as empty",
                       game_id, type(entries).__name__)
        return ()

    placements: list[Placement] = []
    for entry in entries:
        try:
            placements.append(decode_placement(entry))
        except RecordDecodeError as e:
            logger.warning("Game %s: skipping malformed placement: %s", game_id, e)
    return tuple(placements)


def decode_players(raw: Any, game_id: Optional[int] = None) -> tuple[int, ...]:
    """Decode a game's participant list, dropping entries without an id."""
    try:
        entries = load_json(raw, [])
    except RecordDecodeError as e:
        logger.warning("Game %s: unreadable player list, treating as empty: %s", game_id, e)
        return ()
    if not isinstance(entries, list):
        logger.warning("Game %s: player list is not a list, treating as empty", game_id)
        return ()

    players: list[int] = []
    for entry in entries:
        try:
            players.append(coerce_player_id(entry))
        except RecordDecodeError as e:
            logger.warning("Game %s: skipping player entry: %s", game_id, e)
    return tuple(players)


def _decode_claimants(value: Any) -> tuple[int, ...]:
    """
    Decode the claimant side of an objective claim.

    A dict without any id key is an unclaimed objective (for example
    {"roll": 5, "claimed": false}) and yields no claimants.
    """
    if value is None or value is False:
        return ()
    if isinstance(value, list):
        claimants: list[int] = []
        for item in value:
            claimants.extend(_decode_claimants(item))
        return tuple(claimants)
    if isinstance(value, dict):
        if not any(value.get(key) is not None for key in _PLAYER_ID_KEYS):
            return ()
    return (coerce_player_id(value),)


def _gold_roll_claimants(value: Any, placements: Sequence[Placement]) -> tuple[int, ...]:
    """Players whose place equals the rolled gold place; a falsy roll awards nothing."""
    if not value:
        return ()
    place = _coerce_int(value, "gold roll")
    return tuple(p.player_id for p in placements if p.place == place)


def _claim_list_claimants(value: Any) -> tuple[int, ...]:
    """Claimants of a commander "claims" block, one entry per claim."""
    if isinstance(value, dict):
        entries = list(value.values())
    elif isinstance(value, list):
        entries = value
    else:
        raise RecordDecodeError(f"claims must be an object or list, got {value!r}")

    claimants: list[int] = []
    for entry in entries:
        claimants.extend(_decode_claimants(entry))
    return tuple(claimants)


def decode_objective_claims(
    raw: Any,
    game_id: Optional[int] = None,
    placements: Sequence[Placement] = (),
) -> dict[str, tuple[int, ...]]:
    """
    Decode a game's objective claim payload into tag → claimant ids.

    A player appears once per claim, so a player who claimed two silver
    objectives appears twice under "silver". The commander keys "goldRoll"
    and "claims" become "gold" and "silver" claims; resolving the gold
    roll needs the game's placements.
    """
    try:
        payload = load_json(raw, {})
    except RecordDecodeError as e:
        logger.warning("Game %s: unreadable objective claims, ignoring: %s", game_id, e)
        return {}
    if not isinstance(payload, dict):
        logger.warning("Game %s: objective claims is not an object, ignoring", game_id)
        return {}

    claims: dict[str, tuple[int, ...]] = {}
    for key, value in payload.items():
        lowered = str(key).lower()
        try:
            if lowered == _GOLD_ROLL_KEY:
                tag, claimants = _GOLD_TAG, _gold_roll_claimants(value, placements)
            elif lowered == _CLAIMS_KEY:
                tag, claimants = _SILVER_TAG, _claim_list_claimants(value)
            else:
                tag, claimants = objective_tag(str(key)), _decode_claimants(value)
        except RecordDecodeError as e:
            logger.warning("Game %s: skipping objective %r: %s", game_id, key, e)
            continue
        if claimants:
            claims[tag] = claims.get(tag, ()) + claimants
    return claims


def decode_game(
    game_id: int,
    league_id: Optional[int],
    kind: Optional[str],
    played_on: Optional[date],
    placements: Any = None,
    players: Any = None,
    objectives: Any = None,
    notes: Optional[str] = None,
) -> GameRecord:
    """
    Build a GameRecord from stored column values.

    An unknown game kind decodes as kind=None (logged); the game is kept so
    the rest of the league's history is unaffected.
    """
    game_kind = GameKind.from_stored(kind)
    if game_kind is None:
        logger.warning("Game %s: unknown game kind %r, it will score nothing", game_id, kind)

    if isinstance(played_on, datetime):
        played_on = played_on.date()

    decoded = decode_placements(placements, game_id)
    return GameRecord(
        id=game_id,
        league_id=league_id,
        kind=game_kind,
        played_on=played_on,
        placements=decoded,
        players=decode_players(players, game_id),
        objective_claims=decode_objective_claims(objectives, game_id, decoded),
        notes=notes,
    )
