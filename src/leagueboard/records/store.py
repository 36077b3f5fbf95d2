"""
Record store adapters.

The standings engine reads league data through the RecordStore protocol:

    fetch_games(league_id, game_kind=None)    -> list[GameRecord]
    fetch_scoring_rules(league_id, game_kind) -> list[ScoringRule]  (active only)
    fetch_players(league_id)                  -> list[PlayerRef]
    save_placement_points(game_id, points)    -> None  (admin recalculation only)

A league_id of None means "every league". Two implementations live here:

- SqlRecordStore: reads the SQLAlchemy models in db/models.py and decodes
  their JSON payloads once, at this boundary
- InMemoryRecordStore: holds already-typed records (tests, fixtures, scripts)

Database errors are not caught here; an unreachable store is a hard failure
for the caller. Bad rows are absorbed by records/decode.py.
"""

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from leagueboard.records.decode import RecordDecodeError, coerce_player_id, decode_game, load_json
from leagueboard.records.types import GameKind, GameRecord, PlayerRef, ScoringRule
from leagueboard.records.rules import build_rule

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Read access to league records, plus the single points write-back."""

    def fetch_games(
        self, league_id: Optional[int], game_kind: Optional[GameKind] = None
    ) -> list[GameRecord]:
        ...

    def fetch_scoring_rules(
        self, league_id: Optional[int], game_kind: Optional[GameKind]
    ) -> list[ScoringRule]:
        ...

    def fetch_players(self, league_id: Optional[int]) -> list[PlayerRef]:
        ...

    def save_placement_points(self, game_id: int, points_by_player: Mapping[int, int]) -> None:
        ...


def _sort_key(game: GameRecord) -> tuple:
    # Undated games sort first, then by date, then by id
    return (game.played_on is not None, game.played_on or 0, game.id)


class SqlRecordStore:
    """
    RecordStore backed by the SQLAlchemy models.

    Usage:
        with get_session() as session:
            store = SqlRecordStore(session)
            games = store.fetch_games(league_id=1, game_kind=GameKind.COMMANDER)
    """

    def __init__(self, session: Session):
        self.session = session

    def fetch_games(
        self, league_id: Optional[int], game_kind: Optional[GameKind] = None
    ) -> list[GameRecord]:
        """Load and decode games, oldest first."""
        from leagueboard.db.models import LeagueGame

        stmt = select(LeagueGame).order_by(LeagueGame.played_on, LeagueGame.id)
        if league_id is not None:
            stmt = stmt.where(LeagueGame.league_id == league_id)
        if game_kind is not None:
            stmt = stmt.where(func.lower(LeagueGame.game_kind) == game_kind.value)

        rows = self.session.execute(stmt).scalars().all()
        games = [
            decode_game(
                game_id=row.id,
                league_id=row.league_id,
                kind=row.game_kind,
                played_on=row.played_on,
                placements=row.placements,
                players=row.players,
                objectives=row.objectives,
                notes=row.notes,
            )
            for row in rows
        ]
        logger.debug("Loaded %d games (league=%s, kind=%s)", len(games), league_id, game_kind)
        return sorted(games, key=_sort_key)

    def fetch_scoring_rules(
        self, league_id: Optional[int], game_kind: Optional[GameKind]
    ) -> list[ScoringRule]:
        """Load the active rules for one league and game kind, compiling their kinds."""
        from leagueboard.db.models import ScoringRule as ScoringRuleRow

        if game_kind is None:
            return []

        stmt = (
            select(ScoringRuleRow)
            .where(func.lower(ScoringRuleRow.game_kind) == game_kind.value)
            .where(ScoringRuleRow.active.is_(True))
            .order_by(ScoringRuleRow.id)
        )
        if league_id is not None:
            stmt = stmt.where(ScoringRuleRow.league_id == league_id)

        return [
            build_rule(
                name=row.name,
                points=row.points,
                league_id=row.league_id,
                game_kind=game_kind,
                active=row.active,
                description=row.description,
            )
            for row in self.session.execute(stmt).scalars()
        ]

    def fetch_players(self, league_id: Optional[int]) -> list[PlayerRef]:
        """Active members of a league, or every player when league_id is None."""
        from leagueboard.db.models import LeagueMembership, Player

        if league_id is None:
            stmt = select(Player.id, Player.name).order_by(Player.id)
        else:
            stmt = (
                select(Player.id, Player.name)
                .join(LeagueMembership, LeagueMembership.player_id == Player.id)
                .where(LeagueMembership.league_id == league_id)
                .where(LeagueMembership.active.is_(True))
                .order_by(Player.id)
            )
        return [PlayerRef(id=row.id, name=row.name) for row in self.session.execute(stmt)]

    def save_placement_points(self, game_id: int, points_by_player: Mapping[int, int]) -> None:
        """
        Rewrite the points stored in one game's placements.

        Entries that cannot be matched to a player are left as they are.
        The caller owns the transaction.
        """
        from leagueboard.db.models import LeagueGame

        game = self.session.get(LeagueGame, game_id)
        if game is None:
            raise LookupError(f"game {game_id} does not exist")

        try:
            entries = load_json(game.placements, [])
        except RecordDecodeError as e:
            logger.warning("Game %s: cannot rewrite unreadable placements: %s", game_id, e)
            return

        updated = []
        for entry in entries:
            if isinstance(entry, dict):
                try:
                    player_id = coerce_player_id(entry)
                except RecordDecodeError:
                    player_id = None
                if player_id in points_by_player:
                    entry = {**entry, "points": int(points_by_player[player_id])}
            updated.append(entry)

        # Assign a new list so the JSON column is marked dirty
        game.placements = updated
        self.session.flush()


class InMemoryRecordStore:
    """
    RecordStore over typed records held in memory.

    Rules passed in are kept as-is; fetch_scoring_rules filters them by
    league, game kind and active flag the same way the SQL store does.
    """

    def __init__(
        self,
        games: Iterable[GameRecord] = (),
        rules: Iterable[ScoringRule] = (),
        players: Iterable[PlayerRef] = (),
        memberships: Optional[Mapping[int, Iterable[int]]] = None,
    ):
        self.games: list[GameRecord] = list(games)
        self.rules: list[ScoringRule] = list(rules)
        self.players: list[PlayerRef] = list(players)
        # league_id -> member player ids; None means every player is a member
        self.memberships = (
            {league: set(ids) for league, ids in memberships.items()}
            if memberships is not None else None
        )

    def fetch_games(
        self, league_id: Optional[int], game_kind: Optional[GameKind] = None
    ) -> list[GameRecord]:
        games = [
            game for game in self.games
            if (league_id is None or game.league_id == league_id)
            and (game_kind is None or game.kind == game_kind)
        ]
        return sorted(games, key=_sort_key)

    def fetch_scoring_rules(
        self, league_id: Optional[int], game_kind: Optional[GameKind]
    ) -> list[ScoringRule]:
        if game_kind is None:
            return []
        return [
            rule for rule in self.rules
            if rule.active
            and rule.game_kind == game_kind
            and (league_id is None or rule.league_id == league_id)
        ]

    def fetch_players(self, league_id: Optional[int]) -> list[PlayerRef]:
        if league_id is None or self.memberships is None:
            return list(self.players)
        members = self.memberships.get(league_id, set())
        return [player for player in self.players if player.id in members]

    def save_placement_points(self, game_id: int, points_by_player: Mapping[int, int]) -> None:
        for index, game in enumerate(self.games):
            if game.id != game_id:
                continue
            placements = tuple(
                replace(p, points=int(points_by_player[p.player_id]))
                if p.player_id in points_by_player else p
                for p in game.placements
            )
            self.games[index] = replace(game, placements=placements)
            return
        raise LookupError(f"game {game_id} does not exist")
