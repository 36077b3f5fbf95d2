"""
Tests for SqlRecordStore against the SQLite test database.

Covers decoding at the store boundary, the kind and membership filters,
and the points write-back used by recalculation.
"""

from datetime import date

import pytest

from leagueboard.db.models import League, LeagueGame, LeagueMembership, Player, ScoringRule
from leagueboard.records.store import SqlRecordStore
from leagueboard.records.types import GameKind, ObjectiveBonus, PlacementBonus
from leagueboard.standings.service import StandingsService


@pytest.fixture
def league(db_session):
    """
    A league with three members (one inactive), commander rules and games.

    Returns a dict of the created rows for id lookups.
    """
    alice, bob, carol = Player(name="Alice"), Player(name="Bob"), Player(name="Carol")
    outsider = Player(name="Zed")
    league = League(name="Friday Commander", format="commander")
    db_session.add_all([alice, bob, carol, outsider, league])
    db_session.flush()

    db_session.add_all([
        LeagueMembership(league_id=league.id, player_id=alice.id),
        LeagueMembership(league_id=league.id, player_id=bob.id),
        LeagueMembership(league_id=league.id, player_id=carol.id, active=False),
    ])

    for name, points in (
        ("Gold Objective", 5),
        ("Silver Objective", 2),
        ("Placement 1st", 0),
        ("Placement 2nd", 1),
    ):
        db_session.add(ScoringRule(league_id=league.id, game_kind="commander", name=name, points=points))
    db_session.add(ScoringRule(
        league_id=league.id, game_kind="commander", name="Placement 3rd", points=1, active=False,
    ))

    late = LeagueGame(
        league_id=league.id,
        game_kind="Commander",
        played_on=date(2024, 2, 9),
        players=[alice.id, bob.id],
        placements=[
            {"playerId": alice.id, "place": 1, "points": 10, "objectives": {"gold": 1}},
            {"playerId": bob.id, "place": 2, "points": 1},
        ],
        objectives={"gold": alice.id},
    )
    early = LeagueGame(
        league_id=league.id,
        game_kind="commander",
        played_on=date(2024, 2, 2),
        players=[alice.id, bob.id],
        # Stored as text by an older writer; Bob's points are stale
        placements=(
            f'[{{"player_id": {bob.id}, "placement": 1, "points": 4}},'
            f' {{"player_id": {alice.id}, "placement": 2, "points": 3, "silverObjectives": 1}},'
            f' {{"player_id": null, "placement": 3}}]'
        ),
    )
    odd = LeagueGame(
        league_id=league.id,
        game_kind="sealed",
        played_on=date(2024, 2, 16),
        players=[bob.id],
        placements=[{"playerId": bob.id, "place": 1, "points": 2}],
    )
    db_session.add_all([late, early, odd])
    db_session.flush()

    return {
        "league": league,
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "outsider": outsider,
        "late": late,
        "early": early,
        "odd": odd,
    }


class TestFetchGames:

    def test_decoded_and_ordered(self, db_session, league):
        games = SqlRecordStore(db_session).fetch_games(league["league"].id)

        assert [g.id for g in games] == [league["early"].id, league["late"].id, league["odd"].id]
        early = games[0]
        assert early.kind is GameKind.COMMANDER
        # The entry without a player id is dropped
        assert len(early.placements) == 2
        assert early.placement_for(league["alice"].id).objectives == {"silver": 1}

    def test_kind_filter_is_case_insensitive(self, db_session, league):
        games = SqlRecordStore(db_session).fetch_games(league["league"].id, GameKind.COMMANDER)
        assert {g.id for g in games} == {league["early"].id, league["late"].id}

    def test_unknown_kind_row_decodes_as_none(self, db_session, league):
        games = SqlRecordStore(db_session).fetch_games(league["league"].id)
        odd = next(g for g in games if g.id == league["odd"].id)

        assert odd.kind is None

    def test_objective_claims_combine_with_placement_counts(self, db_session, league):
        games = SqlRecordStore(db_session).fetch_games(league["league"].id, GameKind.COMMANDER)
        late = next(g for g in games if g.id == league["late"].id)

        assert late.objective_counts(league["alice"].id) == {"gold": 2}


class TestFetchScoringRules:

    def test_active_rules_with_compiled_kinds(self, db_session, league):
        rules = SqlRecordStore(db_session).fetch_scoring_rules(league["league"].id, GameKind.COMMANDER)
        kinds = {rule.name: rule.kind for rule in rules}

        assert "Placement 3rd" not in kinds
        assert kinds["Gold Objective"] == ObjectiveBonus(tag="gold")
        assert kinds["Placement 2nd"] == PlacementBonus(place=2)

    def test_no_kind_means_no_rules(self, db_session, league):
        assert SqlRecordStore(db_session).fetch_scoring_rules(league["league"].id, None) == []

    def test_other_kind_has_no_rules(self, db_session, league):
        assert SqlRecordStore(db_session).fetch_scoring_rules(league["league"].id, GameKind.DRAFT) == []


class TestFetchPlayers:

    def test_active_members_only(self, db_session, league):
        players = SqlRecordStore(db_session).fetch_players(league["league"].id)
        assert [p.name for p in players] == ["Alice", "Bob"]

    def test_all_players_without_league(self, db_session, league):
        names = {p.name for p in SqlRecordStore(db_session).fetch_players(None)}
        assert {"Alice", "Bob", "Carol", "Zed"} <= names


class TestSavePlacementPoints:

    def test_points_rewritten(self, db_session, league):
        store = SqlRecordStore(db_session)
        store.save_placement_points(league["late"].id, {league["bob"].id: 7})

        games = store.fetch_games(league["league"].id, GameKind.COMMANDER)
        late = next(g for g in games if g.id == league["late"].id)
        assert late.placement_for(league["bob"].id).points == 7
        assert late.placement_for(league["alice"].id).points == 10

    def test_missing_game(self, db_session, league):
        with pytest.raises(LookupError):
            SqlRecordStore(db_session).save_placement_points(999_999, {1: 1})


class TestServiceOverSql:

    def test_leaderboard(self, db_session, league):
        entries = StandingsService.from_session(db_session).compute_leaderboard(
            league["league"].id, "commander"
        )
        by_name = {e.name: e for e in entries}

        # Carol is an inactive member without games, so she is not listed
        assert set(by_name) == {"Alice", "Bob"}
        assert by_name["Alice"].total_points == 13
        assert by_name["Bob"].total_points == 5

    def test_recalculate_then_idempotent(self, db_session, league):
        service = StandingsService.from_session(db_session)

        first = service.recalculate_points(league["league"].id)
        second = service.recalculate_points(league["league"].id)

        # Bob's stale 4 becomes 1; the sealed game is skipped
        assert first.changed == 1
        assert first.skipped_games == 1
        assert second.changed == 0

        entries = service.compute_leaderboard(league["league"].id, "commander")
        assert {e.name: e.total_points for e in entries}["Bob"] == 2
