"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leagueboard.db.models import Base
from leagueboard.records.rules import build_rule
from leagueboard.records.store import InMemoryRecordStore
from leagueboard.records.types import GameKind, GameRecord, Placement, PlayerRef


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory for fast tests that don't need
    PostgreSQL-specific features.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# Record fixtures
# =============================================================================

@pytest.fixture
def commander_rules():
    """The default commander rule set for league 1."""
    return [
        build_rule(name, points, league_id=1, game_kind=GameKind.COMMANDER)
        for name, points in (
            ("Gold Objective", 5),
            ("Silver Objective", 2),
            ("Placement 1st", 0),
            ("Placement 2nd", 1),
            ("Placement 3rd", 1),
            ("Placement 4th", 1),
        )
    ]


@pytest.fixture
def draft_rules():
    """The default draft rule set for league 1 ("Winner" is not a known pattern)."""
    return [
        build_rule("Winner", 3, league_id=1, game_kind=GameKind.DRAFT),
        build_rule("Participation", 1, league_id=1, game_kind=GameKind.DRAFT),
    ]


@pytest.fixture
def make_game():
    """
    Factory for GameRecords.

    Usage:
        make_game(1, [(10, 1, 3), (11, 2, 1)], played_on=date(2024, 1, 5))

    Each placement is (player_id, place, points) or
    (player_id, place, points, {tag: count}).
    """
    def _make(
        game_id,
        placements,
        played_on=date(2024, 1, 1),
        kind=GameKind.COMMANDER,
        league_id=1,
        objective_claims=None,
    ):
        built = []
        for entry in placements:
            player_id, place, points = entry[:3]
            objectives = entry[3] if len(entry) > 3 else {}
            built.append(Placement(player_id=player_id, place=place, points=points, objectives=objectives))
        return GameRecord(
            id=game_id,
            league_id=league_id,
            kind=kind,
            played_on=played_on,
            placements=tuple(built),
            players=tuple(p.player_id for p in built),
            objective_claims=objective_claims or {},
        )

    return _make


@pytest.fixture
def players():
    """Four named players plus one who has never played."""
    return [
        PlayerRef(id=10, name="Alice"),
        PlayerRef(id=11, name="Bob"),
        PlayerRef(id=12, name="Carol"),
        PlayerRef(id=13, name="Dan"),
        PlayerRef(id=14, name="Erin"),
    ]


@pytest.fixture
def league_store(make_game, commander_rules, players):
    """
    An in-memory league with three commander games.

    Stored points follow the commander rules:
        game 1: Alice 1st (+gold) 5, Bob 2nd 1, Carol 3rd 1, Dan 4th 1
        game 2: Bob 1st 1 (fallback), Alice 2nd 1, Dan 3rd 1, Carol 4th 1
        game 3: Alice 1st 1 (fallback), Carol 2nd (+silver) 3, Bob 3rd 1, Dan 4th 1
    """
    games = [
        make_game(1, [(10, 1, 5, {"gold": 1}), (11, 2, 1), (12, 3, 1), (13, 4, 1)],
                  played_on=date(2024, 1, 5)),
        make_game(2, [(11, 1, 1), (10, 2, 1), (13, 3, 1), (12, 4, 1)],
                  played_on=date(2024, 1, 12)),
        make_game(3, [(10, 1, 1), (12, 2, 3, {"silver": 1}), (11, 3, 1), (13, 4, 1)],
                  played_on=date(2024, 1, 19)),
    ]
    return InMemoryRecordStore(games=games, rules=commander_rules, players=players)
