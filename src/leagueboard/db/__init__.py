"""
Database module for Leagueboard.

Provides SQLAlchemy ORM models and session management.

Usage:
    from leagueboard.db import get_session, LeagueGame

    with get_session() as session:
        games = session.query(LeagueGame).all()
"""

from leagueboard.db.models import (
    Base,
    League,
    LeagueGame,
    LeagueMembership,
    Player,
    ScoringRule,
)
from leagueboard.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "Player",
    "League",
    "LeagueMembership",
    "LeagueGame",
    "ScoringRule",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
