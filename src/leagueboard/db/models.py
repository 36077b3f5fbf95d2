"""
SQLAlchemy ORM models for Leagueboard.

This module defines the league record tables the standings engine reads
from. The engine itself never writes here except for the admin points
recalculation, which rewrites the points stored inside a game's placements.

Key design decisions:
- Game payloads (players, placements, objective claims) are JSON columns
  (JSONB on PostgreSQL); they are decoded into typed records by
  records/store.py and never parsed anywhere else
- Game kind is stored as a plain string so rows with a kind this engine
  does not know still load (they score nothing)
- Scoring rule names are unique per league and game kind

Tables:
- players: Registered players
- leagues: League master data
- league_memberships: Which players belong to which league
- league_games: Recorded games with their placements
- scoring_rules: Named point rules per league and game kind
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Player and League Models
# =============================================================================

class Player(Base):
    """
    A registered player.

    Players exist independently of leagues; league_memberships decides
    which of them appear in a league's standings.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    memberships: Mapped[list["LeagueMembership"]] = relationship(
        back_populates="player", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}')>"


class League(Base):
    """
    A league (season) that records games and owns scoring rules.
    """
    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Primary format ('commander', 'draft', 'standard'); games may still vary
    format: Mapped[str] = mapped_column(String(20), nullable=False, default="commander")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    memberships: Mapped[list["LeagueMembership"]] = relationship(
        back_populates="league", cascade="all, delete-orphan"
    )
    games: Mapped[list["LeagueGame"]] = relationship(
        back_populates="league", cascade="all, delete-orphan"
    )
    scoring_rules: Mapped[list["ScoringRule"]] = relationship(
        back_populates="league", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<League(id={self.id}, name='{self.name}')>"


class LeagueMembership(Base):
    """
    A player's membership in a league.

    Only active memberships seed a league's standings, so a player who
    has left still appears if they have games but is no longer listed
    with zero games.
    """
    __tablename__ = "league_memberships"

    id: Mapped[int] = mapped_column(primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("leagues.id", ondelete="CASCADE"))
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"))
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    league: Mapped["League"] = relationship(back_populates="memberships")
    player: Mapped["Player"] = relationship(back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("league_id", "player_id", name="uq_league_membership"),
        Index("idx_league_memberships_active", "league_id", "active"),
    )

    def __repr__(self) -> str:
        return f"<LeagueMembership(league={self.league_id}, player={self.player_id})>"


# =============================================================================
# Game Models
# =============================================================================

class LeagueGame(Base):
    """
    A recorded game (one pod or match).

    JSON payloads:
    - players: participant ids, e.g. [12, 15, 19, 23]
    - placements: [{"playerId": 12, "place": 1, "points": 3,
                    "objectives": {"silver": 1}}, ...]
    - objectives: objective claims, tag -> claimant id(s),
                  e.g. {"gold": 12, "silver": [15, 19]}

    The points inside placements are rule-evaluated when the game is
    recorded and only change through an explicit recalculation.
    """
    __tablename__ = "league_games"

    id: Mapped[int] = mapped_column(primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("leagues.id", ondelete="CASCADE"))

    game_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    played_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    players: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    placements: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    objectives: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # Tournament context (display only)
    tournament_phase: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    round: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    league: Mapped["League"] = relationship(back_populates="games")

    __table_args__ = (
        Index("idx_league_games_league_kind", "league_id", "game_kind"),
        Index("idx_league_games_played_on", "played_on"),
    )

    def __repr__(self) -> str:
        return f"<LeagueGame(id={self.id}, kind='{self.game_kind}', played_on={self.played_on})>"


class ScoringRule(Base):
    """
    A named point rule for one league and game kind.

    Names follow conventions the engine recognises, e.g.:
    - "Placement 1st" .. "Placement 4th": points for finishing at that place
    - "Gold Objective", "Silver Objective": points per claimed objective
    - "Participation": points when nothing else scored
    """
    __tablename__ = "scoring_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("leagues.id", ondelete="CASCADE"))
    game_kind: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    league: Mapped["League"] = relationship(back_populates="scoring_rules")

    __table_args__ = (
        UniqueConstraint("league_id", "game_kind", "name", name="uq_scoring_rule_name"),
        Index("idx_scoring_rules_lookup", "league_id", "game_kind", "active"),
    )

    def __repr__(self) -> str:
        return f"<ScoringRule(name='{self.name}', points={self.points}, active={self.active})>"
