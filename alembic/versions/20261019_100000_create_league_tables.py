"""Create league record tables

Revision ID: 5e1a7c2b9d40
Revises:
Create Date: 2026-10-19 10:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "5e1a7c2b9d40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "leagues",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("format", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "league_memberships",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("league_id", "player_id", name="uq_league_membership"),
    )
    op.create_index(
        "idx_league_memberships_active", "league_memberships", ["league_id", "active"], unique=False
    )

    op.create_table(
        "league_games",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("game_kind", sa.String(length=20), nullable=False),
        sa.Column("played_on", sa.Date(), nullable=True),
        sa.Column("players", JSON_TYPE, nullable=False),
        sa.Column("placements", JSON_TYPE, nullable=False),
        sa.Column("objectives", JSON_TYPE, nullable=True),
        sa.Column("tournament_phase", sa.String(length=30), nullable=True),
        sa.Column("round", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recorded_by"], ["players.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_league_games_league_kind", "league_games", ["league_id", "game_kind"], unique=False
    )
    op.create_index("idx_league_games_played_on", "league_games", ["played_on"], unique=False)

    op.create_table(
        "scoring_rules",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("game_kind", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("league_id", "game_kind", "name", name="uq_scoring_rule_name"),
    )
    op.create_index(
        "idx_scoring_rules_lookup", "scoring_rules", ["league_id", "game_kind", "active"], unique=False
    )


def downgrade() -> None:
    op.drop_index("idx_scoring_rules_lookup", table_name="scoring_rules")
    op.drop_table("scoring_rules")
    op.drop_index("idx_league_games_played_on", table_name="league_games")
    op.drop_index("idx_league_games_league_kind", table_name="league_games")
    op.drop_table("league_games")
    op.drop_index("idx_league_memberships_active", table_name="league_memberships")
    op.drop_table("league_memberships")
    op.drop_table("leagues")
    op.drop_table("players")
