"""initial game day schema

Revision ID: 0001_initial
Revises:
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "sport",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
    )
    op.create_table(
        "team",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("sport_id", sa.String(), sa.ForeignKey("sport.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_table(
        "player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("team_id", sa.String(), sa.ForeignKey("team.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("jersey_number", sa.String(length=3), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "game",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("team_id", sa.String(), sa.ForeignKey("team.id"), nullable=False),
        sa.Column("sport_id", sa.String(), sa.ForeignKey("sport.id"), nullable=False),
        sa.Column("opponent_name", sa.String(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="scheduled"),
        sa.Column("scoring_format", sa.String(), nullable=True),
        sa.Column("our_score", sa.Integer(), nullable=True),
        sa.Column("opponent_score", sa.Integer(), nullable=True),
        sa.Column("point_differential", sa.Integer(), nullable=True),
        sa.Column("game_result", sa.String(), nullable=True),
        sa.Column(
            "unit_scores",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
        sa.Column("our_sets_won", sa.Integer(), nullable=True),
        sa.Column("opponent_sets_won", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("completed_by", sa.String(), nullable=True),
    )
    op.create_index("ix_game_team_id_status", "game", ["team_id", "status"])
    op.create_table(
        "game_attendance",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "game_id",
            sa.String(),
            sa.ForeignKey("game.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("player_id", sa.String(), sa.ForeignKey("player.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column(
            "recorded_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("recorded_by", sa.String(), nullable=True),
        sa.UniqueConstraint(
            "game_id", "player_id", name="uq_game_attendance_game_id_player_id"
        ),
    )
    op.create_table(
        "badge",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_table(
        "player_badge",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("player_id", sa.String(), sa.ForeignKey("player.id"), nullable=False),
        sa.Column("badge_id", sa.String(), sa.ForeignKey("badge.id"), nullable=False),
        sa.Column("game_id", sa.String(), sa.ForeignKey("game.id"), nullable=True),
        sa.Column("context", sa.String(), nullable=True),
        sa.Column("awarded_by", sa.String(), nullable=True),
        sa.Column(
            "earned_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint(
            "player_id",
            "badge_id",
            "game_id",
            name="uq_player_badge_player_id_badge_id_game_id",
        ),
    )


def downgrade():
    op.drop_table("player_badge")
    op.drop_table("badge")
    op.drop_table("game_attendance")
    op.drop_index("ix_game_team_id_status", table_name="game")
    op.drop_table("game")
    op.drop_table("player")
    op.drop_table("team")
    op.drop_table("sport")
