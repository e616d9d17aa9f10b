from sqlalchemy.orm import relationship
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Integer,
    Text,
    Index,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from .db import Base

GAME_STATUS_SCHEDULED = "scheduled"
GAME_STATUS_COMPLETED = "completed"


class Sport(Base):
    __tablename__ = "sport"
    id = Column(String, primary_key=True)   # e.g., "volleyball", "basketball"
    name = Column(String, nullable=False, unique=True)


class Team(Base):
    __tablename__ = "team"
    id = Column(String, primary_key=True)
    sport_id = Column(String, ForeignKey("sport.id"), nullable=False)
    name = Column(String, nullable=False)

    players = relationship(
        "Player",
        order_by="Player.name",
        back_populates="team",
    )


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    team_id = Column(String, ForeignKey("team.id"), nullable=True)
    name = Column(String, nullable=False)
    jersey_number = Column(String(3), nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    team = relationship("Team", back_populates="players")


class Game(Base):
    """A scheduled event against an opponent, completed through the wizard."""

    __tablename__ = "game"
    id = Column(String, primary_key=True)
    team_id = Column(String, ForeignKey("team.id"), nullable=False)
    sport_id = Column(String, ForeignKey("sport.id"), nullable=False)
    opponent_name = Column(String, nullable=True)
    scheduled_at = Column(DateTime, nullable=True)
    location = Column(String, nullable=True)
    status = Column(String, nullable=False, default=GAME_STATUS_SCHEDULED)  # "scheduled" | "completed"
    scoring_format = Column(String, nullable=True)
    our_score = Column(Integer, nullable=True)
    opponent_score = Column(Integer, nullable=True)
    point_differential = Column(Integer, nullable=True)
    game_result = Column(String, nullable=True)  # "win" | "loss" | "tie" | None
    unit_scores = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    our_sets_won = Column(Integer, nullable=True)
    opponent_sets_won = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    completed_by = Column(String, nullable=True)

    team = relationship("Team")

    __table_args__ = (Index("ix_game_team_id_status", "team_id", "status"),)


class GameAttendance(Base):
    __tablename__ = "game_attendance"
    id = Column(String, primary_key=True)
    game_id = Column(String, ForeignKey("game.id", ondelete="CASCADE"), nullable=False)
    player_id = Column(String, ForeignKey("player.id"), nullable=False)
    status = Column(String, nullable=False)  # "present" | "late" | "absent"
    recorded_at = Column(DateTime, nullable=False, server_default=func.now())
    recorded_by = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "game_id",
            "player_id",
            name="uq_game_attendance_game_id_player_id",
        ),
    )


class Badge(Base):
    __tablename__ = "badge"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    icon = Column(String, nullable=True)
    description = Column(Text, nullable=True)


class PlayerBadge(Base):
    __tablename__ = "player_badge"
    id = Column(String, primary_key=True)
    player_id = Column(String, ForeignKey("player.id"), nullable=False)
    badge_id = Column(String, ForeignKey("badge.id"), nullable=False)
    game_id = Column(String, ForeignKey("game.id"), nullable=True)
    context = Column(String, nullable=True)
    awarded_by = Column(String, nullable=True)
    earned_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint(
            "player_id",
            "badge_id",
            "game_id",
            name="uq_player_badge_player_id_badge_id_game_id",
        ),
    )
