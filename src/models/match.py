"""matches and match_player_ratings table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class Match(CreatedAtMixin, Base):
    """One decided match; player2 columns are empty for duels."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("team1_score <> team2_score", name="ck_matches_decided"),
        CheckConstraint("team1_score >= 0 AND team2_score >= 0", name="ck_matches_scores"),
        CheckConstraint("total_rating_change >= 0", name="ck_matches_total_rating_change"),
        CheckConstraint("game_mode IN ('classic', 'duel')", name="ck_matches_game_mode"),
        Index("idx_matches_played_at", "played_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    team1_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team1_player2_id: Mapped[int | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    team2_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team2_player2_id: Mapped[int | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_rating_change: Mapped[int] = mapped_column(Integer, nullable=False)
    is_crawl_game: Mapped[bool] = mapped_column(Boolean, nullable=False)
    game_mode: Mapped[str] = mapped_column(String(16), nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class MatchPlayerRating(CreatedAtMixin, Base):
    """Rating movement of one player in one match."""

    __tablename__ = "match_player_ratings"
    __table_args__ = (
        UniqueConstraint("match_id", "player_id", name="uq_match_player_ratings_match_player"),
        Index("idx_match_player_ratings_created", "created_at"),
        Index("idx_match_player_ratings_player", "player_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), nullable=False)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    previous_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    new_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_change: Mapped[int] = mapped_column(Integer, nullable=False)
