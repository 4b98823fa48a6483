"""players table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin, PlayerStatsMixin


class Player(PlayerStatsMixin, CreatedAtMixin, Base):
    """League player with current rating and cumulative stats."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("rating >= 0", name="ck_players_rating_floor"),
        CheckConstraint("highest_rating >= rating", name="ck_players_highest_rating"),
        CheckConstraint("best_win_streak >= current_win_streak", name="ck_players_best_win_streak"),
        CheckConstraint(
            "current_win_streak = 0 OR current_loss_streak = 0",
            name="ck_players_exclusive_streaks",
        ),
        Index("idx_players_rating", "rating"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    highest_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    active_achievement_id: Mapped[int | None] = mapped_column(
        ForeignKey("achievements.id"),
        nullable=True,
    )
