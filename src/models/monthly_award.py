"""monthly_awards table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class MonthlyAward(CreatedAtMixin, Base):
    """One computed award for a calendar month; replaced on every recompute."""

    __tablename__ = "monthly_awards"
    __table_args__ = (
        CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_awards_month"),
        CheckConstraint(
            "award_type IN ('player_of_month', 'crawler_of_month', 'most_active', 'game_of_month')",
            name="ck_monthly_awards_type",
        ),
        CheckConstraint(
            "player_id IS NOT NULL OR match_id IS NOT NULL",
            name="ck_monthly_awards_target",
        ),
        Index("idx_monthly_awards_period", "year", "month"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    award_type: Mapped[str] = mapped_column(String(32), nullable=False)
    player_id: Mapped[int | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    match_id: Mapped[int | None] = mapped_column(ForeignKey("matches.id"), nullable=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(512), nullable=False)
