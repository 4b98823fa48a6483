"""SQLAlchemy mixins for common league table columns."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class CreatedAtMixin:
    """Row creation timestamp in naive local time.

    Match rows take their ``played_at``; other ORM inserts use the same
    application clock. The server default only covers raw SQL inserts.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=datetime.now,
        server_default=func.now(),
    )


class PlayerStatsMixin:
    """Cumulative per-player counters updated after every match."""

    goals_scored: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    goals_conceded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_win_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_loss_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_win_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    crawls: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    crawls_caused: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
