"""Persistence helpers for monthly awards."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from domain.awards.aggregator import MonthlyAwardResult
from domain.protocol import AwardType
from models.monthly_award import MonthlyAward


class MonthlyAwardRepository:
    def replace_period(
        self,
        session: Session,
        year: int,
        month: int,
        awards: Sequence[MonthlyAwardResult],
    ) -> int:
        """Delete every award of (year, month) and insert ``awards`` in its place."""
        session.execute(delete(MonthlyAward).where(MonthlyAward.year == year, MonthlyAward.month == month))
        if not awards:
            return 0
        payload = [
            {
                "year": year,
                "month": month,
                "award_type": award.award_type.value,
                "player_id": award.player_id,
                "match_id": award.match_id,
                "value": award.value,
                "description": award.description,
            }
            for award in awards
        ]
        session.execute(insert(MonthlyAward), payload)
        return len(payload)

    def fetch_period(self, session: Session, year: int, month: int) -> list[MonthlyAwardResult]:
        statement = (
            select(MonthlyAward)
            .where(MonthlyAward.year == year, MonthlyAward.month == month)
            .order_by(MonthlyAward.award_type.asc(), MonthlyAward.player_id.asc(), MonthlyAward.id.asc())
        )
        return [
            MonthlyAwardResult(
                award_type=AwardType(row.award_type),
                value=row.value,
                description=row.description,
                player_id=row.player_id,
                match_id=row.match_id,
            )
            for row in session.execute(statement).scalars()
        ]


__all__ = ["MonthlyAwardRepository"]
