"""Persistence helpers for matches and per-player rating changes."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from domain.awards.aggregator import MatchRecord, RatingChangeRecord
from domain.common import MatchOutcome, PlayerRatingChange
from domain.protocol import GameMode
from models.match import Match, MatchPlayerRating


class MatchRepository:
    def insert_match(self, session: Session, outcome: MatchOutcome, *, played_at: datetime) -> int:
        side1_ids = outcome.side1.player_ids
        side2_ids = outcome.side2.player_ids
        row = Match(
            team1_player1_id=side1_ids[0],
            team1_player2_id=side1_ids[1] if len(side1_ids) > 1 else None,
            team2_player1_id=side2_ids[0],
            team2_player2_id=side2_ids[1] if len(side2_ids) > 1 else None,
            team1_score=outcome.score1,
            team2_score=outcome.score2,
            total_rating_change=outcome.total_rating_change,
            is_crawl_game=outcome.is_crawl_game,
            game_mode=outcome.game_mode.value,
            played_at=played_at,
            created_at=played_at,
        )
        session.add(row)
        session.flush()
        return int(row.id)

    def insert_rating_changes(
        self,
        session: Session,
        match_id: int,
        changes: Sequence[PlayerRatingChange],
        *,
        created_at: datetime,
    ) -> None:
        if not changes:
            return
        payload = [
            {
                "match_id": match_id,
                "player_id": change.player_id,
                "previous_rating": change.previous_rating,
                "new_rating": change.new_rating,
                "rating_change": change.rating_change,
                "created_at": created_at,
            }
            for change in changes
        ]
        session.execute(insert(MatchPlayerRating), payload)

    def fetch_matches_between(self, session: Session, start: datetime, end: datetime) -> list[MatchRecord]:
        """Fetch matches in [start, end) in chronological order."""
        statement = (
            select(Match)
            .where(Match.played_at >= start, Match.played_at < end)
            .order_by(Match.played_at.asc(), Match.id.asc())
        )
        return [_match_to_record(row) for row in session.execute(statement).scalars()]

    def fetch_rating_changes_between(
        self,
        session: Session,
        start: datetime,
        end: datetime,
    ) -> list[RatingChangeRecord]:
        statement = (
            select(MatchPlayerRating)
            .where(MatchPlayerRating.created_at >= start, MatchPlayerRating.created_at < end)
            .order_by(MatchPlayerRating.created_at.asc(), MatchPlayerRating.match_id.asc())
        )
        return [
            RatingChangeRecord(
                match_id=row.match_id,
                player_id=row.player_id,
                previous_rating=row.previous_rating,
                new_rating=row.new_rating,
                rating_change=row.rating_change,
                created_at=row.created_at,
            )
            for row in session.execute(statement).scalars()
        ]

    def fetch_active_months(self, session: Session) -> list[str]:
        """Return sorted ``YYYY-MM`` keys of every month with at least one match."""
        months = {
            f"{played_at.year:04d}-{played_at.month:02d}"
            for played_at in session.execute(select(Match.played_at)).scalars()
        }
        return sorted(months)


def _match_to_record(row: Match) -> MatchRecord:
    return MatchRecord(
        id=row.id,
        played_at=row.played_at,
        team1_player_ids=_present(row.team1_player1_id, row.team1_player2_id),
        team2_player_ids=_present(row.team2_player1_id, row.team2_player2_id),
        team1_score=row.team1_score,
        team2_score=row.team2_score,
        is_crawl_game=row.is_crawl_game,
        total_rating_change=row.total_rating_change,
        game_mode=GameMode(row.game_mode),
    )


def _present(*player_ids: int | None) -> tuple[int, ...]:
    return tuple(player_id for player_id in player_ids if player_id is not None)


__all__ = ["MatchRepository"]
