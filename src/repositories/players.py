"""Persistence helpers for players using SQLAlchemy."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import PlayerSnapshot
from domain.errors import PlayerNotFound
from models.player import Player

_STAT_COLUMNS = (
    "rating",
    "highest_rating",
    "goals_scored",
    "goals_conceded",
    "wins",
    "losses",
    "current_win_streak",
    "current_loss_streak",
    "best_win_streak",
    "crawls",
    "crawls_caused",
)


def player_to_snapshot(row: Player) -> PlayerSnapshot:
    return PlayerSnapshot.from_mapping(
        {
            "id": row.id,
            "name": row.name,
            "active_achievement_id": row.active_achievement_id,
            **{column: getattr(row, column) for column in _STAT_COLUMNS},
        }
    )


class PlayerRepository:
    """Reads player rows as snapshots and writes back post-match stats."""

    def create(self, session: Session, *, name: str, initial_rating: int) -> PlayerSnapshot:
        row = Player(
            name=name,
            rating=initial_rating,
            highest_rating=initial_rating,
            goals_scored=0,
            goals_conceded=0,
            wins=0,
            losses=0,
            current_win_streak=0,
            current_loss_streak=0,
            best_win_streak=0,
            crawls=0,
            crawls_caused=0,
        )
        session.add(row)
        session.flush()
        return player_to_snapshot(row)

    def get_many(
        self,
        session: Session,
        player_ids: Iterable[int],
        *,
        lock: bool = False,
    ) -> dict[int, PlayerSnapshot]:
        """Load players by id; ``lock`` takes row locks until the transaction ends."""
        wanted = list(dict.fromkeys(player_ids))
        statement = select(Player).where(Player.id.in_(wanted)).order_by(Player.id)
        if lock:
            statement = statement.with_for_update()

        rows = session.execute(statement).scalars().all()
        players = {row.id: player_to_snapshot(row) for row in rows}
        missing = [player_id for player_id in wanted if player_id not in players]
        if missing:
            raise PlayerNotFound(missing)
        return players

    def save(self, session: Session, player: PlayerSnapshot) -> None:
        row = session.get(Player, player.id)
        if row is None:
            raise PlayerNotFound([player.id])
        for column in _STAT_COLUMNS:
            setattr(row, column, getattr(player, column))
        row.active_achievement_id = player.active_achievement_id
        session.flush()

    def current_ratings(self, session: Session, player_ids: Iterable[int]) -> dict[int, int]:
        wanted = list(set(player_ids))
        if not wanted:
            return {}
        rows = session.execute(select(Player.id, Player.rating).where(Player.id.in_(wanted))).all()
        return {row.id: row.rating for row in rows}

    def names(self, session: Session, player_ids: Iterable[int]) -> dict[int, str]:
        wanted = list(set(player_ids))
        if not wanted:
            return {}
        rows = session.execute(select(Player.id, Player.name).where(Player.id.in_(wanted))).all()
        return {row.id: row.name for row in rows}

    def top(self, session: Session, *, limit: int = 20, min_games: int = 0) -> list[PlayerSnapshot]:
        """Leaderboard order: rating, then fewer losses, then name."""
        statement = (
            select(Player)
            .where((Player.wins + Player.losses) >= min_games)
            .order_by(Player.rating.desc(), Player.losses.asc(), Player.name.asc())
            .limit(limit)
        )
        return [player_to_snapshot(row) for row in session.execute(statement).scalars()]


__all__ = ["PlayerRepository", "player_to_snapshot"]
