"""Persistence helpers for the achievement catalog and player unlocks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.achievements.catalog import CATALOG, AchievementKind
from domain.errors import AchievementNotOwned
from models.achievement import Achievement, PlayerAchievement
from models.player import Player


@dataclass(frozen=True)
class UnlockedAchievement:
    achievement_id: int
    name: str
    description: str
    category: str
    unlocked_at: datetime
    is_active: bool


class AchievementRepository:
    def seed_catalog(self, session: Session) -> int:
        """Insert missing catalog rows and refresh existing ones; returns rows inserted."""
        existing = {
            row.name: row for row in session.execute(select(Achievement)).scalars()
        }
        inserted = 0
        for definition in CATALOG.values():
            row = existing.get(definition.name)
            if row is None:
                session.add(
                    Achievement(
                        name=definition.name,
                        description=definition.description,
                        category=definition.category.value,
                        requirement_type=definition.requirement_type,
                        requirement_value=definition.requirement_value,
                    )
                )
                inserted += 1
            else:
                row.description = definition.description
                row.category = definition.category.value
                row.requirement_type = definition.requirement_type
                row.requirement_value = definition.requirement_value
        session.flush()
        return inserted

    def resolve_ids(self, session: Session, kinds: Iterable[AchievementKind]) -> dict[AchievementKind, int]:
        """Map achievement kinds to stored ids; kinds without a catalog row are left out."""
        wanted = {kind.value: kind for kind in kinds}
        if not wanted:
            return {}
        rows = session.execute(
            select(Achievement.id, Achievement.name).where(Achievement.name.in_(list(wanted)))
        ).all()
        return {wanted[row.name]: row.id for row in rows}

    def owned_ids(self, session: Session, player_id: int) -> set[int]:
        statement = select(PlayerAchievement.achievement_id).where(PlayerAchievement.player_id == player_id)
        return set(session.execute(statement).scalars())

    def grant(
        self,
        session: Session,
        player_id: int,
        achievement_ids: Iterable[int],
        *,
        unlocked_at: datetime | None = None,
    ) -> list[int]:
        """Record unlocks, skipping ones the player already owns; returns the new ids."""
        owned = self.owned_ids(session, player_id)
        new_ids = sorted(set(achievement_ids) - owned)
        for achievement_id in new_ids:
            row = PlayerAchievement(player_id=player_id, achievement_id=achievement_id)
            if unlocked_at is not None:
                row.created_at = unlocked_at
            session.add(row)
        session.flush()
        return new_ids

    def find_id(self, session: Session, name: str) -> int | None:
        statement = select(Achievement.id).where(Achievement.name == name)
        return session.execute(statement).scalar_one_or_none()

    def unlocked(self, session: Session, player_id: int) -> list[UnlockedAchievement]:
        """List a player's unlocks, oldest first, flagging the pinned one."""
        active_id = session.execute(
            select(Player.active_achievement_id).where(Player.id == player_id)
        ).scalar_one_or_none()
        statement = (
            select(
                Achievement.id,
                Achievement.name,
                Achievement.description,
                Achievement.category,
                PlayerAchievement.created_at,
            )
            .join(PlayerAchievement, PlayerAchievement.achievement_id == Achievement.id)
            .where(PlayerAchievement.player_id == player_id)
            .order_by(PlayerAchievement.created_at.asc(), Achievement.id.asc())
        )
        return [
            UnlockedAchievement(
                achievement_id=row.id,
                name=row.name,
                description=row.description,
                category=row.category,
                unlocked_at=row.created_at,
                is_active=row.id == active_id,
            )
            for row in session.execute(statement)
        ]

    def set_active(self, session: Session, player_id: int, achievement_id: int | None) -> None:
        """Pin one of the player's unlocked achievements; ``None`` clears the pin."""
        row = session.get(Player, player_id)
        if row is None:
            raise LookupError(f"player_id={player_id} not found")
        if achievement_id is not None and achievement_id not in self.owned_ids(session, player_id):
            raise AchievementNotOwned(player_id, achievement_id)
        row.active_achievement_id = achievement_id
        session.flush()


__all__ = ["AchievementRepository", "UnlockedAchievement"]
