"""Shared protocols and enums for the league domain."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from domain.achievements.catalog import AchievementKind
    from domain.awards.aggregator import MatchRecord, MonthlyAwardResult, RatingChangeRecord
    from domain.common import MatchOutcome, PlayerRatingChange, PlayerSnapshot


class GameMode(str, Enum):
    """How many players stand on each side of the table."""

    CLASSIC = "classic"
    DUEL = "duel"


class AwardType(str, Enum):
    """Monthly award categories."""

    PLAYER_OF_MONTH = "player_of_month"
    CRAWLER_OF_MONTH = "crawler_of_month"
    MOST_ACTIVE = "most_active"
    GAME_OF_MONTH = "game_of_month"


class AchievementCategory(str, Enum):
    """Grouping used when listing achievements."""

    MILESTONE = "milestone"
    STREAK = "streak"
    RATING = "rating"
    GAMES = "games"
    GOALS = "goals"
    SPECIAL = "special"


@runtime_checkable
class PlayerStore(Protocol):
    def get_many(
        self, session: Session, player_ids: Iterable[int], *, lock: bool = False
    ) -> dict[int, PlayerSnapshot]: ...

    def save(self, session: Session, player: PlayerSnapshot) -> None: ...

    def current_ratings(self, session: Session, player_ids: Iterable[int]) -> dict[int, int]: ...


@runtime_checkable
class MatchStore(Protocol):
    def insert_match(self, session: Session, outcome: MatchOutcome, *, played_at: datetime) -> int: ...

    def insert_rating_changes(
        self,
        session: Session,
        match_id: int,
        changes: Sequence[PlayerRatingChange],
        *,
        created_at: datetime,
    ) -> None: ...

    def fetch_matches_between(self, session: Session, start: datetime, end: datetime) -> list[MatchRecord]: ...

    def fetch_rating_changes_between(
        self, session: Session, start: datetime, end: datetime
    ) -> list[RatingChangeRecord]: ...

    def fetch_active_months(self, session: Session) -> list[str]: ...


@runtime_checkable
class AchievementStore(Protocol):
    def resolve_ids(self, session: Session, kinds: Iterable[AchievementKind]) -> dict[AchievementKind, int]: ...

    def owned_ids(self, session: Session, player_id: int) -> set[int]: ...

    def grant(
        self,
        session: Session,
        player_id: int,
        achievement_ids: Iterable[int],
        *,
        unlocked_at: datetime | None = None,
    ) -> list[int]: ...

    def set_active(self, session: Session, player_id: int, achievement_id: int | None) -> None: ...


@runtime_checkable
class MonthlyAwardStore(Protocol):
    def replace_period(
        self, session: Session, year: int, month: int, awards: Sequence[MonthlyAwardResult]
    ) -> int: ...

    def fetch_period(self, session: Session, year: int, month: int) -> list[MonthlyAwardResult]: ...


@runtime_checkable
class MatchNotifier(Protocol):
    def notify_match(self, notification: object) -> bool: ...


__all__ = [
    "AchievementCategory",
    "AchievementStore",
    "AwardType",
    "GameMode",
    "MatchNotifier",
    "MatchStore",
    "MonthlyAwardStore",
    "PlayerStore",
]
