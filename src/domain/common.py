"""Shared types for match processing, achievements and awards."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from domain.errors import ContractViolation
from domain.protocol import GameMode


@dataclass(frozen=True)
class PlayerSnapshot:
    """Point-in-time copy of one player's stored record."""

    id: int
    name: str
    rating: int
    highest_rating: int
    goals_scored: int = 0
    goals_conceded: int = 0
    wins: int = 0
    losses: int = 0
    current_win_streak: int = 0
    current_loss_streak: int = 0
    best_win_streak: int = 0
    crawls: int = 0
    crawls_caused: int = 0
    active_achievement_id: int | None = None

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PlayerSnapshot:
        """Build a snapshot from a row-like mapping, requiring every stat field."""
        missing = [field.name for field in fields(cls) if field.name not in raw]
        # The pinned achievement is optional on stored rows.
        missing = [name for name in missing if name != "active_achievement_id"]
        if missing:
            raise ContractViolation(f"player record is missing fields: {', '.join(missing)}")

        values = {field.name: raw.get(field.name) for field in fields(cls)}
        for name, value in values.items():
            if name in ("name", "active_achievement_id"):
                continue
            if value is None:
                raise ContractViolation(f"player record field '{name}' must not be null")
        return cls(**values)


@dataclass(frozen=True)
class Side:
    """One or two players facing the other side of a match."""

    players: tuple[PlayerSnapshot, ...]

    @property
    def combined_rating(self) -> int:
        return sum(player.rating for player in self.players)

    @property
    def player_ids(self) -> tuple[int, ...]:
        return tuple(player.id for player in self.players)

    @property
    def size(self) -> int:
        return len(self.players)


@dataclass(frozen=True)
class MatchOutcome:
    """Result of processing one decided match; nothing here is persisted yet."""

    side1: Side
    side2: Side
    score1: int
    score2: int
    game_mode: GameMode
    side_deltas: tuple[int, int]
    rating_changes: dict[int, int]
    is_crawl_game: bool
    total_rating_change: int

    @property
    def side1_won(self) -> bool:
        return self.score1 > self.score2

    @property
    def winning_side(self) -> Side:
        return self.side1 if self.side1_won else self.side2

    @property
    def losing_side(self) -> Side:
        return self.side2 if self.side1_won else self.side1

    def side_number(self, player_id: int) -> int:
        if player_id in self.side1.player_ids:
            return 1
        if player_id in self.side2.player_ids:
            return 2
        raise ContractViolation(f"player_id={player_id} did not take part in this match")

    def player_won(self, player_id: int) -> bool:
        return (self.side_number(player_id) == 1) == self.side1_won

    def goals_for(self, player_id: int) -> int:
        return self.score1 if self.side_number(player_id) == 1 else self.score2

    def goals_against(self, player_id: int) -> int:
        return self.score2 if self.side_number(player_id) == 1 else self.score1


@dataclass(frozen=True)
class PlayerRatingChange:
    """Per-player rating movement stored alongside a match."""

    player_id: int
    previous_rating: int
    new_rating: int
    rating_change: int


__all__ = ["MatchOutcome", "PlayerRatingChange", "PlayerSnapshot", "Side"]
