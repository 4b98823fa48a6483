"""Typed failures raised by the league domain."""

from __future__ import annotations


class InvalidMatchScore(ValueError):
    """Submitted scores do not describe a decided match."""


class InvalidMatchRoster(ValueError):
    """Sides are empty, oversized, mismatched, or share a player."""


class ContractViolation(ValueError):
    """Caller passed malformed input to a pure domain component."""


class AchievementNotOwned(ValueError):
    """A player tried to pin an achievement they have not unlocked."""

    def __init__(self, player_id: int, achievement_id: int) -> None:
        self.player_id = player_id
        self.achievement_id = achievement_id
        super().__init__(f"player_id={player_id} has not unlocked achievement_id={achievement_id}")


class PlayerNotFound(InvalidMatchRoster):
    """A submitted player id has no stored record."""

    def __init__(self, player_ids: list[int]) -> None:
        self.player_ids = sorted(player_ids)
        super().__init__(f"Unknown player ids: {self.player_ids}")


__all__ = ["AchievementNotOwned", "ContractViolation", "InvalidMatchRoster", "InvalidMatchScore", "PlayerNotFound"]
