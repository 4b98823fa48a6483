"""Central repository definitions for the league pipelines."""

from __future__ import annotations

from dataclasses import dataclass

from domain.protocol import AchievementStore, MatchStore, MonthlyAwardStore, PlayerStore
from repositories.achievements import AchievementRepository
from repositories.matches import MatchRepository
from repositories.monthly_awards import MonthlyAwardRepository
from repositories.players import PlayerRepository


@dataclass(frozen=True)
class LeagueRepositories:
    """Everything the pipelines need to read and write league state."""

    players: PlayerStore
    matches: MatchStore
    achievements: AchievementStore
    monthly_awards: MonthlyAwardStore


PLAYER_REPOSITORY = PlayerRepository()
MATCH_REPOSITORY = MatchRepository()
ACHIEVEMENT_REPOSITORY = AchievementRepository()
MONTHLY_AWARD_REPOSITORY = MonthlyAwardRepository()

DEFAULT_REPOSITORIES = LeagueRepositories(
    players=PLAYER_REPOSITORY,
    matches=MATCH_REPOSITORY,
    achievements=ACHIEVEMENT_REPOSITORY,
    monthly_awards=MONTHLY_AWARD_REPOSITORY,
)

__all__ = [
    "ACHIEVEMENT_REPOSITORY",
    "DEFAULT_REPOSITORIES",
    "MATCH_REPOSITORY",
    "MONTHLY_AWARD_REPOSITORY",
    "PLAYER_REPOSITORY",
    "LeagueRepositories",
]
