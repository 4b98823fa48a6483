"""Database repository helpers."""

from repositories.achievements import AchievementRepository, UnlockedAchievement
from repositories.definitions import (
    ACHIEVEMENT_REPOSITORY,
    DEFAULT_REPOSITORIES,
    MATCH_REPOSITORY,
    MONTHLY_AWARD_REPOSITORY,
    PLAYER_REPOSITORY,
    LeagueRepositories,
)
from repositories.matches import MatchRepository
from repositories.monthly_awards import MonthlyAwardRepository
from repositories.players import PlayerRepository, player_to_snapshot
from repositories.schema import ensure_schema

__all__ = [
    "ACHIEVEMENT_REPOSITORY",
    "DEFAULT_REPOSITORIES",
    "MATCH_REPOSITORY",
    "MONTHLY_AWARD_REPOSITORY",
    "PLAYER_REPOSITORY",
    "AchievementRepository",
    "LeagueRepositories",
    "MatchRepository",
    "MonthlyAwardRepository",
    "PlayerRepository",
    "UnlockedAchievement",
    "ensure_schema",
    "player_to_snapshot",
]
