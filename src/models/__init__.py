"""ORM models."""

from models.achievement import Achievement, PlayerAchievement
from models.base import Base
from models.match import Match, MatchPlayerRating
from models.monthly_award import MonthlyAward
from models.player import Player

__all__ = [
    "Achievement",
    "Base",
    "Match",
    "MatchPlayerRating",
    "MonthlyAward",
    "Player",
    "PlayerAchievement",
]
