"""Achievement catalog and evaluation."""

from domain.achievements.catalog import CATALOG, AchievementDefinition, AchievementKind, get_definition
from domain.achievements.evaluator import AchievementEvaluator

__all__ = [
    "CATALOG",
    "AchievementDefinition",
    "AchievementEvaluator",
    "AchievementKind",
    "get_definition",
]
