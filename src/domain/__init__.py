"""League domain: rating math, match processing, achievements and awards."""

from domain.common import MatchOutcome, PlayerRatingChange, PlayerSnapshot, Side
from domain.protocol import AchievementCategory, AwardType, GameMode

__all__ = [
    "AchievementCategory",
    "AwardType",
    "GameMode",
    "MatchOutcome",
    "PlayerRatingChange",
    "PlayerSnapshot",
    "Side",
]
