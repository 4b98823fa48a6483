"""Rating math, match processing and rating config."""

from domain.ratings.calculator import (
    RatingParameters,
    calculate_expected_score,
    calculate_rating_delta,
    is_crawl_game,
    round_half_up,
    streak_multiplier,
)
from domain.ratings.config import RatingSystemConfig, load_rating_system_configs
from domain.ratings.match_processor import MatchProcessor, progress_player

__all__ = [
    "MatchProcessor",
    "RatingParameters",
    "RatingSystemConfig",
    "calculate_expected_score",
    "calculate_rating_delta",
    "is_crawl_game",
    "load_rating_system_configs",
    "progress_player",
    "round_half_up",
    "streak_multiplier",
]
