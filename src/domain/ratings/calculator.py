"""Elo-style rating math for foosball matches."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor


@dataclass(frozen=True)
class RatingParameters:
    initial_rating: int = 1200
    k_factor: float = 32.0
    scale_factor: float = 400.0
    score_multiplier: float = 0.15
    streak_bonus_unit: float = 0.3
    duel_scale_factor: float = 0.6
    crawl_target_score: int = 10
    crawl_min_margin: int = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(floor(value + 0.5))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def streak_multiplier(win_streak: int, bonus_unit: float) -> float:
    if win_streak >= 10:
        return 1.0 + 3.0 * bonus_unit
    if win_streak >= 5:
        return 1.0 + 2.0 * bonus_unit
    if win_streak >= 3:
        return 1.0 + bonus_unit
    return 1.0


def is_crawl_game(score_a: int, score_b: int, *, target_score: int = 10, min_margin: int = 9) -> bool:
    """True for a 10-0 or 10-1 result (the loser crawls under the table)."""
    return max(score_a, score_b) == target_score and abs(score_a - score_b) >= min_margin


def calculate_rating_delta(
    side_rating: float,
    opponent_rating: float,
    score_margin: int,
    is_winner: bool,
    win_streak: int,
    params: RatingParameters,
) -> int:
    """Signed side-level rating change.

    Blowouts amplify the swing in both directions. Only a winning side's
    incoming streak earns a bonus; a loser's streak never changes its loss.
    """
    expected = calculate_expected_score(side_rating, opponent_rating, params.scale_factor)
    actual = 1.0 if is_winner else 0.0

    delta = params.k_factor * (actual - expected)
    delta *= 1.0 + abs(score_margin) * params.score_multiplier
    if is_winner and win_streak > 0:
        delta *= streak_multiplier(win_streak, params.streak_bonus_unit)

    return round_half_up(delta)


__all__ = [
    "RatingParameters",
    "calculate_expected_score",
    "calculate_rating_delta",
    "is_crawl_game",
    "round_half_up",
    "streak_multiplier",
]
