"""Monthly awards."""

from domain.awards.aggregator import (
    AwardSet,
    MatchRecord,
    MonthlyAwardResult,
    RatingChangeRecord,
    compute_monthly_awards,
    month_bounds,
    previous_month,
)

__all__ = [
    "AwardSet",
    "MatchRecord",
    "MonthlyAwardResult",
    "RatingChangeRecord",
    "compute_monthly_awards",
    "month_bounds",
    "previous_month",
]
