"""Monthly award computation over one calendar month of match history."""

from __future__ import annotations

import calendar
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from domain.protocol import AwardType, GameMode


@dataclass(frozen=True)
class MatchRecord:
    """Stored match as read back for aggregation."""

    id: int
    played_at: datetime
    team1_player_ids: tuple[int, ...]
    team2_player_ids: tuple[int, ...]
    team1_score: int
    team2_score: int
    is_crawl_game: bool
    total_rating_change: int
    game_mode: GameMode = GameMode.CLASSIC

    @property
    def team1_won(self) -> bool:
        return self.team1_score > self.team2_score


@dataclass(frozen=True)
class RatingChangeRecord:
    """Stored per-player rating change row."""

    match_id: int
    player_id: int
    previous_rating: int
    new_rating: int
    rating_change: int
    created_at: datetime


@dataclass
class PlayerMonthlyStats:
    player_id: int
    matches_played: int = 0
    rating_start: int = 0
    rating_end: int = 0
    rating_growth: int = 0
    crawls_received: int = 0
    crawls_caused: int = 0


@dataclass(frozen=True)
class MonthlyAwardResult:
    award_type: AwardType
    value: int
    description: str
    player_id: int | None = None
    match_id: int | None = None


@dataclass(frozen=True)
class AwardSet:
    year: int
    month: int
    awards: tuple[MonthlyAwardResult, ...] = ()
    no_matches: bool = False
    player_stats: dict[int, PlayerMonthlyStats] = field(default_factory=dict, compare=False)

    def by_type(self, award_type: AwardType) -> list[MonthlyAwardResult]:
        return [award for award in self.awards if award.award_type is award_type]


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the half-open [start, end) datetime window of one month."""
    if month < 1 or month > 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    return start, start + timedelta(days=days_in_month)


def previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def compute_monthly_awards(
    year: int,
    month: int,
    matches: Sequence[MatchRecord],
    rating_changes: Sequence[RatingChangeRecord],
    current_ratings: Mapping[int, int] | None = None,
) -> AwardSet:
    """Crown the month's winners from pre-filtered match and rating history.

    Player awards list every co-winner sharing the top value (ordered by
    player id). The game of the month goes to the earliest of equally
    impactful matches.
    """
    if not matches:
        return AwardSet(year=year, month=month, no_matches=True)

    stats = build_player_stats(matches, rating_changes, current_ratings or {})
    awards = [
        *_player_of_month(stats),
        *_most_active(stats),
        *_crawler_of_month(stats),
        *_game_of_month(matches),
    ]
    return AwardSet(year=year, month=month, awards=tuple(awards), player_stats=stats)


def build_player_stats(
    matches: Sequence[MatchRecord],
    rating_changes: Sequence[RatingChangeRecord],
    current_ratings: Mapping[int, int],
) -> dict[int, PlayerMonthlyStats]:
    stats: dict[int, PlayerMonthlyStats] = {}

    def entry(player_id: int) -> PlayerMonthlyStats:
        if player_id not in stats:
            current = current_ratings.get(player_id, 0)
            stats[player_id] = PlayerMonthlyStats(player_id=player_id, rating_start=current, rating_end=current)
        return stats[player_id]

    for match in matches:
        sides = (
            (match.team1_player_ids, match.team1_won),
            (match.team2_player_ids, not match.team1_won),
        )
        for player_ids, won in sides:
            for player_id in player_ids:
                player_stats = entry(player_id)
                player_stats.matches_played += 1
                if match.is_crawl_game:
                    if won:
                        player_stats.crawls_caused += 1
                    else:
                        player_stats.crawls_received += 1

    ordered_changes = sorted(rating_changes, key=lambda change: (change.created_at, change.match_id))
    seen: set[int] = set()
    for change in ordered_changes:
        player_stats = entry(change.player_id)
        if change.player_id not in seen:
            seen.add(change.player_id)
            player_stats.rating_start = change.previous_rating
            player_stats.rating_growth = 0
        player_stats.rating_growth += change.rating_change
        player_stats.rating_end = player_stats.rating_start + player_stats.rating_growth

    return stats


def _leaders(
    candidates: Sequence[PlayerMonthlyStats],
    metric: Callable[[PlayerMonthlyStats], int],
) -> tuple[int, list[PlayerMonthlyStats]]:
    best = max(metric(candidate) for candidate in candidates)
    leaders = sorted(
        (candidate for candidate in candidates if metric(candidate) == best),
        key=lambda candidate: candidate.player_id,
    )
    return best, leaders


def _player_of_month(stats: Mapping[int, PlayerMonthlyStats]) -> list[MonthlyAwardResult]:
    candidates = [player for player in stats.values() if player.matches_played > 0]
    if not candidates:
        return []
    best, leaders = _leaders(candidates, lambda player: player.rating_growth)
    if best <= 0:
        return []
    return [
        MonthlyAwardResult(
            award_type=AwardType.PLAYER_OF_MONTH,
            player_id=player.player_id,
            value=player.rating_growth,
            description=f"Grew from {player.rating_start} to {player.rating_end} (+{player.rating_growth})",
        )
        for player in leaders
    ]


def _most_active(stats: Mapping[int, PlayerMonthlyStats]) -> list[MonthlyAwardResult]:
    if not stats:
        return []
    best, leaders = _leaders(list(stats.values()), lambda player: player.matches_played)
    if best == 0:
        return []
    return [
        MonthlyAwardResult(
            award_type=AwardType.MOST_ACTIVE,
            player_id=player.player_id,
            value=player.matches_played,
            description=f"{player.matches_played} matches played",
        )
        for player in leaders
    ]


def _crawler_of_month(stats: Mapping[int, PlayerMonthlyStats]) -> list[MonthlyAwardResult]:
    candidates = [player for player in stats.values() if player.crawls_received > 0]
    if not candidates:
        return []
    _, leaders = _leaders(candidates, lambda player: player.crawls_received)
    return [
        MonthlyAwardResult(
            award_type=AwardType.CRAWLER_OF_MONTH,
            player_id=player.player_id,
            value=player.crawls_received,
            description=f"Crawled under the table {player.crawls_received} times",
        )
        for player in leaders
    ]


def _game_of_month(matches: Sequence[MatchRecord]) -> list[MonthlyAwardResult]:
    ordered = sorted(matches, key=lambda match: (match.played_at, match.id))
    winner = ordered[0]
    for match in ordered[1:]:
        if match.total_rating_change > winner.total_rating_change:
            winner = match
    if winner.total_rating_change <= 0:
        return []
    return [
        MonthlyAwardResult(
            award_type=AwardType.GAME_OF_MONTH,
            match_id=winner.id,
            value=winner.total_rating_change,
            description=(
                f"{winner.team1_score}-{winner.team2_score} match with a rating impact "
                f"of {winner.total_rating_change}"
            ),
        )
    ]


__all__ = [
    "AwardSet",
    "MatchRecord",
    "MonthlyAwardResult",
    "PlayerMonthlyStats",
    "RatingChangeRecord",
    "build_player_stats",
    "compute_monthly_awards",
    "month_bounds",
    "previous_month",
]
