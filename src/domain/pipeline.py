"""Transactional league pipelines: match submission and monthly awards."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from domain.achievements.catalog import AchievementKind
from domain.achievements.evaluator import AchievementEvaluator
from domain.awards.aggregator import AwardSet, compute_monthly_awards, month_bounds
from domain.common import MatchOutcome, PlayerRatingChange, PlayerSnapshot
from domain.protocol import GameMode, MatchNotifier
from domain.ratings.calculator import RatingParameters
from domain.ratings.match_processor import MatchProcessor, progress_player
from notifications.mattermost import AchievementNotice, MatchNotification
from repositories.definitions import DEFAULT_REPOSITORIES, LeagueRepositories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchSubmissionSummary:
    """Outcome of one recorded (or previewed) match."""

    match_id: int | None
    game_mode: GameMode
    team1_score: int
    team2_score: int
    is_crawl_game: bool
    total_rating_change: int
    rating_changes: tuple[PlayerRatingChange, ...]
    unlocked: dict[int, tuple[AchievementKind, ...]] = field(default_factory=dict)
    notified: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class MonthlyAwardsSummary:
    """Outcome of one monthly award calculation."""

    success: bool
    message: str
    award_set: AwardSet
    inserted_awards: int
    dry_run: bool


def record_match(
    *,
    session_factory,
    team1_ids: Sequence[int],
    team2_ids: Sequence[int],
    score1: int,
    score2: int,
    params: RatingParameters | None = None,
    repositories: LeagueRepositories = DEFAULT_REPOSITORIES,
    played_at: datetime | None = None,
    dry_run: bool = False,
    auto_activate: bool = False,
    notifier: MatchNotifier | None = None,
    echo: Callable[[str], None] | None = None,
) -> MatchSubmissionSummary:
    """Rate one match, persist it with stats and unlocks, then notify.

    Everything up to the commit is one transaction. The participating player
    rows are locked for its duration so concurrent submissions serialise.
    """
    processor = MatchProcessor(params)
    evaluator = AchievementEvaluator()
    played_at = played_at or datetime.now()

    with session_factory() as session:
        try:
            players = repositories.players.get_many(session, [*team1_ids, *team2_ids], lock=True)
            outcome = processor.process_match(
                [players[player_id] for player_id in team1_ids],
                [players[player_id] for player_id in team2_ids],
                score1,
                score2,
            )

            progressed: dict[int, PlayerSnapshot] = {}
            changes: list[PlayerRatingChange] = []
            for player in (*outcome.side1.players, *outcome.side2.players):
                updated, change = progress_player(player, outcome)
                progressed[player.id] = updated
                changes.append(change)

            candidates = _candidate_achievements(evaluator, outcome, progressed)
            kind_ids = repositories.achievements.resolve_ids(
                session, {kind for kinds in candidates.values() for kind in kinds}
            )
            id_kinds = {achievement_id: kind for kind, achievement_id in kind_ids.items()}

            if dry_run:
                unlocked: dict[int, tuple[AchievementKind, ...]] = {}
                for player_id, kinds in candidates.items():
                    owned = repositories.achievements.owned_ids(session, player_id)
                    unlocked[player_id] = _sorted_kinds(
                        kind for kind in kinds if kind in kind_ids and kind_ids[kind] not in owned
                    )
                session.rollback()
                summary = _submission_summary(outcome, changes, unlocked, match_id=None, dry_run=True)
                if echo is not None:
                    echo(f"[dry-run] {_describe_submission(summary)}")
                return summary

            match_id = repositories.matches.insert_match(session, outcome, played_at=played_at)
            repositories.matches.insert_rating_changes(session, match_id, changes, created_at=played_at)
            for updated in progressed.values():
                repositories.players.save(session, updated)

            unlocked = {}
            for player_id, kinds in candidates.items():
                granted = repositories.achievements.grant(
                    session,
                    player_id,
                    [kind_ids[kind] for kind in kinds if kind in kind_ids],
                    unlocked_at=played_at,
                )
                unlocked[player_id] = _sorted_kinds(id_kinds[achievement_id] for achievement_id in granted)
                if auto_activate and granted and progressed[player_id].active_achievement_id is None:
                    repositories.achievements.set_active(session, player_id, granted[0])

            session.commit()
        except Exception:
            session.rollback()
            raise

    summary = _submission_summary(outcome, changes, unlocked, match_id=match_id, dry_run=False)
    logger.info(
        "Recorded match %s: %s-%s mode=%s total_rating_change=%s",
        match_id,
        score1,
        score2,
        outcome.game_mode.value,
        outcome.total_rating_change,
    )

    notified = False
    if notifier is not None:
        # The match is already committed; a broken notifier only costs the message.
        try:
            notified = bool(notifier.notify_match(_match_notification(outcome, unlocked)))
        except Exception:
            logger.exception("Failed to send match notification for match %s", match_id)
    summary = replace(summary, notified=notified)

    if echo is not None:
        echo(f"completed match_id={match_id} {_describe_submission(summary)}")
    return summary


def calculate_monthly_awards(
    *,
    session_factory,
    year: int,
    month: int,
    repositories: LeagueRepositories = DEFAULT_REPOSITORIES,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> MonthlyAwardsSummary:
    """Compute one month's awards and replace whatever was stored for it.

    Re-running for the same month yields the same rows. A month without
    matches is reported, not treated as an error, and leaves stored awards
    untouched.
    """
    start, end = month_bounds(year, month)
    period = f"{year:04d}-{month:02d}"

    with session_factory() as session:
        try:
            matches = repositories.matches.fetch_matches_between(session, start, end)
            rating_changes = repositories.matches.fetch_rating_changes_between(session, start, end)
            player_ids = {
                player_id
                for match in matches
                for player_id in (*match.team1_player_ids, *match.team2_player_ids)
            }
            current_ratings = repositories.players.current_ratings(session, player_ids)
            award_set = compute_monthly_awards(year, month, matches, rating_changes, current_ratings)

            if award_set.no_matches:
                session.rollback()
                logger.info("No matches found for %s, awards left unchanged", period)
                if echo is not None:
                    echo(f"period={period} matches=0 no awards calculated")
                return MonthlyAwardsSummary(
                    success=True,
                    message=f"No matches found for {period}",
                    award_set=award_set,
                    inserted_awards=0,
                    dry_run=dry_run,
                )

            if dry_run:
                session.rollback()
                if echo is not None:
                    echo(f"[dry-run] period={period} matches={len(matches)} awards={len(award_set.awards)}")
                return MonthlyAwardsSummary(
                    success=True,
                    message=f"Calculated {len(award_set.awards)} awards for {period} (not saved)",
                    award_set=award_set,
                    inserted_awards=0,
                    dry_run=True,
                )

            inserted = repositories.monthly_awards.replace_period(session, year, month, award_set.awards)
            session.commit()
        except Exception:
            session.rollback()
            raise

    logger.info("Stored %s monthly awards for %s", inserted, period)
    if echo is not None:
        echo(f"completed period={period} matches={len(matches)} inserted_awards={inserted}")
    return MonthlyAwardsSummary(
        success=True,
        message=f"Calculated {inserted} awards for {period}",
        award_set=award_set,
        inserted_awards=inserted,
        dry_run=False,
    )


def available_months(*, session_factory, repositories: LeagueRepositories = DEFAULT_REPOSITORIES) -> list[str]:
    """Return ``YYYY-MM`` keys of every month with recorded matches."""
    with session_factory() as session:
        return repositories.matches.fetch_active_months(session)


def _candidate_achievements(
    evaluator: AchievementEvaluator,
    outcome: MatchOutcome,
    progressed: dict[int, PlayerSnapshot],
) -> dict[int, frozenset[AchievementKind]]:
    stoppers = evaluator.evaluate_streak_stoppers(
        [progressed[player_id] for player_id in outcome.winning_side.player_ids],
        # Pre-match snapshots, before the loss reset their win streaks.
        outcome.losing_side.players,
    )
    return {
        player_id: evaluator.evaluate(player, outcome) | stoppers.get(player_id, frozenset())
        for player_id, player in progressed.items()
    }


def _sorted_kinds(kinds: Iterable[AchievementKind]) -> tuple[AchievementKind, ...]:
    return tuple(sorted(kinds, key=lambda kind: kind.value))


def _submission_summary(
    outcome: MatchOutcome,
    changes: list[PlayerRatingChange],
    unlocked: dict[int, tuple[AchievementKind, ...]],
    *,
    match_id: int | None,
    dry_run: bool,
) -> MatchSubmissionSummary:
    return MatchSubmissionSummary(
        match_id=match_id,
        game_mode=outcome.game_mode,
        team1_score=outcome.score1,
        team2_score=outcome.score2,
        is_crawl_game=outcome.is_crawl_game,
        total_rating_change=outcome.total_rating_change,
        rating_changes=tuple(changes),
        unlocked={player_id: kinds for player_id, kinds in unlocked.items() if kinds},
        dry_run=dry_run,
    )


def _describe_submission(summary: MatchSubmissionSummary) -> str:
    changes = " ".join(
        f"player_{change.player_id}={change.previous_rating}->{change.new_rating}"
        for change in summary.rating_changes
    )
    unlocked = sum(len(kinds) for kinds in summary.unlocked.values())
    return (
        f"mode={summary.game_mode.value} "
        f"score={summary.team1_score}-{summary.team2_score} "
        f"crawl={summary.is_crawl_game} "
        f"total_rating_change={summary.total_rating_change} "
        f"{changes} "
        f"unlocked_achievements={unlocked}"
    )


def _match_notification(
    outcome: MatchOutcome,
    unlocked: dict[int, tuple[AchievementKind, ...]],
) -> MatchNotification:
    names = {player.id: player.name for player in (*outcome.side1.players, *outcome.side2.players)}
    return MatchNotification(
        team1_names=tuple(player.name for player in outcome.side1.players),
        team2_names=tuple(player.name for player in outcome.side2.players),
        team1_score=outcome.score1,
        team2_score=outcome.score2,
        game_mode=outcome.game_mode,
        total_rating_change=outcome.total_rating_change,
        is_crawl_game=outcome.is_crawl_game,
        achievements=tuple(
            AchievementNotice(player_name=names[player_id], achievement_name=kind.value)
            for player_id, kinds in unlocked.items()
            for kind in kinds
        ),
    )


__all__ = [
    "MatchSubmissionSummary",
    "MonthlyAwardsSummary",
    "available_months",
    "calculate_monthly_awards",
    "record_match",
]
