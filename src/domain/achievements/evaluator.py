"""Decide which achievements a processed match unlocks."""

from __future__ import annotations

from collections.abc import Iterable

from domain.achievements.catalog import (
    CRAWLS_CAUSED,
    CRAWLS_RECEIVED,
    GAMES_MILESTONES,
    GLASS_CANNON_MIN_AVERAGE,
    GLASS_CANNON_MIN_CRAWLS,
    GLASS_CANNON_MIN_GAMES,
    GOALS_MILESTONES,
    LOSS_STREAKS,
    NEVER_CRAWLED,
    RATING_BANDS,
    SCORING_AVERAGES,
    STREAK_BREAKERS,
    WIN_MILESTONES,
    WIN_STREAKS,
    AchievementKind,
)
from domain.common import MatchOutcome, PlayerSnapshot
from domain.errors import ContractViolation


class AchievementEvaluator:
    """Stateless threshold checks against post-match player stats.

    Results may include achievements the player already owns; callers filter
    those out before persisting.
    """

    def evaluate(
        self,
        player: PlayerSnapshot,
        outcome: MatchOutcome | None = None,
    ) -> frozenset[AchievementKind]:
        """Return every achievement the player's post-match stats qualify for.

        Without an outcome the player is re-evaluated as-is: rating and goal
        crossings need a match to have moved the value, so they never fire.
        """
        if not isinstance(player, PlayerSnapshot):
            raise ContractViolation(f"expected PlayerSnapshot, got {type(player).__name__}")

        rating_delta = 0
        goals_this_match = 0
        if outcome is not None:
            if player.id not in outcome.rating_changes:
                raise ContractViolation(f"player_id={player.id} has no rating change in this outcome")
            rating_delta = outcome.rating_changes[player.id]
            goals_this_match = outcome.goals_for(player.id)

        unlocked: set[AchievementKind] = set()
        games = player.games_played

        if player.wins == 1:
            unlocked.add(AchievementKind.FIRST_WIN)
        unlocked.update(_exact(player.wins, WIN_MILESTONES))
        unlocked.update(_exact(games, GAMES_MILESTONES))
        unlocked.update(_crossed(player.goals_scored - goals_this_match, player.goals_scored, GOALS_MILESTONES))
        unlocked.update(_crossed(player.rating - rating_delta, player.rating, RATING_BANDS))

        unlocked.update(_exact(player.current_win_streak, WIN_STREAKS))
        unlocked.update(_exact(player.current_loss_streak, LOSS_STREAKS))

        unlocked.update(_exact(player.crawls, CRAWLS_RECEIVED))
        unlocked.update(_exact(player.crawls_caused, CRAWLS_CAUSED))

        average_goals = player.goals_scored / games if games else 0.0
        for kind, (min_games, min_average) in SCORING_AVERAGES.items():
            if games >= min_games and average_goals >= min_average:
                unlocked.add(kind)
        for min_games, kind in NEVER_CRAWLED.items():
            if games >= min_games and player.crawls == 0:
                unlocked.add(kind)
        if (
            games >= GLASS_CANNON_MIN_GAMES
            and average_goals >= GLASS_CANNON_MIN_AVERAGE
            and player.crawls >= GLASS_CANNON_MIN_CRAWLS
        ):
            unlocked.add(AchievementKind.GLASS_CANNON)

        if (
            outcome is not None
            and outcome.is_crawl_game
            and not outcome.player_won(player.id)
            and player.crawls == 1
        ):
            unlocked.add(AchievementKind.CRAWLER)

        return frozenset(unlocked)

    def evaluate_streak_stoppers(
        self,
        winning_players: Iterable[PlayerSnapshot],
        losing_players: Iterable[PlayerSnapshot],
    ) -> dict[int, frozenset[AchievementKind]]:
        """Reward winners for ending the longest win streak on the losing side.

        ``losing_players`` must be pre-match snapshots, before their streaks
        were reset by the loss.
        """
        longest_streak = max((player.current_win_streak for player in losing_players), default=0)
        for threshold, kind in STREAK_BREAKERS:
            if longest_streak >= threshold:
                return {player.id: frozenset({kind}) for player in winning_players}
        return {}


def _exact(value: int, table: dict[int, AchievementKind]) -> set[AchievementKind]:
    kind = table.get(value)
    return {kind} if kind is not None else set()


def _crossed(before: int, after: int, table: dict[int, AchievementKind]) -> set[AchievementKind]:
    return {kind for threshold, kind in table.items() if before < threshold <= after}


__all__ = ["AchievementEvaluator"]
