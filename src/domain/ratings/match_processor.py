"""Turn a decided match into per-player rating changes and post-match stats."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from domain.common import MatchOutcome, PlayerRatingChange, PlayerSnapshot, Side
from domain.errors import InvalidMatchRoster, InvalidMatchScore
from domain.protocol import GameMode
from domain.ratings.calculator import (
    RatingParameters,
    calculate_rating_delta,
    is_crawl_game,
    round_half_up,
)


class MatchProcessor:
    """Stateless duel and 2v2 match evaluation for one parameter set."""

    def __init__(self, params: RatingParameters | None = None) -> None:
        self.params = params or RatingParameters()

    def process_duel(
        self,
        player_a: PlayerSnapshot,
        player_b: PlayerSnapshot,
        score_a: int,
        score_b: int,
    ) -> MatchOutcome:
        return self.process_match((player_a,), (player_b,), score_a, score_b)

    def process_team_match(
        self,
        team1: Sequence[PlayerSnapshot],
        team2: Sequence[PlayerSnapshot],
        score1: int,
        score2: int,
    ) -> MatchOutcome:
        if len(team1) != 2 or len(team2) != 2:
            raise InvalidMatchRoster(
                f"team matches need two players per side, got {len(team1)} vs {len(team2)}"
            )
        return self.process_match(team1, team2, score1, score2)

    def process_match(
        self,
        side1_players: Sequence[PlayerSnapshot],
        side2_players: Sequence[PlayerSnapshot],
        score1: int,
        score2: int,
    ) -> MatchOutcome:
        side1 = Side(players=tuple(side1_players))
        side2 = Side(players=tuple(side2_players))
        self._validate_roster(side1, side2)
        self._validate_scores(score1, score2)

        game_mode = GameMode.DUEL if side1.size == 1 else GameMode.CLASSIC
        margin = abs(score1 - score2)
        side1_won = score1 > score2

        delta1 = calculate_rating_delta(
            side1.combined_rating,
            side2.combined_rating,
            margin,
            side1_won,
            _average_streak(side1) if side1_won else 0,
            self.params,
        )
        delta2 = calculate_rating_delta(
            side2.combined_rating,
            side1.combined_rating,
            margin,
            not side1_won,
            _average_streak(side2) if not side1_won else 0,
            self.params,
        )

        rating_changes: dict[int, int] = {}
        for side, side_delta in ((side1, delta1), (side2, delta2)):
            per_player = round_half_up(side_delta / side.size)
            if game_mode is GameMode.DUEL:
                per_player = round_half_up(per_player * self.params.duel_scale_factor)
            for player_id in side.player_ids:
                rating_changes[player_id] = per_player

        return MatchOutcome(
            side1=side1,
            side2=side2,
            score1=score1,
            score2=score2,
            game_mode=game_mode,
            side_deltas=(delta1, delta2),
            rating_changes=rating_changes,
            is_crawl_game=is_crawl_game(
                score1,
                score2,
                target_score=self.params.crawl_target_score,
                min_margin=self.params.crawl_min_margin,
            ),
            total_rating_change=abs(delta1) + abs(delta2),
        )

    def _validate_roster(self, side1: Side, side2: Side) -> None:
        if side1.size == 0 or side2.size == 0:
            raise InvalidMatchRoster("both sides need at least one player")
        if side1.size > 2 or side2.size > 2:
            raise InvalidMatchRoster(f"sides hold at most two players, got {side1.size} vs {side2.size}")
        if side1.size != side2.size:
            raise InvalidMatchRoster(f"sides must be the same size, got {side1.size} vs {side2.size}")

        player_ids = side1.player_ids + side2.player_ids
        if len(player_ids) != len(set(player_ids)):
            raise InvalidMatchRoster(f"a player appears more than once in roster {list(player_ids)}")

    def _validate_scores(self, score1: int, score2: int) -> None:
        if score1 < 0 or score2 < 0:
            raise InvalidMatchScore(f"scores must be non-negative, got {score1}-{score2}")
        if score1 == score2:
            raise InvalidMatchScore(f"a match cannot end in a draw ({score1}-{score2})")


def _average_streak(side: Side) -> int:
    return round_half_up(sum(player.current_win_streak for player in side.players) / side.size)


def progress_player(player: PlayerSnapshot, outcome: MatchOutcome) -> tuple[PlayerSnapshot, PlayerRatingChange]:
    """Apply a processed match to one participant's cumulative stats."""
    won = outcome.player_won(player.id)
    delta = outcome.rating_changes[player.id]
    new_rating = max(0, player.rating + delta)

    if won:
        win_streak = player.current_win_streak + 1
        loss_streak = 0
    else:
        win_streak = 0
        loss_streak = player.current_loss_streak + 1

    updated = replace(
        player,
        rating=new_rating,
        highest_rating=max(player.highest_rating, new_rating),
        goals_scored=player.goals_scored + outcome.goals_for(player.id),
        goals_conceded=player.goals_conceded + outcome.goals_against(player.id),
        wins=player.wins + (1 if won else 0),
        losses=player.losses + (0 if won else 1),
        current_win_streak=win_streak,
        current_loss_streak=loss_streak,
        best_win_streak=max(player.best_win_streak, win_streak),
        crawls=player.crawls + (1 if outcome.is_crawl_game and not won else 0),
        crawls_caused=player.crawls_caused + (1 if outcome.is_crawl_game and won else 0),
    )
    change = PlayerRatingChange(
        player_id=player.id,
        previous_rating=player.rating,
        new_rating=new_rating,
        rating_change=new_rating - player.rating,
    )
    return updated, change


__all__ = ["MatchProcessor", "progress_player"]
