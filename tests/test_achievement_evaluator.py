"""Unit tests for achievement evaluation and the achievement catalog."""

from __future__ import annotations

import pytest

from domain.achievements.catalog import CATALOG, AchievementKind, get_definition
from domain.achievements.evaluator import AchievementEvaluator
from domain.common import MatchOutcome, PlayerSnapshot, Side
from domain.errors import ContractViolation
from domain.protocol import AchievementCategory, GameMode
from domain.ratings.match_processor import MatchProcessor, progress_player


def make_player(player_id: int, rating: int = 1200, **stats: int) -> PlayerSnapshot:
    return PlayerSnapshot(id=player_id, name=f"player_{player_id}", rating=rating, highest_rating=rating, **stats)


def make_duel_outcome(
    player: PlayerSnapshot,
    opponent: PlayerSnapshot,
    *,
    score: tuple[int, int],
    rating_delta: int,
    crawl: bool = False,
) -> MatchOutcome:
    return MatchOutcome(
        side1=Side(players=(player,)),
        side2=Side(players=(opponent,)),
        score1=score[0],
        score2=score[1],
        game_mode=GameMode.DUEL,
        side_deltas=(rating_delta, -rating_delta),
        rating_changes={player.id: rating_delta, opponent.id: -rating_delta},
        is_crawl_game=crawl,
        total_rating_change=2 * abs(rating_delta),
    )


def test_catalog_covers_every_kind() -> None:
    assert set(CATALOG) == set(AchievementKind)
    assert len({definition.name for definition in CATALOG.values()}) == len(AchievementKind)


def test_catalog_definition_fields() -> None:
    definition = get_definition(AchievementKind.RISING_STAR)
    assert definition.name == "Rising Star"
    assert definition.category is AchievementCategory.RATING
    assert definition.requirement_type == "rating"
    assert definition.requirement_value == 1300


def test_first_win_after_first_victory() -> None:
    winner = make_player(1)
    outcome = MatchProcessor().process_duel(winner, make_player(2), 10, 6)
    updated, _ = progress_player(winner, outcome)

    unlocked = AchievementEvaluator().evaluate(updated, outcome)
    assert AchievementKind.FIRST_WIN in unlocked


def test_rating_crossing_fires_once() -> None:
    evaluator = AchievementEvaluator()
    player = make_player(1, rating=1310, wins=3, losses=2, goals_scored=30)
    outcome = make_duel_outcome(player, make_player(2), score=(10, 4), rating_delta=15)

    assert AchievementKind.RISING_STAR in evaluator.evaluate(player, outcome)
    assert AchievementKind.RISING_STAR not in evaluator.evaluate(player)

    later = make_player(1, rating=1315, wins=4, losses=2, goals_scored=40)
    next_outcome = make_duel_outcome(later, make_player(2), score=(10, 7), rating_delta=5)
    assert AchievementKind.RISING_STAR not in evaluator.evaluate(later, next_outcome)


def test_rating_crossing_multiple_bands_in_one_match() -> None:
    player = make_player(1, rating=1510, wins=9, losses=1, goals_scored=30)
    outcome = make_duel_outcome(player, make_player(2), score=(10, 0), rating_delta=220)
    unlocked = AchievementEvaluator().evaluate(player, outcome)
    assert {AchievementKind.RISING_STAR, AchievementKind.ELITE_PLAYER} <= unlocked
    assert AchievementKind.LEGEND not in unlocked


def test_goal_milestone_crossed_by_match_goals() -> None:
    player = make_player(1, goals_scored=55, wins=5, losses=1)
    outcome = make_duel_outcome(player, make_player(2), score=(10, 2), rating_delta=10)
    assert AchievementKind.SHARPSHOOTER in AchievementEvaluator().evaluate(player, outcome)

    already_past = make_player(1, goals_scored=65, wins=6, losses=1)
    outcome = make_duel_outcome(already_past, make_player(2), score=(10, 2), rating_delta=10)
    assert AchievementKind.SHARPSHOOTER not in AchievementEvaluator().evaluate(already_past, outcome)


@pytest.mark.parametrize(
    ("streak", "kind"),
    [
        (3, AchievementKind.HAT_TRICK),
        (5, AchievementKind.PENTAKILL),
        (10, AchievementKind.UNSTOPPABLE),
        (15, AchievementKind.JUGGERNAUT),
        (20, AchievementKind.GODLIKE),
    ],
)
def test_win_streak_thresholds_are_exact(streak: int, kind: AchievementKind) -> None:
    evaluator = AchievementEvaluator()
    on_threshold = make_player(1, wins=streak, current_win_streak=streak, best_win_streak=streak)
    past_threshold = make_player(1, wins=streak + 1, current_win_streak=streak + 1, best_win_streak=streak + 1)
    assert kind in evaluator.evaluate(on_threshold)
    assert kind not in evaluator.evaluate(past_threshold)


def test_loss_streak_threshold() -> None:
    player = make_player(1, losses=5, current_loss_streak=5)
    assert AchievementKind.COLD_STREAK in AchievementEvaluator().evaluate(player)


def test_win_and_games_milestones() -> None:
    player = make_player(1, wins=25, losses=25)
    unlocked = AchievementEvaluator().evaluate(player)
    assert AchievementKind.SERIAL_WINNER in unlocked
    assert AchievementKind.VETERAN in unlocked
    assert AchievementKind.FIRST_WIN not in unlocked


def test_crawler_on_first_crawl_loss() -> None:
    loser = make_player(2)
    outcome = MatchProcessor().process_duel(make_player(1), loser, 10, 0)
    updated, _ = progress_player(loser, outcome)

    unlocked = AchievementEvaluator().evaluate(updated, outcome)
    assert AchievementKind.CRAWLER in unlocked


def test_destroyer_for_first_crawl_caused() -> None:
    winner = make_player(1)
    outcome = MatchProcessor().process_duel(winner, make_player(2), 10, 1)
    updated, _ = progress_player(winner, outcome)
    assert AchievementKind.DESTROYER in AchievementEvaluator().evaluate(updated, outcome)


def test_scoring_average_and_never_crawled() -> None:
    player = make_player(1, wins=20, losses=5, goals_scored=230)
    unlocked = AchievementEvaluator().evaluate(player)
    assert AchievementKind.SNIPER in unlocked
    assert AchievementKind.DEADEYE in unlocked
    assert AchievementKind.STANDING_TALL in unlocked
    assert AchievementKind.IRON_KNEES not in unlocked


def test_glass_cannon_needs_goals_and_crawls() -> None:
    player = make_player(1, wins=6, losses=6, goals_scored=90, crawls=3)
    unlocked = AchievementEvaluator().evaluate(player)
    assert AchievementKind.GLASS_CANNON in unlocked
    assert AchievementKind.STANDING_TALL not in unlocked


def test_streak_stopper_awards_highest_tier_only() -> None:
    winners = [make_player(1), make_player(2)]
    losers = [make_player(3, current_win_streak=12, best_win_streak=12), make_player(4, current_win_streak=4)]
    stoppers = AchievementEvaluator().evaluate_streak_stoppers(winners, losers)
    assert stoppers == {
        1: frozenset({AchievementKind.GIANT_SLAYER}),
        2: frozenset({AchievementKind.GIANT_SLAYER}),
    }


def test_short_streaks_are_not_worth_stopping() -> None:
    stoppers = AchievementEvaluator().evaluate_streak_stoppers(
        [make_player(1)],
        [make_player(2, current_win_streak=2, best_win_streak=2)],
    )
    assert stoppers == {}


def test_player_outside_outcome_is_a_contract_violation() -> None:
    outcome = make_duel_outcome(make_player(1), make_player(2), score=(10, 5), rating_delta=10)
    with pytest.raises(ContractViolation):
        AchievementEvaluator().evaluate(make_player(9), outcome)


def test_non_snapshot_is_a_contract_violation() -> None:
    with pytest.raises(ContractViolation):
        AchievementEvaluator().evaluate({"id": 1, "rating": 1200})  # type: ignore[arg-type]


def test_snapshot_from_mapping_requires_stat_fields() -> None:
    with pytest.raises(ContractViolation):
        PlayerSnapshot.from_mapping({"id": 1, "name": "anna", "rating": 1200, "highest_rating": 1200})


def test_snapshot_from_mapping_rejects_null_stats() -> None:
    raw = {
        "id": 1,
        "name": "anna",
        "rating": 1200,
        "highest_rating": 1200,
        "goals_scored": 0,
        "goals_conceded": 0,
        "wins": None,
        "losses": 0,
        "current_win_streak": 0,
        "current_loss_streak": 0,
        "best_win_streak": 0,
        "crawls": 0,
        "crawls_caused": 0,
    }
    with pytest.raises(ContractViolation):
        PlayerSnapshot.from_mapping(raw)
