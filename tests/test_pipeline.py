"""Integration tests for the match and monthly award pipelines on SQLite."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.achievements.catalog import CATALOG, AchievementKind
from domain.errors import AchievementNotOwned, InvalidMatchScore, PlayerNotFound
from domain.pipeline import available_months, calculate_monthly_awards, record_match
from domain.protocol import (
    AchievementStore,
    AwardType,
    GameMode,
    MatchStore,
    MonthlyAwardStore,
    PlayerStore,
)
from models.achievement import Achievement, PlayerAchievement
from models.match import Match, MatchPlayerRating
from models.monthly_award import MonthlyAward
from models.player import Player
from notifications.mattermost import MatchNotification
from repositories import (
    ACHIEVEMENT_REPOSITORY,
    DEFAULT_REPOSITORIES,
    MONTHLY_AWARD_REPOSITORY,
    PLAYER_REPOSITORY,
    ensure_schema,
)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[MatchNotification] = []

    def notify_match(self, notification: MatchNotification) -> bool:
        self.notifications.append(notification)
        return True


@pytest.fixture()
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'league.db'}")
    ensure_schema(engine)
    factory = create_session_factory(engine)
    with factory() as session:
        ACHIEVEMENT_REPOSITORY.seed_catalog(session)
        for name in ("anna", "bram", "cees", "daan"):
            PLAYER_REPOSITORY.create(session, name=name, initial_rating=1200)
        session.commit()
    return factory


def player_ids(factory: sessionmaker[Session]) -> dict[str, int]:
    with factory() as session:
        return {row.name: row.id for row in session.execute(select(Player)).scalars()}


def unlocked_names(factory: sessionmaker[Session], player_id: int) -> set[str]:
    with factory() as session:
        statement = (
            select(Achievement.name)
            .join(PlayerAchievement, PlayerAchievement.achievement_id == Achievement.id)
            .where(PlayerAchievement.player_id == player_id)
        )
        return set(session.execute(statement).scalars())


def test_seed_catalog_is_idempotent(session_factory: sessionmaker[Session]) -> None:
    with session_factory() as session:
        assert ACHIEVEMENT_REPOSITORY.seed_catalog(session) == 0
        session.commit()
        count = session.execute(select(func.count()).select_from(Achievement)).scalar_one()
    assert count == len(CATALOG)


def test_record_team_blowout_persists_everything(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    notifier = RecordingNotifier()
    messages: list[str] = []

    summary = record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"], ids["bram"]],
        team2_ids=[ids["cees"], ids["daan"]],
        score1=10,
        score2=0,
        played_at=datetime(2024, 3, 5, 12, 0, 0),
        notifier=notifier,
        echo=messages.append,
    )

    assert summary.match_id is not None
    assert summary.game_mode is GameMode.CLASSIC
    assert summary.total_rating_change == 80
    assert summary.is_crawl_game is True
    assert summary.notified is True
    assert summary.unlocked[ids["anna"]] == (AchievementKind.DESTROYER, AchievementKind.FIRST_WIN)
    assert summary.unlocked[ids["cees"]] == (AchievementKind.CRAWLER,)
    assert messages and messages[-1].startswith(f"completed match_id={summary.match_id}")

    with session_factory() as session:
        players = {row.name: row for row in session.execute(select(Player)).scalars()}
        match = session.get(Match, summary.match_id)
        changes = session.execute(select(MatchPlayerRating)).scalars().all()

    assert players["anna"].rating == 1220
    assert players["anna"].crawls_caused == 1
    assert players["anna"].current_win_streak == 1
    assert players["cees"].rating == 1180
    assert players["cees"].highest_rating == 1200
    assert players["cees"].crawls == 1
    assert players["daan"].goals_conceded == 10
    assert match is not None
    assert match.team1_player2_id == ids["bram"]
    assert match.total_rating_change == 80
    assert match.is_crawl_game is True
    assert match.game_mode == "classic"
    assert sorted(change.rating_change for change in changes) == [-20, -20, 20, 20]

    assert unlocked_names(session_factory, ids["bram"]) == {"First Win", "Destroyer"}
    assert unlocked_names(session_factory, ids["daan"]) == {"Crawler"}

    assert len(notifier.notifications) == 1
    notification = notifier.notifications[0]
    assert notification.team1_names == ("anna", "bram")
    assert notification.team2_names == ("cees", "daan")
    assert notification.is_crawl_game is True
    assert len(notification.achievements) == 6


class FailingNotifier:
    def notify_match(self, notification: MatchNotification) -> bool:
        raise RuntimeError("chat backend down")


def test_failing_notifier_does_not_fail_recorded_match(
    session_factory: sessionmaker[Session],
    caplog: pytest.LogCaptureFixture,
) -> None:
    ids = player_ids(session_factory)
    with caplog.at_level(logging.ERROR, logger="domain.pipeline"):
        summary = record_match(
            session_factory=session_factory,
            team1_ids=[ids["anna"]],
            team2_ids=[ids["bram"]],
            score1=10,
            score2=6,
            notifier=FailingNotifier(),
        )

    assert summary.match_id is not None
    assert summary.notified is False
    assert "Failed to send match notification" in caplog.text
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Match)).scalar_one() == 1
        assert session.execute(select(Player.wins).where(Player.id == ids["anna"])).scalar_one() == 1


def test_duel_leaves_partner_columns_empty(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    summary = record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=9,
    )

    assert summary.game_mode is GameMode.DUEL
    with session_factory() as session:
        match = session.get(Match, summary.match_id)
    assert match is not None
    assert match.team1_player2_id is None
    assert match.team2_player2_id is None
    assert match.game_mode == "duel"


def test_dry_run_writes_nothing(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    messages: list[str] = []
    summary = record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=0,
        dry_run=True,
        echo=messages.append,
    )

    assert summary.dry_run is True
    assert summary.match_id is None
    assert summary.unlocked[ids["anna"]] == (AchievementKind.DESTROYER, AchievementKind.FIRST_WIN)
    assert messages[0].startswith("[dry-run]")
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Match)).scalar_one() == 0
        assert session.execute(select(Player.rating).where(Player.id == ids["anna"])).scalar_one() == 1200
        assert session.execute(select(func.count()).select_from(PlayerAchievement)).scalar_one() == 0


def test_unknown_player_is_rejected_without_writes(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    with pytest.raises(PlayerNotFound) as excinfo:
        record_match(
            session_factory=session_factory,
            team1_ids=[ids["anna"]],
            team2_ids=[999],
            score1=10,
            score2=3,
        )
    assert excinfo.value.player_ids == [999]
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Match)).scalar_one() == 0


def test_draw_is_rejected_without_writes(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    with pytest.raises(InvalidMatchScore):
        record_match(
            session_factory=session_factory,
            team1_ids=[ids["anna"]],
            team2_ids=[ids["bram"]],
            score1=5,
            score2=5,
        )
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(Match)).scalar_one() == 0


def test_achievements_are_granted_only_once(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    first = record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=5,
    )
    # anna loses next, so her win count stays at one and First Win qualifies again.
    second = record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["cees"]],
        score1=4,
        score2=10,
    )

    assert AchievementKind.FIRST_WIN in first.unlocked[ids["anna"]]
    assert ids["anna"] not in second.unlocked
    with session_factory() as session:
        first_win_id = session.execute(
            select(Achievement.id).where(Achievement.name == AchievementKind.FIRST_WIN.value)
        ).scalar_one()
        assert ACHIEVEMENT_REPOSITORY.grant(session, ids["anna"], [first_win_id]) == []
        owned = session.execute(
            select(func.count()).select_from(PlayerAchievement).where(PlayerAchievement.player_id == ids["anna"])
        ).scalar_one()
    assert owned == 1


def test_auto_activate_pins_first_unlock(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=5,
        auto_activate=True,
    )
    with session_factory() as session:
        anna = session.get(Player, ids["anna"])
        bram = session.get(Player, ids["bram"])
        first_win_id = session.execute(
            select(Achievement.id).where(Achievement.name == AchievementKind.FIRST_WIN.value)
        ).scalar_one()
    assert anna is not None and anna.active_achievement_id == first_win_id
    assert bram is not None and bram.active_achievement_id is None


def test_streak_stopper_is_awarded_to_winners(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    for _ in range(3):
        record_match(
            session_factory=session_factory,
            team1_ids=[ids["anna"]],
            team2_ids=[ids["bram"]],
            score1=10,
            score2=6,
        )
    summary = record_match(
        session_factory=session_factory,
        team1_ids=[ids["cees"]],
        team2_ids=[ids["anna"]],
        score1=10,
        score2=8,
    )
    assert AchievementKind.STREAK_BREAKER in summary.unlocked[ids["cees"]]


def record_month(factory: sessionmaker[Session], ids: dict[str, int]) -> None:
    record_match(
        session_factory=factory,
        team1_ids=[ids["anna"], ids["bram"]],
        team2_ids=[ids["cees"], ids["daan"]],
        score1=10,
        score2=0,
        played_at=datetime(2024, 3, 5, 12, 0, 0),
    )
    record_match(
        session_factory=factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["cees"]],
        score1=10,
        score2=7,
        played_at=datetime(2024, 3, 20, 18, 30, 0),
    )
    record_match(
        session_factory=factory,
        team1_ids=[ids["bram"]],
        team2_ids=[ids["daan"]],
        score1=10,
        score2=4,
        played_at=datetime(2024, 4, 1, 0, 0, 0),
    )


def test_monthly_awards_are_replaced_idempotently(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_month(session_factory, ids)

    first = calculate_monthly_awards(session_factory=session_factory, year=2024, month=3)
    second = calculate_monthly_awards(session_factory=session_factory, year=2024, month=3)

    assert first.success is True
    assert first.inserted_awards == second.inserted_awards
    assert first.award_set == second.award_set

    with session_factory() as session:
        stored = MONTHLY_AWARD_REPOSITORY.fetch_period(session, 2024, 3)
        row_count = session.execute(select(func.count()).select_from(MonthlyAward)).scalar_one()
    assert row_count == second.inserted_awards
    assert sorted(stored, key=repr) == sorted(second.award_set.awards, key=repr)

    player_of_month = second.award_set.by_type(AwardType.PLAYER_OF_MONTH)
    assert [award.player_id for award in player_of_month] == [ids["anna"]]
    most_active = second.award_set.by_type(AwardType.MOST_ACTIVE)
    assert [award.player_id for award in most_active] == sorted([ids["anna"], ids["cees"]])
    game = second.award_set.by_type(AwardType.GAME_OF_MONTH)
    assert game[0].value == 80


def test_month_without_matches_is_not_an_error(session_factory: sessionmaker[Session]) -> None:
    summary = calculate_monthly_awards(session_factory=session_factory, year=2023, month=1)
    assert summary.success is True
    assert summary.award_set.no_matches is True
    assert summary.inserted_awards == 0
    assert summary.message == "No matches found for 2023-01"


def test_dry_run_awards_are_not_stored(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_month(session_factory, ids)
    summary = calculate_monthly_awards(session_factory=session_factory, year=2024, month=3, dry_run=True)
    assert summary.dry_run is True
    assert summary.award_set.awards
    with session_factory() as session:
        assert session.execute(select(func.count()).select_from(MonthlyAward)).scalar_one() == 0


def test_available_months(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_month(session_factory, ids)
    assert available_months(session_factory=session_factory) == ["2024-03", "2024-04"]


def test_leaderboard_orders_by_rating(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_match(
        session_factory=session_factory,
        team1_ids=[ids["bram"]],
        team2_ids=[ids["anna"]],
        score1=10,
        score2=2,
    )
    with session_factory() as session:
        everyone = PLAYER_REPOSITORY.top(session, limit=10)
        active = PLAYER_REPOSITORY.top(session, limit=10, min_games=1)

    assert [player.name for player in everyone] == ["bram", "cees", "daan", "anna"]
    assert [player.name for player in active] == ["bram", "anna"]


def test_default_repositories_satisfy_store_protocols() -> None:
    assert isinstance(DEFAULT_REPOSITORIES.players, PlayerStore)
    assert isinstance(DEFAULT_REPOSITORIES.matches, MatchStore)
    assert isinstance(DEFAULT_REPOSITORIES.achievements, AchievementStore)
    assert isinstance(DEFAULT_REPOSITORIES.monthly_awards, MonthlyAwardStore)


def test_unlocks_are_stamped_with_match_time(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    played_at = datetime(2024, 3, 5, 12, 0, 0)
    record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=5,
        played_at=played_at,
    )
    with session_factory() as session:
        unlocked = ACHIEVEMENT_REPOSITORY.unlocked(session, ids["anna"])
        match_time = session.execute(select(Match.created_at)).scalar_one()

    assert [achievement.name for achievement in unlocked] == ["First Win"]
    assert unlocked[0].unlocked_at == played_at == match_time
    assert unlocked[0].is_active is False


def test_rows_without_explicit_time_use_application_clock(session_factory: sessionmaker[Session]) -> None:
    before = datetime.now()
    with session_factory() as session:
        snapshot = PLAYER_REPOSITORY.create(session, name="eef", initial_rating=1200)
        session.commit()
        created_at = session.execute(select(Player.created_at).where(Player.id == snapshot.id)).scalar_one()
    after = datetime.now()
    assert before <= created_at <= after


def test_player_can_pin_and_clear_owned_achievement(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    record_match(
        session_factory=session_factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=5,
    )
    with session_factory() as session:
        first_win_id = ACHIEVEMENT_REPOSITORY.find_id(session, AchievementKind.FIRST_WIN.value)
        assert first_win_id is not None
        ACHIEVEMENT_REPOSITORY.set_active(session, ids["anna"], first_win_id)
        session.commit()
        pinned = ACHIEVEMENT_REPOSITORY.unlocked(session, ids["anna"])
        assert [achievement.is_active for achievement in pinned] == [True]

        ACHIEVEMENT_REPOSITORY.set_active(session, ids["anna"], None)
        session.commit()
        assert session.get(Player, ids["anna"]).active_achievement_id is None


def test_pinning_unowned_achievement_is_rejected(session_factory: sessionmaker[Session]) -> None:
    ids = player_ids(session_factory)
    with session_factory() as session:
        first_win_id = ACHIEVEMENT_REPOSITORY.find_id(session, AchievementKind.FIRST_WIN.value)
        assert first_win_id is not None
        with pytest.raises(AchievementNotOwned) as excinfo:
            ACHIEVEMENT_REPOSITORY.set_active(session, ids["bram"], first_win_id)
        session.rollback()
        assert session.get(Player, ids["bram"]).active_achievement_id is None
    assert excinfo.value.achievement_id == first_win_id
    with session_factory() as session:
        assert ACHIEVEMENT_REPOSITORY.find_id(session, "No Such Achievement") is None
        assert ACHIEVEMENT_REPOSITORY.unlocked(session, ids["bram"]) == []
