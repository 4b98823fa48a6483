"""Tests for the player achievement commands."""

from __future__ import annotations

import importlib.util
from datetime import datetime
from pathlib import Path
from types import ModuleType

import pytest
from typer.testing import CliRunner

from db import create_db_engine, create_session_factory
from domain.pipeline import record_match
from models.player import Player
from repositories import ACHIEVEMENT_REPOSITORY, PLAYER_REPOSITORY, ensure_schema

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "player_achievements.py"

runner = CliRunner()


def load_script() -> ModuleType:
    module_spec = importlib.util.spec_from_file_location("player_achievements", SCRIPT_PATH)
    assert module_spec is not None and module_spec.loader is not None
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture()
def league(tmp_path: Path) -> tuple[str, dict[str, int]]:
    db_url = f"sqlite:///{tmp_path / 'league.db'}"
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    factory = create_session_factory(engine)
    with factory() as session:
        ACHIEVEMENT_REPOSITORY.seed_catalog(session)
        ids = {
            name: PLAYER_REPOSITORY.create(session, name=name, initial_rating=1200).id
            for name in ("anna", "bram")
        }
        session.commit()
    record_match(
        session_factory=factory,
        team1_ids=[ids["anna"]],
        team2_ids=[ids["bram"]],
        score1=10,
        score2=4,
        played_at=datetime(2024, 3, 5, 12, 0, 0),
    )
    return db_url, ids


def active_achievement(db_url: str, player_id: int) -> int | None:
    with create_session_factory(create_db_engine(db_url))() as session:
        return session.get(Player, player_id).active_achievement_id


def test_list_shows_unlocks(league: tuple[str, dict[str, int]]) -> None:
    db_url, ids = league
    app = load_script().app

    result = runner.invoke(app, ["list", "--player", str(ids["anna"]), "--db-url", db_url])
    assert result.exit_code == 0
    assert "First Win" in result.output
    assert "2024-03-05" in result.output

    empty = runner.invoke(app, ["list", "--player", str(ids["bram"]), "--db-url", db_url])
    assert empty.exit_code == 0
    assert "no achievements yet" in empty.output


def test_pin_by_name_then_unpin(league: tuple[str, dict[str, int]]) -> None:
    db_url, ids = league
    app = load_script().app

    result = runner.invoke(
        app, ["pin", "--player", str(ids["anna"]), "--achievement", "First Win", "--db-url", db_url]
    )
    assert result.exit_code == 0
    assert active_achievement(db_url, ids["anna"]) is not None

    listed = runner.invoke(app, ["list", "--player", str(ids["anna"]), "--db-url", db_url])
    assert listed.output.startswith("*")

    cleared = runner.invoke(app, ["unpin", "--player", str(ids["anna"]), "--db-url", db_url])
    assert cleared.exit_code == 0
    assert active_achievement(db_url, ids["anna"]) is None


def test_pin_rejects_achievement_the_player_does_not_own(league: tuple[str, dict[str, int]]) -> None:
    db_url, ids = league
    app = load_script().app

    result = runner.invoke(
        app, ["pin", "--player", str(ids["bram"]), "--achievement", "First Win", "--db-url", db_url]
    )
    assert result.exit_code == 1
    assert active_achievement(db_url, ids["bram"]) is None


def test_pin_rejects_unknown_achievement_name(league: tuple[str, dict[str, int]]) -> None:
    db_url, ids = league
    app = load_script().app

    result = runner.invoke(
        app, ["pin", "--player", str(ids["anna"]), "--achievement", "Table Flipper", "--db-url", db_url]
    )
    assert result.exit_code == 2
    assert active_achievement(db_url, ids["anna"]) is None
