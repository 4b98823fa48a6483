#!/usr/bin/env python3
"""List a player's unlocked achievements and pin one to their profile."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.errors import AchievementNotOwned
from repositories import ACHIEVEMENT_REPOSITORY, ensure_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Player achievement commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="DATABASE_URL",
        help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
    ),
]
PlayerOption = Annotated[int, typer.Option("--player", help="Player id.")]


def _session_factory(db_url: str):
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    return create_session_factory(engine)


@app.command("list")
def list_achievements(player_id: PlayerOption, db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Print the player's unlocked achievements, oldest first; * marks the pinned one."""
    with _session_factory(db_url)() as session:
        unlocked = ACHIEVEMENT_REPOSITORY.unlocked(session, player_id)

    if not unlocked:
        typer.echo(f"player_id={player_id} has no achievements yet.")
        return
    for achievement in unlocked:
        marker = "*" if achievement.is_active else " "
        typer.echo(
            f"{marker} {achievement.achievement_id:>3} {achievement.name:<24} "
            f"{achievement.category:<10} {achievement.unlocked_at:%Y-%m-%d}  {achievement.description}"
        )


@app.command()
def pin(
    player_id: PlayerOption,
    achievement: Annotated[
        str,
        typer.Option("--achievement", help="Achievement id or exact name, for example 'First Win'."),
    ],
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Show one of the player's unlocked achievements on their profile."""
    with _session_factory(db_url)() as session:
        try:
            achievement_id = (
                int(achievement)
                if achievement.isdigit()
                else ACHIEVEMENT_REPOSITORY.find_id(session, achievement)
            )
            if achievement_id is None:
                raise typer.BadParameter(f"unknown achievement '{achievement}'", param_hint="--achievement")
            ACHIEVEMENT_REPOSITORY.set_active(session, player_id, achievement_id)
            session.commit()
        except (AchievementNotOwned, LookupError) as exc:
            session.rollback()
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)
        except Exception:
            session.rollback()
            raise

    typer.echo(f"player_id={player_id} active_achievement_id={achievement_id}")


@app.command()
def unpin(player_id: PlayerOption, db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Clear the player's pinned achievement."""
    with _session_factory(db_url)() as session:
        try:
            ACHIEVEMENT_REPOSITORY.set_active(session, player_id, None)
            session.commit()
        except LookupError as exc:
            session.rollback()
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)
        except Exception:
            session.rollback()
            raise

    typer.echo(f"player_id={player_id} active_achievement_id=None")


if __name__ == "__main__":
    app()
