#!/usr/bin/env python3
"""Show the current league standings."""

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
from repositories import PLAYER_REPOSITORY, ensure_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Query the league leaderboard.",
)


@app.command()
def show_leaderboard(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to return."),
    ] = 20,
    min_games: Annotated[
        int,
        typer.Option("--min-games", help="Hide players with fewer games than this."),
    ] = 0,
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            envvar="DATABASE_URL",
            help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print players by rating with their win/loss record and streaks."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    if min_games < 0:
        raise typer.BadParameter("--min-games must be >= 0")

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        players = PLAYER_REPOSITORY.top(session, limit=top_n, min_games=min_games)

    if not players:
        typer.echo(f"No players found with min_games={min_games}.")
        return

    typer.echo(f"top_n={top_n} min_games={min_games}")
    for index, player in enumerate(players, start=1):
        typer.echo(
            f"{index:2d}. {player.name:<20} "
            f"rating={player.rating:5d} peak={player.highest_rating:5d} "
            f"w/l={player.wins}/{player.losses} "
            f"streak={player.current_win_streak} crawls={player.crawls}"
        )


if __name__ == "__main__":
    app()
