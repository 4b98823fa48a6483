#!/usr/bin/env python3
"""Create league tables, seed the achievement catalog and register players."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.exc import IntegrityError

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.config_base import select_config
from domain.ratings.config import load_rating_system_configs
from logging_config import setup_logging
from repositories import ACHIEVEMENT_REPOSITORY, PLAYER_REPOSITORY, ensure_schema

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "rating"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="League database setup commands.",
)


@app.command()
def init(
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            envvar="DATABASE_URL",
            help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging.")] = False,
) -> None:
    """Create missing tables and upsert the achievement catalog."""
    setup_logging(debug)
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            inserted = ACHIEVEMENT_REPOSITORY.seed_catalog(session)
            session.commit()
        except Exception:
            session.rollback()
            raise

    typer.echo(f"schema=ready inserted_achievements={inserted}")


@app.command()
def add_player(
    name: Annotated[str, typer.Argument(help="Display name, unique across the league.")],
    initial_rating: Annotated[
        int | None,
        typer.Option(
            "--initial-rating",
            help="Starting rating. Defaults to the selected rating config.",
        ),
    ] = None,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory holding rating TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str | None,
        typer.Option("--config-name", help="Optional config filename (for example: default.toml)."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            envvar="DATABASE_URL",
            help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
) -> None:
    """Register a new player."""
    name = name.strip()
    if not name:
        raise typer.BadParameter("player name must not be empty", param_hint="NAME")

    if initial_rating is None:
        try:
            config = select_config(load_rating_system_configs(config_dir), config_name)
        except (FileNotFoundError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--config-dir/--config-name") from exc
        initial_rating = config.parameters.initial_rating
    if initial_rating < 0:
        raise typer.BadParameter("--initial-rating must be >= 0")

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            player = PLAYER_REPOSITORY.create(session, name=name, initial_rating=initial_rating)
            session.commit()
        except IntegrityError:
            session.rollback()
            typer.echo(f"player '{name}' already exists", err=True)
            raise typer.Exit(code=1)
        except Exception:
            session.rollback()
            raise

    typer.echo(f"player_id={player.id} name={player.name} rating={player.rating}")


if __name__ == "__main__":
    app()
