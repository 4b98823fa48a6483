#!/usr/bin/env python3
"""Calculate, list and show monthly league awards."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.exc import SQLAlchemyError

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.awards.aggregator import MonthlyAwardResult, previous_month
from domain.pipeline import available_months, calculate_monthly_awards
from logging_config import setup_logging
from repositories import MONTHLY_AWARD_REPOSITORY, PLAYER_REPOSITORY, ensure_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Monthly award commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="DATABASE_URL",
        help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
    ),
]
YearOption = Annotated[int, typer.Option("--year", help="Calendar year, for example 2024.")]
MonthOption = Annotated[int, typer.Option("--month", min=1, max=12, help="Calendar month (1-12).")]
DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", help="Compute awards without replacing stored ones."),
]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging.")]


def run_calculation(*, year: int, month: int, db_url: str, dry_run: bool, debug: bool) -> None:
    """Calculate one month and exit 1 only on a computation error."""
    setup_logging(debug)
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    try:
        summary = calculate_monthly_awards(
            session_factory=session_factory,
            year=year,
            month=month,
            dry_run=dry_run,
            echo=typer.echo,
        )
    except SQLAlchemyError as exc:
        typer.echo(f"failed to calculate awards for {year:04d}-{month:02d}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(summary.message)
    if summary.award_set.awards:
        with session_factory() as session:
            names = PLAYER_REPOSITORY.names(
                session, [award.player_id for award in summary.award_set.awards if award.player_id is not None]
            )
        for award in summary.award_set.awards:
            typer.echo(format_award(award, names))


def format_award(award: MonthlyAwardResult, names: dict[int, str]) -> str:
    if award.player_id is not None:
        target = f"player={names.get(award.player_id, award.player_id)}"
    else:
        target = f"match_id={award.match_id}"
    return f"{award.award_type.value:<17} {target} value={award.value} {award.description}"


@app.command()
def calculate(
    year: YearOption,
    month: MonthOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    dry_run: DryRunOption = False,
    debug: DebugOption = False,
) -> None:
    """Calculate awards for one month."""
    run_calculation(year=year, month=month, db_url=db_url, dry_run=dry_run, debug=debug)


@app.command()
def calculate_current(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    dry_run: DryRunOption = False,
    debug: DebugOption = False,
) -> None:
    """Calculate the running month so far."""
    today = date.today()
    run_calculation(year=today.year, month=today.month, db_url=db_url, dry_run=dry_run, debug=debug)


@app.command()
def calculate_previous(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    dry_run: DryRunOption = False,
    debug: DebugOption = False,
) -> None:
    """Calculate the month that just ended; meant for a monthly cron job."""
    year, month = previous_month(date.today())
    run_calculation(year=year, month=month, db_url=db_url, dry_run=dry_run, debug=debug)


@app.command()
def list_months(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Print every month that has recorded matches."""
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    months = available_months(session_factory=create_session_factory(engine))
    if not months:
        typer.echo("no months with matches")
        return
    for month in months:
        typer.echo(month)


@app.command()
def show(
    year: YearOption,
    month: MonthOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Print the stored awards of one month."""
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        awards = MONTHLY_AWARD_REPOSITORY.fetch_period(session, year, month)
        names = PLAYER_REPOSITORY.names(
            session, [award.player_id for award in awards if award.player_id is not None]
        )

    if not awards:
        typer.echo(f"No awards stored for {year:04d}-{month:02d}.")
        return

    typer.echo(f"period={year:04d}-{month:02d} awards={len(awards)}")
    for award in awards:
        typer.echo(format_award(award, names))


if __name__ == "__main__":
    app()
