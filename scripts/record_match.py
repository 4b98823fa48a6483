#!/usr/bin/env python3
"""Record a duel or a 2v2 match, update ratings and unlock achievements."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.exc import SQLAlchemyError

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.config_base import select_config
from domain.pipeline import record_match
from domain.ratings.config import load_rating_system_configs
from logging_config import setup_logging
from notifications.mattermost import MattermostNotifier
from repositories import ensure_schema

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "rating"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match submission commands.",
)

ScoreOption = Annotated[int, typer.Option(help="Goals scored by this side.")]
DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        envvar="DATABASE_URL",
        help="Database URL. Defaults to the local tafelvoetbal postgres instance.",
    ),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory holding rating TOML configs."),
]
ConfigNameOption = Annotated[
    str | None,
    typer.Option("--config-name", help="Optional config filename (for example: default.toml)."),
]
WebhookOption = Annotated[
    str | None,
    typer.Option("--webhook-url", envvar="MATTERMOST_WEBHOOK_URL", help="Mattermost incoming webhook."),
]
NotifyOption = Annotated[
    bool,
    typer.Option("--notify/--no-notify", envvar="MATTERMOST_ENABLED", help="Post the result to Mattermost."),
]
DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", help="Compute rating changes and unlocks without saving."),
]
AutoActivateOption = Annotated[
    bool,
    typer.Option("--auto-activate", help="Pin a new unlock for players without an active achievement."),
]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging.")]


def submit(
    *,
    team1_ids: list[int],
    team2_ids: list[int],
    score1: int,
    score2: int,
    db_url: str,
    config_dir: Path,
    config_name: str | None,
    webhook_url: str | None,
    notify: bool,
    dry_run: bool,
    auto_activate: bool,
    debug: bool,
) -> None:
    """Run one submission and report rating changes in key=value lines."""
    setup_logging(debug)
    try:
        config = select_config(load_rating_system_configs(config_dir), config_name)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-dir/--config-name") from exc

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    notifier = MattermostNotifier(webhook_url, enabled=notify) if not dry_run else None

    typer.echo(f"config={config.file_path.name} system={config.name}")
    try:
        summary = record_match(
            session_factory=session_factory,
            team1_ids=team1_ids,
            team2_ids=team2_ids,
            score1=score1,
            score2=score2,
            params=config.parameters,
            dry_run=dry_run,
            auto_activate=auto_activate,
            notifier=notifier,
            echo=typer.echo,
        )
    except ValueError as exc:
        typer.echo(f"invalid match: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except SQLAlchemyError as exc:
        typer.echo(f"failed to record match: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for player_id, kinds in summary.unlocked.items():
        typer.echo(f"player_id={player_id} unlocked={', '.join(kind.value for kind in kinds)}")


@app.command()
def duel(
    player1: Annotated[int, typer.Option("--player1", help="Player id on side 1.")],
    player2: Annotated[int, typer.Option("--player2", help="Player id on side 2.")],
    score1: ScoreOption,
    score2: ScoreOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    webhook_url: WebhookOption = None,
    notify: NotifyOption = True,
    dry_run: DryRunOption = False,
    auto_activate: AutoActivateOption = False,
    debug: DebugOption = False,
) -> None:
    """Record a 1v1 match."""
    submit(
        team1_ids=[player1],
        team2_ids=[player2],
        score1=score1,
        score2=score2,
        db_url=db_url,
        config_dir=config_dir,
        config_name=config_name,
        webhook_url=webhook_url,
        notify=notify,
        dry_run=dry_run,
        auto_activate=auto_activate,
        debug=debug,
    )


@app.command()
def team(
    team1: Annotated[
        list[int],
        typer.Option("--team1", help="Player id on side 1; pass twice."),
    ],
    team2: Annotated[
        list[int],
        typer.Option("--team2", help="Player id on side 2; pass twice."),
    ],
    score1: ScoreOption,
    score2: ScoreOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    webhook_url: WebhookOption = None,
    notify: NotifyOption = True,
    dry_run: DryRunOption = False,
    auto_activate: AutoActivateOption = False,
    debug: DebugOption = False,
) -> None:
    """Record a 2v2 match."""
    if len(team1) != 2 or len(team2) != 2:
        raise typer.BadParameter("--team1 and --team2 must each be given exactly twice")
    submit(
        team1_ids=team1,
        team2_ids=team2,
        score1=score1,
        score2=score2,
        db_url=db_url,
        config_dir=config_dir,
        config_name=config_name,
        webhook_url=webhook_url,
        notify=notify,
        dry_run=dry_run,
        auto_activate=auto_activate,
        debug=debug,
    )


if __name__ == "__main__":
    app()
