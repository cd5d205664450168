#!/usr/bin/env python3
"""Recalculate club Elo ratings by replaying the full game log."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory, ensure_schema
from domain.common import GameResult
from domain.config import DEFAULT_CONFIG_PATH, load_club_config
from domain.pipeline import calculate_elo_for_all_games, initialize_all_player_elo_ratings
from domain.ratings.elo.calculator import calculate_rating_change
from logging_setup import configure_logging
from repositories import GameRepository, PlayerRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Club Elo rating commands.",
)


@app.command()
def recalculate(
    db_url: Annotated[
        str,
        typer.Option(
            "--db-url",
            envvar="CHESS_LADDER_DB_URL",
            help="Database URL. Defaults to the local chess_club postgres instance.",
        ),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="Club TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Reset every stored rating to the initial rating first."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute ratings without writing anything."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Replay all games in chronological order and store the resulting ratings."""
    configure_logging(verbose)
    config = load_club_config(config_path)

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        games = GameRepository(session)
        players = PlayerRepository(session, initial_rating=config.elo.initial_rating)
        try:
            if reset and not dry_run:
                reset_count = initialize_all_player_elo_ratings(players, config.elo)
                typer.echo(f"reset_players={reset_count} initial_rating={config.elo.initial_rating}")

            summary = calculate_elo_for_all_games(
                game_log=games,
                roster=players,
                params=config.elo,
                dry_run=dry_run,
                echo=typer.echo,
            )
            if dry_run:
                session.rollback()
            else:
                session.commit()
        except Exception:
            session.rollback()
            raise

    prefix = "[dry-run] " if dry_run else ""
    typer.echo(
        f"{prefix}config={config.file_path.name} "
        f"system={config.name} "
        f"processed={summary.processed} "
        f"errors={summary.errors} "
        f"tracked_players={summary.tracked_players} "
        f"skipped_write_backs={summary.skipped_write_backs}"
    )
    if summary.errors:
        typer.echo("some games failed to process; see the log for details", err=True)


@app.command()
def rating_change(
    player1_rating: Annotated[int, typer.Argument(help="Current rating of player 1.")],
    player2_rating: Annotated[int, typer.Argument(help="Current rating of player 2.")],
    result: Annotated[
        GameResult,
        typer.Argument(help="Game result (player1, player2, draw)."),
    ],
    config_path: Annotated[
        Path,
        typer.Option("--config", help="Club TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
) -> None:
    """Show the rating change one game would produce, without touching the database."""
    config = load_club_config(config_path)
    change = calculate_rating_change(player1_rating, player2_rating, result, config.elo)
    typer.echo(
        f"player1 {player1_rating} -> {player1_rating + change.player1} ({change.player1:+d}) "
        f"player2 {player2_rating} -> {player2_rating + change.player2} ({change.player2:+d})"
    )


if __name__ == "__main__":
    app()
