#!/usr/bin/env python3
"""Show the current ladder standings derived from the game log."""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.config import DEFAULT_CONFIG_PATH, load_club_config
from domain.pipeline import load_ladder_standings
from domain.stats import compute_game_stats
from logging_setup import configure_logging
from repositories import GameRepository, PlayerRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Print the ladder ranked by points, then wins.",
)


@app.command()
def show_rankings(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to print. Use 0 for everyone."),
    ] = 20,
    include_inactive: Annotated[
        bool,
        typer.Option("--include-inactive", help="Also print players with no counted games."),
    ] = False,
    with_stats: Annotated[
        bool,
        typer.Option("--stats", help="Also print club-wide game statistics."),
    ] = False,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar="CHESS_LADDER_DB_URL", help="Database URL."),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="Club TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Print ranked standings."""
    if top_n < 0:
        raise typer.BadParameter("--top-n must be >= 0")

    configure_logging(verbose)
    config = load_club_config(config_path)
    session_factory = create_session_factory(create_db_engine(db_url))

    with session_factory() as session:
        game_log = GameRepository(session)
        standings = load_ladder_standings(
            game_log=game_log,
            roster=PlayerRepository(session, initial_rating=config.elo.initial_rating),
            params=config.rankings,
            game_types=config.ranking_game_types,
            verified_only=config.ranking_verified_only,
        )
        stats = None
        if with_stats:
            stats = compute_game_stats(game_log.get_games(), datetime.now(UTC).replace(tzinfo=None))

    if stats is not None:
        by_type = " ".join(f"{game_type}={count}" for game_type, count in stats.games_by_type.items())
        typer.echo(
            f"games={stats.total_games} this_month={stats.games_this_month} this_week={stats.games_this_week} "
            f"avg_game_time={stats.average_game_time} most_active={stats.most_active_player} {by_type}"
        )

    if not include_inactive:
        standings = [standing for standing in standings if standing.games_played > 0]
    if top_n:
        standings = standings[:top_n]
    if not standings:
        typer.echo("no ranked players")
        return

    typer.echo(f"{'rank':>4}  {'player':<28} {'grade':<6} {'gp':>4} {'w':>4} {'d':>4} {'l':>4} {'pts':>6} {'elo':>5}")
    for standing in standings:
        typer.echo(
            f"{standing.rank:>4}  {standing.name[:28]:<28} {standing.grade[:6]:<6} "
            f"{standing.games_played:>4} {standing.wins:>4} {standing.draws:>4} {standing.losses:>4} "
            f"{standing.points:>6.1f} {standing.elo_rating:>5}"
        )


if __name__ == "__main__":
    app()
