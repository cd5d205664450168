#!/usr/bin/env python3
"""Show the achievements and game statistics for one player."""

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
from domain.achievements import get_player_achievements
from domain.config import DEFAULT_CONFIG_PATH, load_club_config
from domain.pipeline import select_ladder_games
from domain.rankings import calculate_rankings_from_games
from domain.stats import compute_player_game_stats
from logging_setup import configure_logging
from repositories import GameRepository, PlayerRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Print achievements earned by one player.",
)


@app.command()
def show_achievements(
    player_id: Annotated[str, typer.Argument(help="Player id as stored in the games table.")],
    with_stats: Annotated[
        bool,
        typer.Option("--stats", help="Also print win/loss totals and streaks."),
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
    """Print one player's achievements in the order they were earned."""
    configure_logging(verbose)
    config = load_club_config(config_path)
    session_factory = create_session_factory(create_db_engine(db_url))

    with session_factory() as session:
        all_games = GameRepository(session).get_games()
        roster = PlayerRepository(session, initial_rating=config.elo.initial_rating).get_players()

    ladder_games = select_ladder_games(
        all_games,
        game_types=config.ranking_game_types,
        verified_only=config.ranking_verified_only,
    )
    standings = calculate_rankings_from_games(ladder_games, roster, config.rankings)
    achievements = get_player_achievements(
        player_id,
        all_games,
        standings,
        clock=config.achievement_clock,
    )

    if not achievements:
        typer.echo(f"player_id={player_id} has no achievements")
    for achievement in achievements:
        typer.echo(
            f"{achievement.earned_at.isoformat()}  {achievement.title:<20} "
            f"{achievement.description} (vs {achievement.opponent_name}, game_id={achievement.game_id})"
        )

    if with_stats:
        stats = compute_player_game_stats(player_id, all_games, datetime.now(UTC).replace(tzinfo=None))
        typer.echo(
            f"games={stats.total_games} wins={stats.wins} draws={stats.draws} losses={stats.losses} "
            f"win_rate={stats.win_rate}% "
            f"current_streak={stats.current_streak.kind}x{stats.current_streak.count} "
            f"best_win_streak={stats.best_streak.count}"
        )


if __name__ == "__main__":
    app()
