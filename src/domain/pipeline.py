"""Batch jobs that combine the storage providers with the pure calculators."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from domain.common import GameFilters, GameRecord, GameType, PlayerStanding, RatingChange
from domain.exceptions import PlayerNotFoundError
from domain.protocol import GameLogProvider, RosterProvider
from domain.rankings import RankingParameters, calculate_rankings_from_games
from domain.ratings.elo.calculator import ClubEloCalculator, EloParameters, sort_games_chronologically

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EloRecalculationSummary:
    """Outcome of one full replay."""

    processed: int
    errors: int
    tracked_players: int
    skipped_write_backs: int
    dry_run: bool

    def as_dict(self) -> dict[str, int]:
        return {"processed": self.processed, "errors": self.errors}


def calculate_elo_for_all_games(
    *,
    game_log: GameLogProvider,
    roster: RosterProvider,
    params: EloParameters | None = None,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> EloRecalculationSummary:
    """Replay every game chronologically, annotate rating changes, and store final ratings.

    A failure while loading the game log propagates. A failure while processing
    one game is logged and counted, and the replay moves on. Ratings for ids
    that are not on the roster are tracked in memory but never written.
    """
    games = sort_games_chronologically(game_log.get_games())
    calculator = ClubEloCalculator(params, rating_lookup=roster.get_player_elo_rating)

    processed = 0
    errors = 0
    total_games = len(games)

    for index, game in enumerate(games, start=1):
        try:
            player1_event, player2_event = calculator.process_game(game)
            if not dry_run:
                game_log.update_game(
                    game.id,
                    rating_change=RatingChange(
                        player1=player1_event.elo_delta,
                        player2=player2_event.elo_delta,
                    ),
                )
            processed += 1
        except Exception:
            logger.exception("error processing game_id=%s", game.id)
            errors += 1

        if echo is not None and index % 500 == 0:
            echo(f"processed_games={index}/{total_games}")

    skipped_write_backs = 0
    final_ratings = calculator.ratings()
    if not dry_run:
        for player_id, rating in final_ratings.items():
            try:
                roster.update_player_elo_rating(player_id, rating)
            except PlayerNotFoundError:
                logger.debug("no roster entry for player_id=%s, rating %s not stored", player_id, rating)
                skipped_write_backs += 1

    summary = EloRecalculationSummary(
        processed=processed,
        errors=errors,
        tracked_players=len(final_ratings),
        skipped_write_backs=skipped_write_backs,
        dry_run=dry_run,
    )
    logger.info(
        "elo recalculation finished processed=%s errors=%s tracked_players=%s "
        "skipped_write_backs=%s dry_run=%s",
        summary.processed,
        summary.errors,
        summary.tracked_players,
        summary.skipped_write_backs,
        summary.dry_run,
    )
    return summary


def initialize_all_player_elo_ratings(roster: RosterProvider, params: EloParameters | None = None) -> int:
    """Put every roster member back at the initial rating. Returns how many were reset."""
    params = params or EloParameters()
    players = roster.get_players()
    for player in players:
        roster.update_player_elo_rating(player.id, params.initial_rating)
    return len(players)


def select_ladder_games(
    games: Sequence[GameRecord],
    *,
    game_types: Sequence[GameType] = (),
    verified_only: bool = False,
) -> list[GameRecord]:
    """Games that count toward the ladder. No game types means every type counts."""
    verified_filter = GameFilters(is_verified=True) if verified_only else GameFilters()
    return [
        game
        for game in games
        if verified_filter.matches(game) and (not game_types or game.game_type in game_types)
    ]


def load_ladder_standings(
    *,
    game_log: GameLogProvider,
    roster: RosterProvider,
    params: RankingParameters | None = None,
    game_types: Sequence[GameType] = (),
    verified_only: bool = False,
) -> list[PlayerStanding]:
    """Fetch the game log and roster and fold them into current standings."""
    games = select_ladder_games(game_log.get_games(), game_types=game_types, verified_only=verified_only)
    return calculate_rankings_from_games(games, roster.get_players(), params)


__all__ = [
    "EloRecalculationSummary",
    "calculate_elo_for_all_games",
    "initialize_all_player_elo_ratings",
    "load_ladder_standings",
    "select_ladder_games",
]
