"""Club-wide and per-player game statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from domain.common import GameRecord, GameType
from domain.ratings.elo.calculator import round_half_up

RECENT_GAMES_LIMIT = 10


@dataclass(frozen=True)
class Streak:
    """A run of identical outcomes: `kind` is "win", "loss", "draw" or "none"."""

    kind: str
    count: int


@dataclass(frozen=True)
class GameStats:
    total_games: int
    games_this_month: int
    games_this_week: int
    games_by_type: dict[str, int]
    average_game_time: int
    most_active_player: str
    recent_games: list[GameRecord]


@dataclass(frozen=True)
class PlayerGameStats:
    player_id: str
    player_name: str
    total_games: int
    wins: int
    losses: int
    draws: int
    win_rate: int
    games_this_month: int
    games_this_week: int
    games_by_type: dict[str, int]
    average_game_time: int
    current_streak: Streak
    best_streak: Streak
    recent_games: list[GameRecord]


def _newest_first(games: Sequence[GameRecord]) -> list[GameRecord]:
    return sorted(games, key=lambda game: game.game_date, reverse=True)


def _window_starts(now: datetime) -> tuple[date, date]:
    today = now.date()
    return today.replace(day=1), today - timedelta(days=7)


def _games_by_type(games: Sequence[GameRecord]) -> dict[str, int]:
    counts = Counter(game.game_type.value for game in games)
    return {game_type.value: counts.get(game_type.value, 0) for game_type in GameType}


def _average_game_time(games: Sequence[GameRecord]) -> int:
    if not games:
        return 0
    return round_half_up(sum(game.game_time for game in games) / len(games))


def _outcome(game: GameRecord, player_id: str) -> str:
    if game.is_draw:
        return "draw"
    return "win" if game.won_by(player_id) else "loss"


def compute_streaks(player_id: str, games: Sequence[GameRecord]) -> tuple[Streak, Streak]:
    """Return `(current, best)` streaks. Best only considers winning runs."""
    chronological = sorted(games, key=lambda game: game.game_date)
    outcomes = [_outcome(game, player_id) for game in chronological if game.involves(player_id)]
    if not outcomes:
        return Streak("none", 0), Streak("win", 0)

    current_kind = outcomes[-1]
    current_count = 0
    for outcome in reversed(outcomes):
        if outcome != current_kind:
            break
        current_count += 1

    best = run = 0
    for outcome in outcomes:
        run = run + 1 if outcome == "win" else 0
        best = max(best, run)

    return Streak(current_kind, current_count), Streak("win", best)


def compute_game_stats(games: Sequence[GameRecord], now: datetime) -> GameStats:
    month_start, week_start = _window_starts(now)

    appearances: Counter[str] = Counter()
    for game in games:
        if game.player1_name:
            appearances[game.player1_name] += 1
        if game.player2_name:
            appearances[game.player2_name] += 1
    most_active = appearances.most_common(1)[0][0] if appearances else "N/A"

    return GameStats(
        total_games=len(games),
        games_this_month=sum(1 for game in games if game.game_date >= month_start),
        games_this_week=sum(1 for game in games if game.game_date >= week_start),
        games_by_type=_games_by_type(games),
        average_game_time=_average_game_time(games),
        most_active_player=most_active,
        recent_games=_newest_first(games)[:RECENT_GAMES_LIMIT],
    )


def compute_player_game_stats(player_id: str, games: Sequence[GameRecord], now: datetime) -> PlayerGameStats:
    own_games = [game for game in games if game.involves(player_id)]
    month_start, week_start = _window_starts(now)

    wins = sum(1 for game in own_games if game.won_by(player_id))
    draws = sum(1 for game in own_games if game.is_draw)
    losses = len(own_games) - wins - draws
    current_streak, best_streak = compute_streaks(player_id, own_games)

    newest = _newest_first(own_games)
    player_name = ""
    if newest:
        player_name = newest[0].player1_name if newest[0].player1_id == player_id else newest[0].player2_name

    return PlayerGameStats(
        player_id=player_id,
        player_name=player_name,
        total_games=len(own_games),
        wins=wins,
        losses=losses,
        draws=draws,
        win_rate=round_half_up(wins / len(own_games) * 100) if own_games else 0,
        games_this_month=sum(1 for game in own_games if game.game_date >= month_start),
        games_this_week=sum(1 for game in own_games if game.game_date >= week_start),
        games_by_type=_games_by_type(own_games),
        average_game_time=_average_game_time(own_games),
        current_streak=current_streak,
        best_streak=best_streak,
        recent_games=newest[:RECENT_GAMES_LIMIT],
    )


__all__ = [
    "GameStats",
    "PlayerGameStats",
    "Streak",
    "compute_game_stats",
    "compute_player_game_stats",
    "compute_streaks",
]
