"""Fixed achievement catalog: one pure predicate per achievement type."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType

from domain.common import GameRecord, PlayerStanding


class AchievementType(str, Enum):
    FIRST_WIN = "first_win"
    WIN_STREAK_3 = "win_streak_3"
    WIN_STREAK_5 = "win_streak_5"
    WIN_STREAK_10 = "win_streak_10"
    GAMES_PLAYED_10 = "games_played_10"
    GAMES_PLAYED_25 = "games_played_25"
    GAMES_PLAYED_50 = "games_played_50"
    PERFECT_WEEK = "perfect_week"
    COMEBACK_KING = "comeback_king"
    GIANT_SLAYER = "giant_slayer"
    DRAW_MASTER = "draw_master"
    FIRST_DRAW = "first_draw"
    UNDEFEATED_MONTH = "undefeated_month"


@dataclass(frozen=True)
class AchievementSubject:
    """The player being evaluated. `rank` is None when the player is not on the roster."""

    player_id: str
    name: str
    rank: int | None = None


@dataclass(frozen=True)
class AchievementContext:
    """Everything a predicate may look at, passed explicitly."""

    subject: AchievementSubject
    game: GameRecord
    games_up_to_now: Sequence[GameRecord]
    all_players: Sequence[PlayerStanding]
    now: datetime


Predicate = Callable[[AchievementContext], bool]


@dataclass(frozen=True)
class AchievementDefinition:
    type: AchievementType
    title: str
    description: str
    check: Predicate


def player_games(player_id: str, games: Sequence[GameRecord]) -> list[GameRecord]:
    return [game for game in games if game.involves(player_id)]


def recent_games_for_player(
    player_id: str,
    games: Sequence[GameRecord],
    count: int,
) -> list[GameRecord]:
    """Most recent `count` games of a player, newest first; same-day games keep log order."""
    ordered = sorted(player_games(player_id, games), key=lambda game: game.game_date, reverse=True)
    return ordered[:count]


def _games_since(player_id: str, games: Sequence[GameRecord], cutoff: date) -> list[GameRecord]:
    return [game for game in player_games(player_id, games) if game.game_date >= cutoff]


def _as_date(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _one_month_before(value: date) -> date:
    year, month = (value.year, value.month - 1) if value.month > 1 else (value.year - 1, 12)
    day = value.day
    while True:
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


def _first_win(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    return any(game.won_by(player_id) for game in ctx.games_up_to_now)


def _win_streak(length: int) -> Predicate:
    def check(ctx: AchievementContext) -> bool:
        player_id = ctx.subject.player_id
        recent = recent_games_for_player(player_id, ctx.games_up_to_now, length)
        return len(recent) == length and all(game.won_by(player_id) for game in recent)

    return check


def _games_played(threshold: int) -> Predicate:
    def check(ctx: AchievementContext) -> bool:
        return len(player_games(ctx.subject.player_id, ctx.games_up_to_now)) >= threshold

    return check


def _perfect_week(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    cutoff = _as_date(ctx.now) - timedelta(days=7)
    week_games = _games_since(player_id, ctx.games_up_to_now, cutoff)
    return len(week_games) >= 3 and all(game.won_by(player_id) for game in week_games)


def _comeback_king(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    if not ctx.game.won_by(player_id):
        return False
    recent = recent_games_for_player(player_id, ctx.games_up_to_now, 4)
    if len(recent) < 4:
        return False
    return all(game.lost_by(player_id) for game in recent[1:4])


def _giant_slayer(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    if not ctx.game.won_by(player_id):
        return False
    if not ctx.subject.rank:
        return False
    opponent_id, _ = ctx.game.opponent_of(player_id)
    opponent = next((player for player in ctx.all_players if player.id == opponent_id), None)
    if opponent is None or not opponent.rank:
        return False
    return opponent.rank <= ctx.subject.rank - 3


def _draw_master(ctx: AchievementContext) -> bool:
    if not ctx.game.is_draw:
        return False
    recent = recent_games_for_player(ctx.subject.player_id, ctx.games_up_to_now, 5)
    return len(recent) == 5 and all(game.is_draw for game in recent)


def _first_draw(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    if not (ctx.game.is_draw and ctx.game.involves(player_id)):
        return False
    return not any(
        game.id != ctx.game.id and game.is_draw for game in player_games(player_id, ctx.games_up_to_now)
    )


def _undefeated_month(ctx: AchievementContext) -> bool:
    player_id = ctx.subject.player_id
    cutoff = _one_month_before(_as_date(ctx.now))
    month_games = _games_since(player_id, ctx.games_up_to_now, cutoff)
    return len(month_games) >= 5 and not any(game.lost_by(player_id) for game in month_games)


ACHIEVEMENT_DEFINITIONS: Mapping[AchievementType, AchievementDefinition] = MappingProxyType(
    {
        definition.type: definition
        for definition in (
            AchievementDefinition(AchievementType.FIRST_WIN, "First Victory!", "Won your first game", _first_win),
            AchievementDefinition(AchievementType.WIN_STREAK_3, "On Fire!", "Won 3 games in a row", _win_streak(3)),
            AchievementDefinition(
                AchievementType.WIN_STREAK_5, "Unstoppable!", "Won 5 games in a row", _win_streak(5)
            ),
            AchievementDefinition(
                AchievementType.WIN_STREAK_10, "Legendary!", "Won 10 games in a row", _win_streak(10)
            ),
            AchievementDefinition(
                AchievementType.GAMES_PLAYED_10, "Getting Started!", "Played 10 games", _games_played(10)
            ),
            AchievementDefinition(
                AchievementType.GAMES_PLAYED_25, "Dedicated Player!", "Played 25 games", _games_played(25)
            ),
            AchievementDefinition(
                AchievementType.GAMES_PLAYED_50, "Chess Veteran!", "Played 50 games", _games_played(50)
            ),
            AchievementDefinition(
                AchievementType.PERFECT_WEEK, "Perfect Week!", "Won all games this week", _perfect_week
            ),
            AchievementDefinition(
                AchievementType.COMEBACK_KING,
                "Comeback King!",
                "Won after losing 3 games in a row",
                _comeback_king,
            ),
            AchievementDefinition(
                AchievementType.GIANT_SLAYER,
                "Giant Slayer!",
                "Beat a player ranked 3+ positions higher",
                _giant_slayer,
            ),
            AchievementDefinition(AchievementType.DRAW_MASTER, "Draw Master!", "Had 5 draws in a row", _draw_master),
            AchievementDefinition(AchievementType.FIRST_DRAW, "First Draw!", "Had your first draw", _first_draw),
            AchievementDefinition(
                AchievementType.UNDEFEATED_MONTH,
                "Undefeated Month!",
                "No losses this month",
                _undefeated_month,
            ),
        )
    }
)


def get_achievement_definition(achievement_type: AchievementType | str) -> AchievementDefinition:
    return ACHIEVEMENT_DEFINITIONS[AchievementType(achievement_type)]


__all__ = [
    "ACHIEVEMENT_DEFINITIONS",
    "AchievementContext",
    "AchievementDefinition",
    "AchievementSubject",
    "AchievementType",
    "get_achievement_definition",
    "recent_games_for_player",
]
