"""Chronological achievement evaluation over the game log."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from enum import Enum

from domain.achievements.catalog import (
    ACHIEVEMENT_DEFINITIONS,
    AchievementContext,
    AchievementDefinition,
    AchievementSubject,
    AchievementType,
)
from domain.common import GameRecord, PlayerStanding

logger = logging.getLogger(__name__)


class AchievementClock(str, Enum):
    """What "now" means for the trailing-window achievements."""

    GAME_DATE = "game_date"
    WALL_CLOCK = "wall_clock"


@dataclass(frozen=True)
class Achievement:
    id: str
    player_id: str
    player_name: str
    type: AchievementType
    title: str
    description: str
    earned_at: date
    game_id: str
    opponent_id: str
    opponent_name: str


def _build_achievement(
    *,
    achievement_id: str,
    subject: AchievementSubject,
    definition: AchievementDefinition,
    game: GameRecord,
) -> Achievement:
    opponent_id, opponent_name = game.opponent_of(subject.player_id)
    return Achievement(
        id=achievement_id,
        player_id=subject.player_id,
        player_name=subject.name,
        type=definition.type,
        title=definition.title,
        description=definition.description,
        earned_at=game.game_date,
        game_id=game.id,
        opponent_id=opponent_id,
        opponent_name=opponent_name,
    )


def _resolve_now(clock: AchievementClock, game: GameRecord, now: datetime | None) -> datetime:
    if clock is AchievementClock.WALL_CLOCK:
        return now or datetime.now(UTC).replace(tzinfo=None)
    return datetime.combine(game.game_date, time.min)


def _evaluate(definition: AchievementDefinition, ctx: AchievementContext) -> bool:
    try:
        return bool(definition.check(ctx))
    except Exception:
        logger.exception(
            "achievement check failed type=%s player_id=%s game_id=%s",
            definition.type.value,
            ctx.subject.player_id,
            ctx.game.id,
        )
        return False


def resolve_subject(
    player_id: str,
    player_games: Sequence[GameRecord],
    all_players: Sequence[PlayerStanding],
) -> AchievementSubject:
    """Subject from the standings, or a rank-less stand-in named after the first game."""
    standing = next((player for player in all_players if player.id == player_id), None)
    if standing is not None:
        return AchievementSubject(player_id=player_id, name=standing.name, rank=standing.rank)

    first_game = player_games[0]
    name = first_game.player1_name if first_game.player1_id == player_id else first_game.player2_name
    return AchievementSubject(player_id=player_id, name=name, rank=None)


def get_player_achievements(
    player_id: str,
    all_games: Sequence[GameRecord],
    all_players: Sequence[PlayerStanding],
    *,
    clock: AchievementClock = AchievementClock.GAME_DATE,
    now: datetime | None = None,
) -> list[Achievement]:
    """Every achievement a player has earned, each tagged with its earliest qualifying game."""
    player_games = sorted(
        (game for game in all_games if game.involves(player_id)),
        key=lambda game: game.game_date,
    )
    if not player_games:
        return []

    subject = resolve_subject(player_id, player_games, all_players)
    achievements: list[Achievement] = []
    earned: set[AchievementType] = set()

    for index, game in enumerate(player_games):
        games_up_to_now = [other for other in all_games if other.game_date <= game.game_date]
        ctx = AchievementContext(
            subject=subject,
            game=game,
            games_up_to_now=games_up_to_now,
            all_players=all_players,
            now=_resolve_now(clock, game, now),
        )

        for achievement_type, definition in ACHIEVEMENT_DEFINITIONS.items():
            if achievement_type in earned:
                continue
            if not _evaluate(definition, ctx):
                continue

            achievements.append(
                _build_achievement(
                    achievement_id=f"{player_id}_{achievement_type.value}_{index}",
                    subject=subject,
                    definition=definition,
                    game=game,
                )
            )
            earned.add(achievement_type)

    return sorted(achievements, key=lambda achievement: achievement.earned_at)


def check_achievements(
    game: GameRecord,
    all_games: Sequence[GameRecord],
    all_players: Sequence[PlayerStanding],
    existing: Mapping[str, Set[AchievementType]] | None = None,
    *,
    clock: AchievementClock = AchievementClock.GAME_DATE,
    now: datetime | None = None,
) -> list[Achievement]:
    """Achievements newly earned by either participant of a just-recorded game.

    Participants without a standing are skipped, as are types already listed
    for them in `existing`.
    """
    existing = existing or {}
    achievements: list[Achievement] = []

    for player_id in (game.player1_id, game.player2_id):
        standing = next((player for player in all_players if player.id == player_id), None)
        if standing is None:
            continue

        subject = AchievementSubject(player_id=player_id, name=standing.name, rank=standing.rank)
        ctx = AchievementContext(
            subject=subject,
            game=game,
            games_up_to_now=all_games,
            all_players=all_players,
            now=_resolve_now(clock, game, now),
        )
        already_earned = existing.get(player_id, frozenset())

        for achievement_type, definition in ACHIEVEMENT_DEFINITIONS.items():
            if achievement_type in already_earned:
                continue
            if _evaluate(definition, ctx):
                achievements.append(
                    _build_achievement(
                        achievement_id=f"{player_id}_{achievement_type.value}_{game.id}",
                        subject=subject,
                        definition=definition,
                        game=game,
                    )
                )

    return achievements


__all__ = [
    "Achievement",
    "AchievementClock",
    "check_achievements",
    "get_player_achievements",
    "resolve_subject",
]
