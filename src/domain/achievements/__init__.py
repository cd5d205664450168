"""Achievement catalog and evaluation."""

from domain.achievements.catalog import (
    ACHIEVEMENT_DEFINITIONS,
    AchievementContext,
    AchievementDefinition,
    AchievementSubject,
    AchievementType,
    get_achievement_definition,
    recent_games_for_player,
)
from domain.achievements.evaluator import (
    Achievement,
    AchievementClock,
    check_achievements,
    get_player_achievements,
    resolve_subject,
)

__all__ = [
    "ACHIEVEMENT_DEFINITIONS",
    "Achievement",
    "AchievementClock",
    "AchievementContext",
    "AchievementDefinition",
    "AchievementSubject",
    "AchievementType",
    "check_achievements",
    "get_achievement_definition",
    "get_player_achievements",
    "recent_games_for_player",
    "resolve_subject",
]
