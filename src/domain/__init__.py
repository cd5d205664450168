"""Club ladder domain modules."""

from domain.common import (
    GameFilters,
    GameRecord,
    GameResult,
    GameType,
    PlayerStanding,
    RatingChange,
    RosterPlayer,
)
from domain.protocol import GameLogProvider, RosterProvider

__all__ = [
    "GameFilters",
    "GameLogProvider",
    "GameRecord",
    "GameResult",
    "GameType",
    "PlayerStanding",
    "RatingChange",
    "RosterPlayer",
    "RosterProvider",
]
