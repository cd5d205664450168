"""Shared types for the club rating, ranking, and achievement modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class GameResult(str, Enum):
    """Outcome of one game, from the point of view of the record's first slot."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"
    DRAW = "draw"


class GameType(str, Enum):
    """Classification tag of a game. Informational for rating purposes."""

    LADDER = "ladder"
    TOURNAMENT = "tournament"
    FRIENDLY = "friendly"
    PRACTICE = "practice"


@dataclass(frozen=True)
class RatingChange:
    """Rating delta applied to each side of one game."""

    player1: int
    player2: int

    def as_json(self) -> dict[str, int]:
        return {"player1": self.player1, "player2": self.player2}


@dataclass(frozen=True)
class GameRecord:
    """Canonical game payload consumed by the rating, ranking, and achievement code."""

    id: str
    player1_id: str
    player1_name: str
    player2_id: str
    player2_name: str
    result: GameResult
    game_date: date
    game_type: GameType = GameType.LADDER
    recorded_at: datetime | None = None
    recorded_by: str | None = None
    game_time: int = 0
    event_id: str | None = None
    notes: str | None = None
    opening: str | None = None
    endgame: str | None = None
    rating_change: RatingChange | None = None
    is_verified: bool = False
    verified_by: str | None = None
    verified_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.player1_id == self.player2_id:
            raise ValueError(f"game_id={self.id} has identical players ({self.player1_id})")

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def won_by(self, player_id: str) -> bool:
        return (self.player1_id == player_id and self.result is GameResult.PLAYER1) or (
            self.player2_id == player_id and self.result is GameResult.PLAYER2
        )

    def lost_by(self, player_id: str) -> bool:
        return (self.player1_id == player_id and self.result is GameResult.PLAYER2) or (
            self.player2_id == player_id and self.result is GameResult.PLAYER1
        )

    @property
    def is_draw(self) -> bool:
        return self.result is GameResult.DRAW

    def opponent_of(self, player_id: str) -> tuple[str, str]:
        """Return `(opponent_id, opponent_name)` for one participant."""
        if self.player1_id == player_id:
            return self.player2_id, self.player2_name
        return self.player1_id, self.player1_name


@dataclass(frozen=True)
class RosterPlayer:
    """One registered club member."""

    id: str
    name: str
    grade: str = ""
    registered_at: datetime | None = None
    email: str = ""
    elo_rating: int = 1000


@dataclass(frozen=True)
class PlayerStanding:
    """Aggregated ladder line for one roster member."""

    id: str
    name: str
    grade: str
    games_played: int
    wins: int
    draws: int
    losses: int
    points: float
    rank: int
    last_active: datetime | None
    elo_rating: int
    email: str = ""


@dataclass(frozen=True)
class GameFilters:
    """Equality/range predicates applied to the full game list."""

    player_id: str | None = None
    game_type: GameType | None = None
    date_from: date | None = None
    date_to: date | None = None
    result: GameResult | None = None
    event_id: str | None = None
    is_verified: bool | None = None

    def matches(self, game: GameRecord) -> bool:
        if self.player_id is not None and not game.involves(self.player_id):
            return False
        if self.game_type is not None and game.game_type is not self.game_type:
            return False
        if self.date_from is not None and game.game_date < self.date_from:
            return False
        if self.date_to is not None and game.game_date > self.date_to:
            return False
        if self.result is not None and game.result is not self.result:
            return False
        if self.event_id is not None and game.event_id != self.event_id:
            return False
        if self.is_verified is not None and game.is_verified != self.is_verified:
            return False
        return True


__all__ = [
    "GameFilters",
    "GameRecord",
    "GameResult",
    "GameType",
    "PlayerStanding",
    "RatingChange",
    "RosterPlayer",
]
