"""Exception taxonomy for the club ladder core."""

from __future__ import annotations


class ClubLadderError(Exception):
    """Base class for all ladder-specific failures."""


class PlayerNotFoundError(ClubLadderError):
    """Raised when a player id has no roster entry."""

    def __init__(self, player_id: str) -> None:
        super().__init__(f"player_id={player_id} is not on the roster")
        self.player_id = player_id


class GameNotFoundError(ClubLadderError):
    """Raised when a game id is not present in the game log."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"game_id={game_id} is not in the game log")
        self.game_id = game_id


class MalformedGameError(ClubLadderError):
    """Raised when a stored game row cannot be turned into a GameRecord."""


__all__ = [
    "ClubLadderError",
    "GameNotFoundError",
    "MalformedGameError",
    "PlayerNotFoundError",
]
