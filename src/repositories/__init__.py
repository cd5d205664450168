"""Database repository helpers."""

from repositories.games import GameRepository, game_row_to_record
from repositories.players import INITIAL_RATING, PlayerRepository, player_row_to_roster

__all__ = [
    "GameRepository",
    "INITIAL_RATING",
    "PlayerRepository",
    "game_row_to_record",
    "player_row_to_roster",
]
