"""ORM models."""

from models.base import Base
from models.game import Game
from models.player import Player

__all__ = ["Base", "Game", "Player"]
