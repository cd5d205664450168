"""Persistence helpers for the roster and stored ratings."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import RosterPlayer
from domain.exceptions import PlayerNotFoundError
from models.player import Player

INITIAL_RATING = 1000

_FIELD_NAMES = frozenset({"name", "grade", "email", "elo_rating", "registered_at"})


def player_row_to_roster(row: Player) -> RosterPlayer:
    return RosterPlayer(
        id=row.id,
        name=row.name,
        grade=row.grade or "",
        registered_at=row.registered_at,
        email=row.email or "",
        elo_rating=INITIAL_RATING if row.elo_rating is None else int(row.elo_rating),
    )


class PlayerRepository:
    """Roster backed by the `players` table."""

    def __init__(self, session: Session, *, initial_rating: int = INITIAL_RATING) -> None:
        self.session = session
        self.initial_rating = initial_rating

    def get_players(self) -> list[RosterPlayer]:
        """Roster in registration order."""
        rows = self.session.execute(select(Player).order_by(Player.registered_at, Player.id)).scalars()
        return [player_row_to_roster(row) for row in rows]

    def add_player(self, data: dict[str, Any]) -> str:
        payload = {key: value for key, value in data.items() if key != "id"}
        unknown = set(payload) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"Unknown player fields: {sorted(unknown)}")
        payload.setdefault("elo_rating", self.initial_rating)

        player_id = str(data.get("id") or f"player_{uuid.uuid4().hex}")
        if self.session.get(Player, player_id) is not None:
            raise ValueError(f"player_id={player_id} already exists")
        self.session.add(Player(id=player_id, **payload))
        self.session.flush()
        return player_id

    def update_player(self, player_id: str, **changes: Any) -> None:
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"Unknown player fields: {sorted(unknown)}")
        row = self.session.get(Player, player_id)
        if row is None:
            raise PlayerNotFoundError(player_id)
        for key, value in changes.items():
            setattr(row, key, value)
        self.session.flush()

    def get_player_elo_rating(self, player_id: str) -> int:
        """Stored rating, or the initial rating for unknown or never-rated players."""
        rating = self.session.scalar(select(Player.elo_rating).where(Player.id == player_id))
        return self.initial_rating if rating is None else int(rating)

    def update_player_elo_rating(self, player_id: str, rating: int) -> None:
        self.update_player(player_id, elo_rating=int(rating))


__all__ = ["INITIAL_RATING", "PlayerRepository", "player_row_to_roster"]
