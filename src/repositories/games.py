"""Persistence helpers for the game log."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import GameFilters, GameRecord, GameResult, GameType, RatingChange
from domain.exceptions import GameNotFoundError, MalformedGameError
from models.game import Game

logger = logging.getLogger(__name__)

_FIELD_NAMES = frozenset(
    {
        "player1_id",
        "player1_name",
        "player2_id",
        "player2_name",
        "result",
        "game_date",
        "game_time",
        "game_type",
        "event_id",
        "notes",
        "opening",
        "endgame",
        "recorded_by",
        "recorded_at",
        "rating_change",
        "is_verified",
        "verified_by",
        "verified_at",
    }
)


def game_row_to_record(row: Game) -> GameRecord:
    """Convert one stored row into a GameRecord, rejecting rows that cannot be replayed."""
    if row.game_date is None:
        raise MalformedGameError(f"game_id={row.id} has no game_date")
    try:
        result = GameResult(row.result)
    except ValueError as exc:
        raise MalformedGameError(f"game_id={row.id} has unknown result {row.result!r}") from exc
    try:
        game_type = GameType(row.game_type)
    except ValueError as exc:
        raise MalformedGameError(f"game_id={row.id} has unknown game_type {row.game_type!r}") from exc

    rating_change = None
    if row.rating_change:
        rating_change = RatingChange(
            player1=int(row.rating_change["player1"]),
            player2=int(row.rating_change["player2"]),
        )

    try:
        return GameRecord(
            id=row.id,
            player1_id=row.player1_id,
            player1_name=row.player1_name,
            player2_id=row.player2_id,
            player2_name=row.player2_name,
            result=result,
            game_date=row.game_date,
            game_type=game_type,
            recorded_at=row.recorded_at,
            recorded_by=row.recorded_by,
            game_time=row.game_time or 0,
            event_id=row.event_id,
            notes=row.notes,
            opening=row.opening,
            endgame=row.endgame,
            rating_change=rating_change,
            is_verified=bool(row.is_verified),
            verified_by=row.verified_by,
            verified_at=row.verified_at,
        )
    except ValueError as exc:
        raise MalformedGameError(str(exc)) from exc


def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown game fields: {sorted(unknown)}")

    normalized = dict(changes)
    if isinstance(normalized.get("rating_change"), RatingChange):
        normalized["rating_change"] = normalized["rating_change"].as_json()
    for key in ("result", "game_type"):
        value = normalized.get(key)
        if value is not None:
            enum_type = GameResult if key == "result" else GameType
            normalized[key] = enum_type(value).value
    if isinstance(normalized.get("game_date"), str):
        normalized["game_date"] = date.fromisoformat(normalized["game_date"])
    return normalized


class GameRepository:
    """Game log backed by the `games` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_games(self, filters: GameFilters | None = None) -> list[GameRecord]:
        """All readable games, newest first. Filters are applied after retrieval."""
        rows = self.session.execute(
            select(Game).order_by(Game.game_date.desc(), Game.recorded_at.desc())
        ).scalars()

        games: list[GameRecord] = []
        for row in rows:
            try:
                record = game_row_to_record(row)
            except MalformedGameError as exc:
                logger.warning("skipping malformed game: %s", exc)
                continue
            if filters is None or filters.matches(record):
                games.append(record)
        return games

    def get_player_games(self, player_id: str) -> list[GameRecord]:
        return self.get_games(GameFilters(player_id=player_id))

    def get_game(self, game_id: str) -> GameRecord:
        row = self.session.get(Game, game_id)
        if row is None:
            raise GameNotFoundError(game_id)
        return game_row_to_record(row)

    def add_game(self, data: dict[str, Any]) -> str:
        """Append one game and return its id."""
        payload = _normalize_changes({key: value for key, value in data.items() if key != "id"})
        if payload.get("player1_id") == payload.get("player2_id"):
            raise ValueError(f"game has identical players ({payload.get('player1_id')})")
        payload.setdefault("recorded_at", datetime.now(UTC).replace(tzinfo=None))

        game_id = str(data.get("id") or f"game_{uuid.uuid4().hex}")
        if self.session.get(Game, game_id) is not None:
            raise ValueError(f"game_id={game_id} already exists")
        self.session.add(Game(id=game_id, **payload))
        self.session.flush()
        return game_id

    def update_game(self, game_id: str, **changes: Any) -> None:
        row = self.session.get(Game, game_id)
        if row is None:
            raise GameNotFoundError(game_id)
        for key, value in _normalize_changes(changes).items():
            setattr(row, key, value)
        self.session.flush()

    def delete_game(self, game_id: str) -> None:
        row = self.session.get(Game, game_id)
        if row is None:
            raise GameNotFoundError(game_id)
        self.session.delete(row)
        self.session.flush()


__all__ = ["GameRepository", "game_row_to_record"]
