"""games table model."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

RatingChangeJSON = JSON().with_variant(JSONB(), "postgresql")


class Game(Base):
    """One recorded game (the club's append-only game log)."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint("player1_id <> player2_id", name="ck_games_distinct_players"),
        Index("idx_games_game_date", "game_date", "recorded_at"),
        Index("idx_games_player1", "player1_id"),
        Index("idx_games_player2", "player2_id"),
        Index("idx_games_event", "event_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    player1_id: Mapped[str] = mapped_column(String(64), nullable=False)
    player1_name: Mapped[str] = mapped_column(String(128), nullable=False)
    player2_id: Mapped[str] = mapped_column(String(64), nullable=False)
    player2_name: Mapped[str] = mapped_column(String(128), nullable=False)
    result: Mapped[str] = mapped_column(String(16), nullable=False)
    game_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    game_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    game_type: Mapped[str] = mapped_column(String(16), nullable=False, default="ladder")
    event_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    opening: Mapped[str | None] = mapped_column(String(128), nullable=True)
    endgame: Mapped[str | None] = mapped_column(String(128), nullable=True)
    recorded_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    recorded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
        server_default=func.now(),
    )
    rating_change: Mapped[dict[str, Any] | None] = mapped_column(RatingChangeJSON, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
