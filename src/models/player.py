"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Player(Base):
    """Registered club member. Aggregate ladder counters are derived, not stored."""

    __tablename__ = "players"
    __table_args__ = (Index("idx_players_elo_rating", "elo_rating"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    grade: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    elo_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
