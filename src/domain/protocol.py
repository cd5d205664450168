"""Provider protocols at the storage boundary."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from domain.common import GameFilters, GameRecord, RosterPlayer


@runtime_checkable
class GameLogProvider(Protocol):
    """Read/append access to the game log."""

    def get_games(self, filters: GameFilters | None = None) -> list[GameRecord]: ...

    def get_player_games(self, player_id: str) -> list[GameRecord]: ...

    def add_game(self, data: dict[str, Any]) -> str: ...

    def update_game(self, game_id: str, **changes: Any) -> None: ...


@runtime_checkable
class RosterProvider(Protocol):
    """Roster access plus rating persistence."""

    def get_players(self) -> list[RosterPlayer]: ...

    def add_player(self, data: dict[str, Any]) -> str: ...

    def update_player(self, player_id: str, **changes: Any) -> None: ...

    def get_player_elo_rating(self, player_id: str) -> int: ...

    def update_player_elo_rating(self, player_id: str, rating: int) -> None: ...


__all__ = ["GameLogProvider", "RosterProvider"]
