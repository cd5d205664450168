"""Player-level club Elo logic."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from math import floor

from domain.common import GameRecord, GameResult, RatingChange

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class EloParameters:
    initial_rating: int = 1000
    k_factor: float = 32.0
    scale_factor: float = 400.0


@dataclass(frozen=True)
class PlayerEloEvent:
    player_id: str
    opponent_id: str
    game_id: str
    game_date: date
    actual_score: float
    expected_score: float
    pre_elo: int
    elo_delta: int
    post_elo: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(floor(value + 0.5))


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = 400.0,
) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def actual_scores(result: GameResult) -> tuple[float, float]:
    """Return the `(player1, player2)` actual scores for a result tag."""
    if result is GameResult.PLAYER1:
        return 1.0, 0.0
    if result is GameResult.PLAYER2:
        return 0.0, 1.0
    return 0.5, 0.5


def calculate_rating_change(
    player1_rating: float,
    player2_rating: float,
    result: GameResult | str,
    params: EloParameters | None = None,
) -> RatingChange:
    """Rating deltas for one game, without touching any stored state.

    Each side is rounded to the nearest integer independently, so the pair is
    not guaranteed to sum to zero.
    """
    params = params or EloParameters()
    result = GameResult(result)

    expected1 = calculate_expected_score(player1_rating, player2_rating, params.scale_factor)
    expected2 = calculate_expected_score(player2_rating, player1_rating, params.scale_factor)
    actual1, actual2 = actual_scores(result)

    return RatingChange(
        player1=round_half_up(params.k_factor * (actual1 - expected1)),
        player2=round_half_up(params.k_factor * (actual2 - expected2)),
    )


def sort_games_chronologically(games: Iterable[GameRecord]) -> list[GameRecord]:
    """Replay order: game date, then recorded-at time, then insertion order."""
    return sorted(games, key=lambda game: (game.game_date, game.recorded_at or _EPOCH))


class ClubEloCalculator:
    """Stateful game-by-game Elo calculator for one replay."""

    def __init__(
        self,
        params: EloParameters | None = None,
        *,
        rating_lookup: Callable[[str], int] | None = None,
    ) -> None:
        self.params = params or EloParameters()
        self._rating_lookup = rating_lookup
        self._ratings: dict[str, int] = {}

    def get_rating(self, player_id: str) -> int:
        if player_id not in self._ratings:
            if self._rating_lookup is not None:
                self._ratings[player_id] = int(self._rating_lookup(player_id))
            else:
                self._ratings[player_id] = self.params.initial_rating
        return self._ratings[player_id]

    def tracked_player_count(self) -> int:
        return len(self._ratings)

    def tracked_entity_count(self) -> int:
        return self.tracked_player_count()

    def ratings(self) -> dict[str, int]:
        """Return a snapshot of current player ratings."""
        return dict(self._ratings)

    def process_game(self, game: GameRecord) -> tuple[PlayerEloEvent, PlayerEloEvent]:
        player1_pre = self.get_rating(game.player1_id)
        player2_pre = self.get_rating(game.player2_id)

        change = calculate_rating_change(player1_pre, player2_pre, game.result, self.params)
        player1_post = player1_pre + change.player1
        player2_post = player2_pre + change.player2

        self._ratings[game.player1_id] = player1_post
        self._ratings[game.player2_id] = player2_post

        player1_actual, player2_actual = actual_scores(game.result)
        player1_event = PlayerEloEvent(
            player_id=game.player1_id,
            opponent_id=game.player2_id,
            game_id=game.id,
            game_date=game.game_date,
            actual_score=player1_actual,
            expected_score=calculate_expected_score(player1_pre, player2_pre, self.params.scale_factor),
            pre_elo=player1_pre,
            elo_delta=change.player1,
            post_elo=player1_post,
        )
        player2_event = PlayerEloEvent(
            player_id=game.player2_id,
            opponent_id=game.player1_id,
            game_id=game.id,
            game_date=game.game_date,
            actual_score=player2_actual,
            expected_score=calculate_expected_score(player2_pre, player1_pre, self.params.scale_factor),
            pre_elo=player2_pre,
            elo_delta=change.player2,
            post_elo=player2_post,
        )
        return player1_event, player2_event

    def replay(self, games: Iterable[GameRecord]) -> list[tuple[PlayerEloEvent, PlayerEloEvent]]:
        """Process games in chronological order and return their events."""
        return [self.process_game(game) for game in sort_games_chronologically(games)]
