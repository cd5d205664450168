"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    ClubEloCalculator,
    EloParameters,
    PlayerEloEvent,
    actual_scores,
    calculate_expected_score,
    calculate_rating_change,
    round_half_up,
    sort_games_chronologically,
)

__all__ = [
    "ClubEloCalculator",
    "EloParameters",
    "PlayerEloEvent",
    "actual_scores",
    "calculate_expected_score",
    "calculate_rating_change",
    "round_half_up",
    "sort_games_chronologically",
]
