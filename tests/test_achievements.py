"""Tests for chronological achievement evaluation."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from types import MappingProxyType

import pytest

from domain.achievements import (
    ACHIEVEMENT_DEFINITIONS,
    AchievementClock,
    AchievementDefinition,
    AchievementType,
    check_achievements,
    get_achievement_definition,
    get_player_achievements,
)
from domain.achievements import evaluator
from domain.common import GameRecord, GameResult, PlayerStanding


def _standing(player_id: str, rank: int) -> PlayerStanding:
    return PlayerStanding(
        id=player_id,
        name=player_id.title(),
        grade="",
        games_played=0,
        wins=0,
        draws=0,
        losses=0,
        points=0.0,
        rank=rank,
        last_active=None,
        elo_rating=1000,
    )


def _series(outcomes: str, start: date = date(2025, 1, 1)) -> list[GameRecord]:
    """One alice-vs-bob game per day. W/L/D is from alice's side."""
    results = {"W": GameResult.PLAYER1, "L": GameResult.PLAYER2, "D": GameResult.DRAW}
    return [
        GameRecord(
            id=f"g{index + 1}",
            player1_id="alice",
            player1_name="Alice",
            player2_id="bob",
            player2_name="Bob",
            result=results[outcome],
            game_date=start + timedelta(days=index),
        )
        for index, outcome in enumerate(outcomes)
    ]


STANDINGS = [_standing("alice", 1), _standing("bob", 2)]


def _types(achievements) -> list[AchievementType]:
    return [achievement.type for achievement in achievements]


def test_catalog_has_every_type_in_declaration_order() -> None:
    assert list(ACHIEVEMENT_DEFINITIONS) == list(AchievementType)
    assert get_achievement_definition("first_win").title == "First Victory!"
    assert get_achievement_definition(AchievementType.WIN_STREAK_3).description == "Won 3 games in a row"


def test_mixed_series_earns_first_win_streak_and_games_played() -> None:
    games = _series("LLWWWLWWWW")

    achievements = get_player_achievements("alice", games, STANDINGS)

    assert _types(achievements) == [
        AchievementType.FIRST_WIN,
        AchievementType.WIN_STREAK_3,
        AchievementType.GAMES_PLAYED_10,
    ]
    assert [achievement.earned_at for achievement in achievements] == [
        date(2025, 1, 3),
        date(2025, 1, 5),
        date(2025, 1, 10),
    ]
    first = achievements[0]
    assert first.id == "alice_first_win_2"
    assert first.game_id == "g3"
    assert first.player_name == "Alice"
    assert (first.opponent_id, first.opponent_name) == ("bob", "Bob")
    assert first.title == "First Victory!"


def test_evaluation_is_deterministic_and_monotonic() -> None:
    games = _series("LLWWWLWWWW")

    first_pass = get_player_achievements("alice", games, STANDINGS)
    second_pass = get_player_achievements("alice", games, STANDINGS)
    prefix_pass = get_player_achievements("alice", games[:5], STANDINGS)

    assert first_pass == second_pass
    assert len({achievement.type for achievement in first_pass}) == len(first_pass)
    assert set(_types(prefix_pass)) <= set(_types(first_pass))


def test_comeback_after_three_losses() -> None:
    achievements = get_player_achievements("alice", _series("LLLW"), STANDINGS)

    assert _types(achievements) == [AchievementType.FIRST_WIN, AchievementType.COMEBACK_KING]
    assert achievements[1].earned_at == date(2025, 1, 4)


def test_comeback_requires_losses_not_draws() -> None:
    achievements = get_player_achievements("alice", _series("LDLW"), STANDINGS)

    assert AchievementType.COMEBACK_KING not in _types(achievements)


def test_draw_series() -> None:
    achievements = get_player_achievements("alice", _series("DDDDD"), STANDINGS)

    assert [(achievement.type, achievement.earned_at) for achievement in achievements] == [
        (AchievementType.FIRST_DRAW, date(2025, 1, 1)),
        (AchievementType.DRAW_MASTER, date(2025, 1, 5)),
        (AchievementType.UNDEFEATED_MONTH, date(2025, 1, 5)),
    ]


def test_perfect_week_uses_scanned_game_date_by_default() -> None:
    achievements = get_player_achievements("alice", _series("WWW"), STANDINGS)

    assert _types(achievements) == [
        AchievementType.FIRST_WIN,
        AchievementType.WIN_STREAK_3,
        AchievementType.PERFECT_WEEK,
    ]


def test_wall_clock_makes_window_achievements_depend_on_now() -> None:
    achievements = get_player_achievements(
        "alice",
        _series("WWW"),
        STANDINGS,
        clock=AchievementClock.WALL_CLOCK,
        now=datetime(2030, 1, 1),
    )

    assert AchievementType.PERFECT_WEEK not in _types(achievements)
    assert AchievementType.WIN_STREAK_3 in _types(achievements)


def test_prefix_includes_other_players_games() -> None:
    games = _series("W")
    games.append(
        GameRecord(
            id="other",
            player1_id="carol",
            player1_name="Carol",
            player2_id="dave",
            player2_name="Dave",
            result=GameResult.PLAYER1,
            game_date=date(2024, 12, 1),
        )
    )

    achievements = get_player_achievements("carol", games, STANDINGS)

    assert _types(achievements) == [AchievementType.FIRST_WIN]
    assert achievements[0].player_name == "Carol"
    assert achievements[0].id == "carol_first_win_0"


def test_giant_slayer_needs_three_rank_gap() -> None:
    game = _series("W")[0]

    upset = check_achievements(game, [game], [_standing("alice", 5), _standing("bob", 1)])
    close = check_achievements(game, [game], [_standing("alice", 5), _standing("bob", 3)])

    assert AchievementType.GIANT_SLAYER in _types(upset)
    assert AchievementType.GIANT_SLAYER not in _types(close)


def test_giant_slayer_never_fires_without_a_rank() -> None:
    game = _series("W")[0]

    achievements = get_player_achievements("alice", [game], [_standing("bob", 1)])

    assert _types(achievements) == [AchievementType.FIRST_WIN]
    assert achievements[0].player_name == "Alice"


def test_check_achievements_skips_already_earned_types() -> None:
    game = _series("W")[0]
    standings = [_standing("alice", 5), _standing("bob", 1)]

    fresh = check_achievements(game, [game], standings)
    repeat = check_achievements(game, [game], standings, {"alice": {AchievementType.FIRST_WIN}})

    assert _types(fresh) == [AchievementType.FIRST_WIN, AchievementType.GIANT_SLAYER]
    assert [achievement.id for achievement in repeat] == ["alice_giant_slayer_g1"]


def test_check_achievements_skips_players_without_standing() -> None:
    game = _series("W")[0]

    assert check_achievements(game, [game], []) == []


def test_no_games_means_no_achievements() -> None:
    assert get_player_achievements("alice", [], STANDINGS) == []
    assert get_player_achievements("nobody", _series("WWW"), STANDINGS) == []


def test_failing_predicate_is_logged_and_treated_as_false(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def explode(ctx) -> bool:
        raise RuntimeError("boom")

    broken = AchievementDefinition(AchievementType.PERFECT_WEEK, "Broken", "Always fails", explode)
    monkeypatch.setattr(
        evaluator,
        "ACHIEVEMENT_DEFINITIONS",
        MappingProxyType(
            {
                AchievementType.PERFECT_WEEK: broken,
                AchievementType.FIRST_WIN: ACHIEVEMENT_DEFINITIONS[AchievementType.FIRST_WIN],
            }
        ),
    )

    with caplog.at_level(logging.ERROR, logger="domain.achievements.evaluator"):
        achievements = get_player_achievements("alice", _series("W"), STANDINGS)

    assert _types(achievements) == [AchievementType.FIRST_WIN]
    assert "achievement check failed type=perfect_week" in caplog.text


def _earned(achievements) -> dict[AchievementType, date]:
    return {achievement.type: achievement.earned_at for achievement in achievements}


def test_longer_win_streaks() -> None:
    five = _earned(get_player_achievements("alice", _series("WWWWW"), STANDINGS))
    ten = _earned(get_player_achievements("alice", _series("W" * 10), STANDINGS))

    assert five[AchievementType.WIN_STREAK_5] == date(2025, 1, 5)
    assert AchievementType.WIN_STREAK_10 not in five
    assert ten[AchievementType.WIN_STREAK_3] == date(2025, 1, 3)
    assert ten[AchievementType.WIN_STREAK_5] == date(2025, 1, 5)
    assert ten[AchievementType.WIN_STREAK_10] == date(2025, 1, 10)


def test_win_streak_needs_consecutive_recent_wins() -> None:
    earned = _earned(get_player_achievements("alice", _series("WWWWLWWWWW"), STANDINGS))

    assert earned[AchievementType.WIN_STREAK_3] == date(2025, 1, 3)
    assert earned[AchievementType.WIN_STREAK_5] == date(2025, 1, 10)
    assert AchievementType.WIN_STREAK_10 not in earned


def test_games_played_milestones() -> None:
    earned = _earned(get_player_achievements("alice", _series("WL" * 25), STANDINGS))

    assert earned[AchievementType.GAMES_PLAYED_10] == date(2025, 1, 10)
    assert earned[AchievementType.GAMES_PLAYED_25] == date(2025, 1, 25)
    assert earned[AchievementType.GAMES_PLAYED_50] == date(2025, 2, 19)

    short = _earned(get_player_achievements("alice", _series("WL" * 12), STANDINGS))
    assert AchievementType.GAMES_PLAYED_25 not in short


def test_win_streak_three_keeps_its_first_date_after_a_later_run() -> None:
    achievements = get_player_achievements("alice", _series("LLWWWLWWWW"), STANDINGS)
    streaks = [achievement for achievement in achievements if achievement.type is AchievementType.WIN_STREAK_3]

    assert len(streaks) == 1
    assert streaks[0].earned_at == date(2025, 1, 5)
    assert streaks[0].game_id == "g5"

    earlier = get_player_achievements("alice", _series("WWWLWWWW"), STANDINGS)
    assert _earned(earlier)[AchievementType.WIN_STREAK_3] == date(2025, 1, 3)


def test_perfect_week_not_earned_with_a_loss_in_the_window() -> None:
    earned = _earned(get_player_achievements("alice", _series("WWLW"), STANDINGS))

    assert AchievementType.PERFECT_WEEK not in earned


def test_undefeated_month_not_earned_with_a_loss_in_the_window() -> None:
    earned = _earned(get_player_achievements("alice", _series("WWWWLWW"), STANDINGS))

    assert AchievementType.UNDEFEATED_MONTH not in earned


def test_undefeated_month_counts_only_the_trailing_month() -> None:
    games = _series("L") + _series("DDDDD", start=date(2025, 3, 1))

    earned = _earned(get_player_achievements("alice", games, STANDINGS))

    assert earned[AchievementType.UNDEFEATED_MONTH] == date(2025, 3, 5)


def test_first_draw_only_fires_for_the_first_draw() -> None:
    games = _series("DWD")

    achievements = get_player_achievements("alice", games, STANDINGS)
    later_draw = check_achievements(games[2], games, STANDINGS)

    assert _earned(achievements)[AchievementType.FIRST_DRAW] == date(2025, 1, 1)
    assert AchievementType.FIRST_DRAW not in _types(later_draw)


def test_undefeated_month_window_clamps_to_shorter_month() -> None:
    # From 31 March the window starts on 28 February 2025.
    draws = _series("DDDDD", start=date(2025, 3, 27))
    loss_inside = _series("L", start=date(2025, 2, 28))
    loss_outside = _series("L", start=date(2025, 2, 27))

    inside = _earned(get_player_achievements("alice", loss_inside + draws, STANDINGS))
    outside = _earned(get_player_achievements("alice", loss_outside + draws, STANDINGS))

    assert AchievementType.UNDEFEATED_MONTH not in inside
    assert outside[AchievementType.UNDEFEATED_MONTH] == date(2025, 3, 31)
