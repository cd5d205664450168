"""Tests for TOML-based club config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.achievements import AchievementClock
from domain.common import GameType
from domain.config import DEFAULT_CONFIG_PATH, load_club_config, load_club_configs


def _write(path: Path, body: str) -> Path:
    path.write_text(body.strip())
    return path


def test_default_config_matches_standard_constants() -> None:
    config = load_club_config(DEFAULT_CONFIG_PATH)

    assert config.name == "club_ladder_default"
    assert config.elo.initial_rating == 1000
    assert config.elo.k_factor == pytest.approx(32.0)
    assert config.elo.scale_factor == pytest.approx(400.0)
    assert config.rankings.win_points == pytest.approx(2.0)
    assert config.rankings.loss_points == pytest.approx(1.0)
    assert config.rankings.draw_points == pytest.approx(1.5)
    assert config.ranking_game_types == ()
    assert config.ranking_verified_only is False
    assert config.achievement_clock is AchievementClock.GAME_DATE


def test_load_club_configs_from_directory(tmp_path: Path) -> None:
    _write(
        tmp_path / "school.toml",
        """
[system]
name = "school_ladder"
description = "Ladder games only"

[elo]
initial_rating = 1200
k_factor = 24.0
scale_factor = 420.0

[rankings]
win_points = 3.0
loss_points = 0.0
draw_points = 1.0
game_types = ["ladder", "tournament"]
verified_only = true

[achievements]
clock = "wall_clock"
""",
    )

    configs = load_club_configs(tmp_path)
    assert len(configs) == 1

    config = configs[0]
    assert config.name == "school_ladder"
    assert config.description == "Ladder games only"
    assert config.elo.initial_rating == 1200
    assert config.elo.k_factor == pytest.approx(24.0)
    assert config.rankings.win_points == pytest.approx(3.0)
    assert config.ranking_game_types == (GameType.LADDER, GameType.TOURNAMENT)
    assert config.ranking_verified_only is True
    assert config.achievement_clock is AchievementClock.WALL_CLOCK
    assert config.as_config_json()["ranking_game_types"] == ["ladder", "tournament"]


def test_missing_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    config = load_club_config(_write(tmp_path / "minimal.toml", '[system]\nname = "minimal"'))

    assert config.description is None
    assert config.elo.initial_rating == 1000
    assert config.rankings.draw_points == pytest.approx(1.5)


def test_duplicate_names_raise_error(tmp_path: Path) -> None:
    _write(tmp_path / "a.toml", '[system]\nname = "dup"')
    _write(tmp_path / "b.toml", '[system]\nname = "dup"')

    with pytest.raises(ValueError, match="Duplicate club config names"):
        load_club_configs(tmp_path)


def test_empty_directory_raises_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="No .toml config files"):
        load_club_configs(tmp_path)


def test_missing_file_raises_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_club_config(tmp_path / "absent.toml")


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[system]\nname = \"\"", r"\[system\].name is required"),
        ("[system]\nname = \"x\"\n[elo]\nk_factor = 0.0", r"\[elo\].k_factor must be > 0"),
        ("[system]\nname = \"x\"\n[elo]\ninitial_rating = -5", r"\[elo\].initial_rating must be > 0"),
        ("[system]\nname = \"x\"\n[rankings]\nloss_points = -1.0", r"\[rankings\].loss_points must be >= 0"),
        ("[system]\nname = \"x\"\n[rankings]\ndraw_points = 2.5", r"win >= draw >= loss"),
        ("[system]\nname = \"x\"\n[rankings]\ngame_types = [\"blitz\"]", r"\[rankings\].game_types"),
        ("[system]\nname = \"x\"\n[achievements]\nclock = \"moon\"", r"\[achievements\].clock"),
    ],
)
def test_invalid_values_raise_error(tmp_path: Path, body: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_club_config(_write(tmp_path / "bad.toml", body))
