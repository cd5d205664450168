"""Load club ladder settings from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.achievements.evaluator import AchievementClock
from domain.common import GameType
from domain.rankings import RankingParameters
from domain.ratings.elo.calculator import EloParameters

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "club" / "default.toml"


@dataclass(frozen=True)
class ClubConfig:
    """Everything a recalculation or ladder query needs besides the data."""

    name: str
    description: str | None
    file_path: Path
    elo: EloParameters
    rankings: RankingParameters
    ranking_game_types: tuple[GameType, ...] = ()
    ranking_verified_only: bool = False
    achievement_clock: AchievementClock = AchievementClock.GAME_DATE

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.elo.initial_rating,
            "k_factor": self.elo.k_factor,
            "scale_factor": self.elo.scale_factor,
            "win_points": self.rankings.win_points,
            "loss_points": self.rankings.loss_points,
            "draw_points": self.rankings.draw_points,
            "ranking_game_types": [game_type.value for game_type in self.ranking_game_types],
            "ranking_verified_only": self.ranking_verified_only,
            "achievement_clock": self.achievement_clock.value,
        }


def load_club_config(file_path: Path = DEFAULT_CONFIG_PATH) -> ClubConfig:
    """Load and validate one club TOML config file."""
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_club_config(raw, file_path)


def load_club_configs(config_dir: Path) -> list[ClubConfig]:
    """Load all TOML files in a directory with duplicate-name validation."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs = [load_club_config(file_path) for file_path in config_files]
    names = [config.name for config in configs]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate club config names found in {config_dir}: {names}")
    return configs


def _parse_club_config(raw: dict[str, Any], file_path: Path) -> ClubConfig:
    system_raw = raw.get("system", {})
    elo_raw = raw.get("elo", {})
    rankings_raw = raw.get("rankings", {})
    achievements_raw = raw.get("achievements", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    elo = EloParameters(
        initial_rating=int(elo_raw.get("initial_rating", 1000)),
        k_factor=float(elo_raw.get("k_factor", 32.0)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
    )
    if elo.initial_rating <= 0:
        raise ValueError(f"{file_path}: [elo].initial_rating must be > 0")
    if elo.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if elo.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")

    rankings = RankingParameters(
        win_points=float(rankings_raw.get("win_points", 2.0)),
        loss_points=float(rankings_raw.get("loss_points", 1.0)),
        draw_points=float(rankings_raw.get("draw_points", 1.5)),
    )
    if rankings.loss_points < 0.0:
        raise ValueError(f"{file_path}: [rankings].loss_points must be >= 0")
    if rankings.win_points < rankings.draw_points or rankings.draw_points < rankings.loss_points:
        raise ValueError(f"{file_path}: [rankings] points must satisfy win >= draw >= loss")

    try:
        game_types = tuple(GameType(value) for value in rankings_raw.get("game_types", []))
    except ValueError as exc:
        raise ValueError(f"{file_path}: [rankings].game_types: {exc}") from exc

    try:
        clock = AchievementClock(achievements_raw.get("clock", AchievementClock.GAME_DATE.value))
    except ValueError as exc:
        raise ValueError(f"{file_path}: [achievements].clock: {exc}") from exc

    return ClubConfig(
        name=name,
        description=description,
        file_path=file_path,
        elo=elo,
        rankings=rankings,
        ranking_game_types=game_types,
        ranking_verified_only=bool(rankings_raw.get("verified_only", False)),
        achievement_clock=clock,
    )


__all__ = ["DEFAULT_CONFIG_PATH", "ClubConfig", "load_club_config", "load_club_configs"]
