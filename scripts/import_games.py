#!/usr/bin/env python3
"""Load roster and game CSV exports into the club database."""

from __future__ import annotations

import csv
import sys
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory, ensure_schema
from domain.common import GameResult, GameType
from logging_setup import configure_logging
from repositories import GameRepository, PlayerRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Import players and games from CSV exports.",
)

_TRUE_VALUES = {"1", "true", "yes", "y"}


def _optional(row: dict[str, str], key: str) -> str | None:
    value = (row.get(key) or "").strip()
    return value or None


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


def parse_player_row(row: dict[str, str]) -> dict[str, Any]:
    """Turn one roster CSV row into `PlayerRepository.add_player` input."""
    player_id = (row.get("id") or "").strip()
    name = (row.get("name") or "").strip()
    if not player_id or not name:
        raise ValueError("id and name are required")

    payload: dict[str, Any] = {
        "id": player_id,
        "name": name,
        "grade": (row.get("grade") or "").strip(),
        "email": (row.get("email") or "").strip(),
    }
    registered_at = _parse_datetime(_optional(row, "registered_at"))
    if registered_at is not None:
        payload["registered_at"] = registered_at
    return payload


def parse_game_row(row: dict[str, str]) -> dict[str, Any]:
    """Turn one game CSV row into `GameRepository.add_game` input."""
    for key in ("player1_id", "player1_name", "player2_id", "player2_name", "result", "game_date"):
        if not (row.get(key) or "").strip():
            raise ValueError(f"{key} is required")
    if row["player1_id"].strip() == row["player2_id"].strip():
        raise ValueError(f"identical players ({row['player1_id'].strip()})")

    payload: dict[str, Any] = {
        "player1_id": row["player1_id"].strip(),
        "player1_name": row["player1_name"].strip(),
        "player2_id": row["player2_id"].strip(),
        "player2_name": row["player2_name"].strip(),
        "result": GameResult(row["result"].strip()),
        "game_date": date.fromisoformat(row["game_date"].strip()[:10]),
        "game_type": GameType((row.get("game_type") or GameType.LADDER.value).strip()),
        "game_time": int(row.get("game_time") or 0),
        "event_id": _optional(row, "event_id"),
        "notes": _optional(row, "notes"),
        "opening": _optional(row, "opening"),
        "endgame": _optional(row, "endgame"),
        "recorded_by": _optional(row, "recorded_by"),
        "is_verified": (row.get("is_verified") or "").strip().lower() in _TRUE_VALUES,
    }
    if _optional(row, "id"):
        payload["id"] = row["id"].strip()
    recorded_at = _parse_datetime(_optional(row, "recorded_at"))
    if recorded_at is not None:
        payload["recorded_at"] = recorded_at
    return payload


@app.command()
def import_csv(
    games_csv: Annotated[
        Path | None,
        typer.Option("--games", help="Games CSV export."),
    ] = None,
    players_csv: Annotated[
        Path | None,
        typer.Option("--players", help="Roster CSV export."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", envvar="CHESS_LADDER_DB_URL", help="Database URL."),
    ] = DEFAULT_DB_URL,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Import players first, then games. Rejected rows are reported and skipped."""
    if games_csv is None and players_csv is None:
        raise typer.BadParameter("pass --games and/or --players")

    configure_logging(verbose)
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            if players_csv is not None:
                repository = PlayerRepository(session)
                imported, skipped = import_rows(players_csv, parse_player_row, repository.add_player)
                typer.echo(f"players imported={imported} skipped={skipped}")
            if games_csv is not None:
                repository = GameRepository(session)
                imported, skipped = import_rows(games_csv, parse_game_row, repository.add_game)
                typer.echo(f"games imported={imported} skipped={skipped}")
            session.commit()
        except Exception:
            session.rollback()
            raise


def import_rows(
    path: Path,
    parse: Callable[[dict[str, str]], dict[str, Any]],
    add: Callable[[dict[str, Any]], str],
) -> tuple[int, int]:
    """Parse and add each CSV row. Returns `(imported, skipped)`.

    Rows rejected by the parser or the repository (missing fields, identical
    players, duplicate ids) are reported and skipped before anything is staged.
    """
    imported = 0
    skipped = 0
    with path.open(newline="", encoding="utf-8") as file:
        for line_number, row in enumerate(csv.DictReader(file), start=2):
            try:
                add(parse(row))
            except ValueError as exc:
                typer.echo(f"{path.name}:{line_number}: skipped ({exc})", err=True)
                skipped += 1
                continue
            imported += 1
    return imported, skipped


if __name__ == "__main__":
    app()
