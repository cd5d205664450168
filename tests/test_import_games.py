"""Tests for the CSV import script."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import import_games
from db import create_db_engine, create_session_factory
from domain.common import GameResult
from repositories import GameRepository, PlayerRepository

GAMES_HEADER = "id,player1_id,player1_name,player2_id,player2_name,result,game_date\n"


def _read_back(db_path: Path) -> tuple[list[str], list[str]]:
    engine = create_db_engine(f"sqlite+pysqlite:///{db_path}")
    with create_session_factory(engine)() as session:
        games = [game.id for game in GameRepository(session).get_games()]
        players = [player.id for player in PlayerRepository(session).get_players()]
    engine.dispose()
    return games, players


def test_parse_game_row_rejects_identical_players() -> None:
    row = {
        "player1_id": "a",
        "player1_name": "A",
        "player2_id": "a",
        "player2_name": "A",
        "result": "draw",
        "game_date": "2025-01-10",
    }

    with pytest.raises(ValueError, match="identical players"):
        import_games.parse_game_row(row)


def test_parse_game_row_builds_repository_payload() -> None:
    payload = import_games.parse_game_row(
        {
            "id": " g1 ",
            "player1_id": "a",
            "player1_name": "A",
            "player2_id": "b",
            "player2_name": "B",
            "result": "player2",
            "game_date": "2025-01-10T00:00:00Z",
            "is_verified": "Yes",
        }
    )

    assert payload["id"] == "g1"
    assert payload["result"] is GameResult.PLAYER2
    assert payload["is_verified"] is True
    assert payload["game_time"] == 0


def test_bad_rows_are_skipped_and_good_rows_imported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(import_games, "configure_logging", lambda verbose: None)
    db_path = tmp_path / "club.db"
    games_csv = tmp_path / "games.csv"
    games_csv.write_text(
        GAMES_HEADER
        + "g1,a,A,b,B,player1,2025-01-10\n"
        + "g2,a,A,a,A,draw,2025-01-11\n"
        + "g1,b,B,c,C,draw,2025-01-12\n"
        + "g3,a,A,c,C,resigned,2025-01-13\n"
        + "g4,b,B,c,C,draw,2025-01-14\n",
        encoding="utf-8",
    )
    players_csv = tmp_path / "players.csv"
    players_csv.write_text(
        "id,name,grade,registered_at\n"
        "a,A,10,2024-09-01\n"
        "a,Again,11,2024-09-02\n"
        ",Nameless,9,\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        import_games.app,
        ["--games", str(games_csv), "--players", str(players_csv), "--db-url", f"sqlite+pysqlite:///{db_path}"],
    )

    assert result.exit_code == 0, result.output
    assert "players imported=1 skipped=2" in result.output
    assert "games imported=2 skipped=3" in result.output
    assert "games.csv:3: skipped (identical players (a))" in result.output

    games, players = _read_back(db_path)
    assert sorted(games) == ["g1", "g4"]
    assert players == ["a"]
