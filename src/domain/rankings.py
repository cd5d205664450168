"""Ladder standings derived from the game log and the roster."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, time

from domain.common import GameRecord, GameResult, PlayerStanding, RosterPlayer


@dataclass(frozen=True)
class RankingParameters:
    win_points: float = 2.0
    loss_points: float = 1.0
    draw_points: float = 1.5


@dataclass
class _Tally:
    player: RosterPlayer
    last_active: datetime | None
    games_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: float = 0.0

    def touch(self, game: GameRecord) -> None:
        self.games_played += 1
        played_at = datetime.combine(game.game_date, time.min)
        if self.last_active is None or played_at > self.last_active:
            self.last_active = played_at


def calculate_rankings_from_games(
    games: Iterable[GameRecord],
    roster: Sequence[RosterPlayer],
    params: RankingParameters | None = None,
) -> list[PlayerStanding]:
    """Fold the game log into ranked standings for every roster member.

    Games with a participant that is not on the roster are left out entirely.
    Ties on points and wins keep roster order and still get distinct ranks.
    """
    params = params or RankingParameters()
    tallies: dict[str, _Tally] = {}
    for player in roster:
        tallies.setdefault(player.id, _Tally(player=player, last_active=player.registered_at))

    for game in games:
        player1 = tallies.get(game.player1_id)
        player2 = tallies.get(game.player2_id)
        if player1 is None or player2 is None:
            continue

        player1.touch(game)
        player2.touch(game)

        if game.result is GameResult.PLAYER1:
            winner, loser = player1, player2
        elif game.result is GameResult.PLAYER2:
            winner, loser = player2, player1
        else:
            player1.points += params.draw_points
            player2.points += params.draw_points
            player1.draws += 1
            player2.draws += 1
            continue

        winner.points += params.win_points
        loser.points += params.loss_points
        winner.wins += 1
        loser.losses += 1

    ordered = sorted(tallies.values(), key=lambda tally: (-tally.points, -tally.wins))
    return [
        PlayerStanding(
            id=tally.player.id,
            name=tally.player.name,
            grade=tally.player.grade,
            games_played=tally.games_played,
            wins=tally.wins,
            draws=tally.draws,
            losses=tally.losses,
            points=tally.points,
            rank=position + 1,
            last_active=tally.last_active,
            elo_rating=tally.player.elo_rating,
            email=tally.player.email,
        )
        for position, tally in enumerate(ordered)
    ]


def standing_for(player_id: str, standings: Sequence[PlayerStanding]) -> PlayerStanding | None:
    return next((standing for standing in standings if standing.id == player_id), None)


__all__ = ["RankingParameters", "calculate_rankings_from_games", "standing_for"]
