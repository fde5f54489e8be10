"""Forecast how many wins or losses would move a player in the table.

Both figures are single-player estimates: they assume nobody else gains or
loses points meanwhile and are meant as an order of magnitude, not a
guarantee.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import List, Sequence

from .models import WIN_POINTS, StandingsRow


# volatility = average games / player games
HIGH_VOLATILITY = 1.5
LOW_VOLATILITY = 0.7
# Loss tolerance scaling, in tenths, for players far below / above average games.
EXPOSED_SCALE_TENTHS = 7
STABLE_SCALE_TENTHS = 13


class ProjectionMethod(Enum):
    VOLATILITY = "volatility"
    # Earlier formula without games-in-hand or volatility adjustments.
    SIMPLE = "simple"


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def wins_to_first(
    row: StandingsRow,
    leader: StandingsRow,
    method: ProjectionMethod = ProjectionMethod.VOLATILITY,
) -> int:
    points_needed = leader.total_points - row.total_points + 1
    if method is ProjectionMethod.VOLATILITY:
        games_difference = leader.matches_played - row.matches_played
        if games_difference > 0:
            points_needed = max(0, points_needed - games_difference * WIN_POINTS)
    return max(0, _ceil_div(points_needed, WIN_POINTS))


def losses_to_last(
    row: StandingsRow,
    last: StandingsRow,
    average_games: float,
    method: ProjectionMethod = ProjectionMethod.VOLATILITY,
) -> int:
    points_can_lose = row.total_points - last.total_points
    base = points_can_lose // WIN_POINTS + 1 if points_can_lose > 0 else 1
    if method is ProjectionMethod.SIMPLE:
        return base

    volatility = average_games / max(row.matches_played, 1)
    if volatility > HIGH_VOLATILITY:
        return max(1, base * EXPOSED_SCALE_TENTHS // 10)
    if volatility < LOW_VOLATILITY:
        return _ceil_div(base * STABLE_SCALE_TENTHS, 10)
    return base


def project(
    standings: Sequence[StandingsRow],
    *,
    method: ProjectionMethod = ProjectionMethod.VOLATILITY,
) -> List[StandingsRow]:
    """Return copies of ``standings`` annotated with rank forecasts.

    ``standings`` must already be sorted, see
    :func:`duo_league.standings.sort_standings`.
    """

    count = len(standings)
    if count == 0:
        return []

    leader = standings[0]
    last = standings[-1]
    average_games = sum(row.matches_played for row in standings) / count

    projected = []
    for index, row in enumerate(standings):
        rank = index + 1
        projected.append(
            replace(
                row,
                current_rank=rank,
                is_first_place=rank == 1,
                is_last_place=rank == count,
                wins_to_first=0 if rank == 1 else wins_to_first(row, leader, method),
                losses_to_last=(
                    0 if rank == count else losses_to_last(row, last, average_games, method)
                ),
            )
        )
    return projected


__all__ = ["ProjectionMethod", "losses_to_last", "project", "wins_to_first"]
