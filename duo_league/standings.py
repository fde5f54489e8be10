"""Fold matches into per-player standings rows."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence
import uuid

from .models import Match, MatchOutcome, Player, StandingsRow


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandingsOverview:
    """Headline figures shown above a leaderboard."""

    total_players: int
    total_matches: int
    average_success: float


def filter_matches(matches: Iterable[Match], season_id: Optional[uuid.UUID] = None) -> List[Match]:
    """Scope ``matches`` to one season, or keep them all when ``season_id`` is None."""

    if season_id is None:
        return list(matches)
    return [match for match in matches if match.season_id == season_id]


def sort_standings(rows: Iterable[StandingsRow]) -> List[StandingsRow]:
    """Order rows by success percentage, then total points, and assign ranks.

    The comparison uses the unrounded percentage so display rounding never
    inverts two ranks. Remaining ties keep their incoming order.
    """

    ordered = sorted(rows, key=lambda row: (-row.success_ratio, -row.total_points))
    for index, row in enumerate(ordered):
        row.rank = index + 1
    return ordered


def aggregate(
    players: Iterable[Player],
    matches: Iterable[Match],
    *,
    include_idle: bool = False,
) -> List[StandingsRow]:
    """Build sorted standings for ``players`` from ``matches``.

    Callers scope ``matches`` beforehand (one season or all time). Players
    without matches are dropped unless ``include_idle`` is set, in which case
    they are kept at 0%.
    """

    rows: Dict[uuid.UUID, StandingsRow] = {
        player.id: StandingsRow(player_id=player.id, name=player.name) for player in players
    }

    for match in matches:
        sides = (
            (match.team1, match.points_for_team(1), match.team1_score, match.team2_score),
            (match.team2, match.points_for_team(2), match.team2_score, match.team1_score),
        )
        for team, points, scored, conceded in sides:
            for player_id in team:
                row = rows.get(player_id)
                if row is None:
                    logger.debug("standings_unknown_player match=%s player=%s", match.id, player_id)
                    continue
                row.record_result(points, scored, conceded)

    for row in rows.values():
        row.finalize()

    selected = [row for row in rows.values() if include_idle or row.matches_played > 0]
    return sort_standings(selected)


def overview(rows: Sequence[StandingsRow], matches: Sequence[Match]) -> StandingsOverview:
    playing = [row for row in rows if row.matches_played > 0]
    average = sum(row.success_ratio for row in playing) / len(playing) if playing else 0.0
    return StandingsOverview(
        total_players=len(playing),
        total_matches=len(matches),
        average_success=round(average, 1),
    )


@dataclass(frozen=True)
class MatchStats:
    """Result counts shown above a match list."""

    total_matches: int
    team1_wins: int
    team2_wins: int
    draws: int


def match_stats(matches: Iterable[Match]) -> MatchStats:
    counts = Counter(match.outcome for match in matches)
    return MatchStats(
        total_matches=sum(counts.values()),
        team1_wins=counts[MatchOutcome.TEAM1_WIN],
        team2_wins=counts[MatchOutcome.TEAM2_WIN],
        draws=counts[MatchOutcome.DRAW],
    )


__all__ = [
    "MatchStats",
    "StandingsOverview",
    "aggregate",
    "filter_matches",
    "match_stats",
    "overview",
    "sort_standings",
]
