"""Domain models for the duo_league project.

Players meet in 2v2 matches that are grouped into seasons. The records are
plain dataclasses so any storage backend can hand them to the league core;
standings rows are derived on every query and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
import uuid
from typing import Optional, Tuple


WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchOutcome(Enum):
    """Supported outcomes for a 2v2 match."""

    TEAM1_WIN = "team1_win"
    TEAM2_WIN = "team2_win"
    DRAW = "draw"


class SeasonState(Enum):
    """Lifecycle states derived from the season flags."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    LOCKED = "locked"


@dataclass(frozen=True)
class Player:
    """Represents a participant that can play across seasons."""

    id: uuid.UUID
    name: str
    created_at: datetime = field(default_factory=utcnow)

    @property
    def key(self) -> str:
        return self.name.strip().casefold()


@dataclass(frozen=True)
class Season:
    """A time-bounded grouping of matches."""

    id: uuid.UUID
    name: str
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = False
    is_locked: bool = False
    created_at: datetime = field(default_factory=utcnow)
    description: Optional[str] = None

    @property
    def state(self) -> SeasonState:
        if self.is_locked:
            return SeasonState.LOCKED
        if self.is_active:
            return SeasonState.ACTIVE
        return SeasonState.SCHEDULED


@dataclass(frozen=True)
class Match:
    """A single 2v2 match. Player slots hold player ids."""

    id: uuid.UUID
    season_id: uuid.UUID
    team1_player1: uuid.UUID
    team1_player2: uuid.UUID
    team2_player1: uuid.UUID
    team2_player2: uuid.UUID
    team1_score: int
    team2_score: int
    match_date: date
    created_at: datetime = field(default_factory=utcnow)

    @property
    def team1(self) -> Tuple[uuid.UUID, uuid.UUID]:
        return (self.team1_player1, self.team1_player2)

    @property
    def team2(self) -> Tuple[uuid.UUID, uuid.UUID]:
        return (self.team2_player1, self.team2_player2)

    @property
    def player_ids(self) -> Tuple[uuid.UUID, ...]:
        return self.team1 + self.team2

    @property
    def outcome(self) -> MatchOutcome:
        if self.team1_score > self.team2_score:
            return MatchOutcome.TEAM1_WIN
        if self.team1_score < self.team2_score:
            return MatchOutcome.TEAM2_WIN
        return MatchOutcome.DRAW

    def points_for_team(self, team: int) -> int:
        """Return the league points awarded to ``team`` (1 or 2)."""

        outcome = self.outcome
        if outcome is MatchOutcome.DRAW:
            return DRAW_POINTS
        winner = 1 if outcome is MatchOutcome.TEAM1_WIN else 2
        return WIN_POINTS if team == winner else LOSS_POINTS

    def team_of(self, player_id: uuid.UUID) -> Optional[int]:
        """Return 1 or 2 for the team ``player_id`` played on."""

        if player_id in self.team1:
            return 1
        if player_id in self.team2:
            return 2
        return None

    def involves(self, player_id: uuid.UUID) -> bool:
        return player_id in self.player_ids


@dataclass
class StandingsRow:
    """Aggregate statistics for a player within a scope (season or all time)."""

    player_id: uuid.UUID
    name: str
    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    total_points: int = 0
    max_possible_points: int = 0
    success_ratio: float = 0.0
    success_percentage: float = 0.0
    rank: int = 0
    current_rank: int = 0
    wins_to_first: int = 0
    losses_to_last: int = 0
    is_first_place: bool = False
    is_last_place: bool = False

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def record_result(self, points: int, scored: int, conceded: int) -> None:
        """Update the row with one match from this player's side."""

        self.matches_played += 1
        self.total_points += points
        self.max_possible_points += WIN_POINTS
        self.goals_for += scored
        self.goals_against += conceded
        if points == WIN_POINTS:
            self.wins += 1
        elif points == DRAW_POINTS:
            self.draws += 1
        else:
            self.losses += 1

    def finalize(self) -> None:
        if self.max_possible_points > 0:
            self.success_ratio = self.total_points / self.max_possible_points * 100
        else:
            self.success_ratio = 0.0
        self.success_percentage = round(self.success_ratio, 1)


__all__ = [
    "DRAW_POINTS",
    "LOSS_POINTS",
    "WIN_POINTS",
    "Match",
    "MatchOutcome",
    "Player",
    "Season",
    "SeasonState",
    "StandingsRow",
]
