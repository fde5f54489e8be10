"""duo_league package exposing the league core: seasons, matches and standings."""

from .errors import LeagueError, NotFoundError, StateError, ValidationError
from .models import (
    Match,
    MatchOutcome,
    Player,
    Season,
    SeasonState,
    StandingsRow,
)
from .projection import ProjectionMethod, project
from .repository import InMemoryLeagueRepository
from .seasons import SeasonRegistry
from .service import LeagueService
from .standings import aggregate
from .validation import SeasonTarget, validate_match

__all__ = [
    "InMemoryLeagueRepository",
    "LeagueError",
    "LeagueService",
    "Match",
    "MatchOutcome",
    "NotFoundError",
    "Player",
    "ProjectionMethod",
    "Season",
    "SeasonRegistry",
    "SeasonState",
    "SeasonTarget",
    "StandingsRow",
    "StateError",
    "ValidationError",
    "aggregate",
    "project",
    "validate_match",
]
