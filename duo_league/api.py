"""FastAPI application exposing players, seasons, matches and standings."""

from __future__ import annotations

import os
from datetime import date, datetime
from typing import Any, List, Optional
import uuid

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .errors import LeagueError, NotFoundError, StateError, ValidationError
from .logging_config import setup_logging
from .models import Match, MatchOutcome, Player, Season
from .projection import ProjectionMethod
from .service import LeagueService, MatchOrder


PROJECTION_METHOD = os.getenv("DUO_LEAGUE_PROJECTION", ProjectionMethod.VOLATILITY.value)
LOG_LEVEL = os.getenv("DUO_LEAGUE_LOG_LEVEL", "INFO")

app = FastAPI(title="Duo League API")

_service = LeagueService(projection=PROJECTION_METHOD)


@app.on_event("startup")
def _configure_logging() -> None:
    setup_logging(LOG_LEVEL)


def get_service() -> LeagueService:
    """Provide the service instance for FastAPI dependencies."""

    return _service


_ERROR_STATUS = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StateError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
)


@app.exception_handler(LeagueError)
async def _league_error_handler(request: Request, exc: LeagueError) -> JSONResponse:
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Players -----------------------------------------------------------------
class PlayerCreate(BaseModel):
    name: str


class PlayerResponse(BaseModel):
    id: uuid.UUID
    name: str
    created_at: datetime


def _player_to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(id=player.id, name=player.name, created_at=player.created_at)


@app.get("/players", response_model=List[PlayerResponse])
def list_players(service: LeagueService = Depends(get_service)) -> List[PlayerResponse]:
    return [_player_to_response(player) for player in service.list_players()]


@app.post("/players", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
def create_player(
    payload: PlayerCreate,
    service: LeagueService = Depends(get_service),
) -> PlayerResponse:
    return _player_to_response(service.add_player(payload.name))


@app.patch("/players/{player_id}", response_model=PlayerResponse)
def rename_player(
    player_id: uuid.UUID,
    payload: PlayerCreate,
    service: LeagueService = Depends(get_service),
) -> PlayerResponse:
    return _player_to_response(service.rename_player(player_id, payload.name))


@app.delete("/players/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_player(player_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> None:
    service.remove_player(player_id)


# Seasons -----------------------------------------------------------------
class SeasonBase(BaseModel):
    name: str = Field(..., min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None


class SeasonCreate(SeasonBase):
    is_active: bool = False


class SeasonUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None


class SeasonResponse(BaseModel):
    id: uuid.UUID
    name: str
    state: str
    start_date: date
    end_date: Optional[date]
    is_active: bool
    is_locked: bool
    created_at: datetime
    description: Optional[str]


class SeasonSummaryResponse(BaseModel):
    season_id: uuid.UUID
    total_matches: int
    total_players: int
    first_match_date: Optional[date]
    last_match_date: Optional[date]


def _season_to_response(season: Season) -> SeasonResponse:
    return SeasonResponse(
        id=season.id,
        name=season.name,
        state=season.state.value,
        start_date=season.start_date,
        end_date=season.end_date,
        is_active=season.is_active,
        is_locked=season.is_locked,
        created_at=season.created_at,
        description=season.description,
    )


@app.get("/seasons", response_model=List[SeasonResponse])
def list_seasons(service: LeagueService = Depends(get_service)) -> List[SeasonResponse]:
    return [_season_to_response(season) for season in service.seasons.list()]


@app.post("/seasons", response_model=SeasonResponse, status_code=status.HTTP_201_CREATED)
def create_season(
    payload: SeasonCreate,
    service: LeagueService = Depends(get_service),
) -> SeasonResponse:
    season = service.seasons.create(
        payload.name,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_active=payload.is_active,
    )
    return _season_to_response(season)


@app.get("/seasons/active", response_model=Optional[SeasonResponse])
def get_active_season(service: LeagueService = Depends(get_service)) -> Optional[SeasonResponse]:
    season = service.seasons.active()
    return _season_to_response(season) if season is not None else None


@app.get("/seasons/{season_id}", response_model=SeasonResponse)
def get_season(season_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> SeasonResponse:
    return _season_to_response(service.seasons.get(season_id))


@app.put("/seasons/{season_id}", response_model=SeasonResponse)
def update_season(
    season_id: uuid.UUID,
    payload: SeasonUpdate,
    service: LeagueService = Depends(get_service),
) -> SeasonResponse:
    season = service.seasons.update(
        season_id,
        name=payload.name,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return _season_to_response(season)


@app.delete("/seasons/{season_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_season(season_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> None:
    service.seasons.delete(season_id)


@app.post("/seasons/{season_id}/activate", response_model=SeasonResponse)
def activate_season(season_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> SeasonResponse:
    return _season_to_response(service.seasons.activate(season_id))


@app.post("/seasons/{season_id}/end", response_model=SeasonResponse)
def end_season(season_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> SeasonResponse:
    return _season_to_response(service.seasons.end_season(season_id))


@app.get("/seasons/{season_id}/summary", response_model=SeasonSummaryResponse)
def season_summary(
    season_id: uuid.UUID,
    service: LeagueService = Depends(get_service),
) -> SeasonSummaryResponse:
    summary = service.seasons.summary(season_id)
    return SeasonSummaryResponse(
        season_id=summary.season_id,
        total_matches=summary.total_matches,
        total_players=summary.total_players,
        first_match_date=summary.first_match_date,
        last_match_date=summary.last_match_date,
    )


# Matches -----------------------------------------------------------------
class MatchPayload(BaseModel):
    # Left loose so the league validator reports missing or malformed fields.
    team1_player1: Optional[str] = None
    team1_player2: Optional[str] = None
    team2_player1: Optional[str] = None
    team2_player2: Optional[str] = None
    team1_score: Optional[Any] = None
    team2_score: Optional[Any] = None
    match_date: Optional[date] = None
    season_id: Optional[uuid.UUID] = None


class MatchResponse(BaseModel):
    id: uuid.UUID
    season_id: uuid.UUID
    team1_player1: uuid.UUID
    team1_player2: uuid.UUID
    team2_player1: uuid.UUID
    team2_player2: uuid.UUID
    team1_score: int
    team2_score: int
    outcome: str
    match_date: date
    created_at: datetime


def _match_to_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        season_id=match.season_id,
        team1_player1=match.team1_player1,
        team1_player2=match.team1_player2,
        team2_player1=match.team2_player1,
        team2_player2=match.team2_player2,
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        outcome=match.outcome.value,
        match_date=match.match_date,
        created_at=match.created_at,
    )


@app.get("/matches", response_model=List[MatchResponse])
def list_matches(
    season_id: Optional[uuid.UUID] = None,
    outcome: Optional[MatchOutcome] = None,
    player_id: Optional[uuid.UUID] = None,
    order: MatchOrder = MatchOrder.NEWEST_FIRST,
    limit: Optional[int] = Query(None, ge=1),
    service: LeagueService = Depends(get_service),
) -> List[MatchResponse]:
    matches = service.list_matches(
        season_id,
        outcome=outcome,
        player_id=player_id,
        order=order,
        limit=limit,
    )
    return [_match_to_response(match) for match in matches]


class MatchStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_matches: int
    team1_wins: int
    team2_wins: int
    draws: int


@app.get("/matches/stats", response_model=MatchStatsResponse)
def get_match_stats(
    season_id: Optional[uuid.UUID] = None,
    service: LeagueService = Depends(get_service),
) -> MatchStatsResponse:
    return MatchStatsResponse.model_validate(service.match_stats(season_id))


@app.post("/matches", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
def create_match(
    payload: MatchPayload,
    service: LeagueService = Depends(get_service),
) -> MatchResponse:
    match = service.record_match(payload.model_dump(exclude_none=True))
    return _match_to_response(match)


@app.put("/matches/{match_id}", response_model=MatchResponse)
def update_match(
    match_id: uuid.UUID,
    payload: MatchPayload,
    service: LeagueService = Depends(get_service),
) -> MatchResponse:
    match = service.edit_match(match_id, payload.model_dump(exclude_none=True))
    return _match_to_response(match)


@app.delete("/matches/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match(match_id: uuid.UUID, service: LeagueService = Depends(get_service)) -> None:
    service.remove_match(match_id)


# Standings ---------------------------------------------------------------
class StandingsRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: uuid.UUID
    name: str
    matches_played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    total_points: int
    max_possible_points: int
    success_percentage: float
    rank: int
    current_rank: int
    wins_to_first: int
    losses_to_last: int
    is_first_place: bool
    is_last_place: bool


@app.get("/standings", response_model=List[StandingsRowResponse])
def get_standings(
    season_id: Optional[uuid.UUID] = None,
    all_players: bool = False,
    projection: Optional[ProjectionMethod] = None,
    service: LeagueService = Depends(get_service),
) -> List[StandingsRowResponse]:
    rows = service.standings(season_id, include_idle=all_players, method=projection)
    return [StandingsRowResponse.model_validate(row) for row in rows]


class StandingsOverviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_players: int
    total_matches: int
    average_success: float


@app.get("/standings/overview", response_model=StandingsOverviewResponse)
def get_standings_overview(
    season_id: Optional[uuid.UUID] = None,
    service: LeagueService = Depends(get_service),
) -> StandingsOverviewResponse:
    return StandingsOverviewResponse.model_validate(service.overview(season_id))
