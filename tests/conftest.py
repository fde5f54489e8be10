"""
Shared pytest fixtures for the duo_league tests.
"""

from datetime import date
import uuid

import pytest

from duo_league.models import Match, Player
from duo_league.repository import InMemoryLeagueRepository
from duo_league.service import LeagueService


TODAY = date(2026, 10, 19)


def make_match(team1, team2, score1, score2, season_id=None, match_date=TODAY):
    """Build a match record directly, bypassing validation."""
    return Match(
        id=uuid.uuid4(),
        season_id=season_id or uuid.uuid4(),
        team1_player1=team1[0].id,
        team1_player2=team1[1].id,
        team2_player1=team2[0].id,
        team2_player2=team2[1].id,
        team1_score=score1,
        team2_score=score2,
        match_date=match_date,
    )


@pytest.fixture
def repository():
    return InMemoryLeagueRepository()


@pytest.fixture
def service(repository):
    return LeagueService(repository, today=lambda: TODAY)


@pytest.fixture
def four_players():
    """Ana, Ben, Cleo and Dan as plain records."""
    return [Player(id=uuid.uuid4(), name=name) for name in ("Ana", "Ben", "Cleo", "Dan")]


@pytest.fixture
def roster(service):
    """Ana, Ben, Cleo and Dan registered through the service."""
    return [service.add_player(name) for name in ("Ana", "Ben", "Cleo", "Dan")]
