"""
Tests for the match validator.
"""
from datetime import date, datetime
import uuid

import pytest

from duo_league.errors import ValidationError
from duo_league.validation import SeasonTarget, validate_match


def payload(**overrides):
    data = {
        "team1_player1": "Ana",
        "team1_player2": "Ben",
        "team2_player1": "Cleo",
        "team2_player2": "Dan",
        "team1_score": 3,
        "team2_score": 1,
        "match_date": "2026-10-01",
    }
    data.update(overrides)
    return data


def test_valid_match_resolves_players(four_players):
    """Names resolve to ids, case-insensitively."""
    result = validate_match(payload(team2_player2="dAN"), four_players)

    ana, ben, cleo, dan = four_players
    assert result.team1 == (ana.id, ben.id)
    assert result.team2 == (cleo.id, dan.id)
    assert result.team1_score == 3
    assert result.team2_score == 1
    assert result.match_date == date(2026, 10, 1)


def test_player_ids_are_accepted(four_players):
    ana, ben, cleo, dan = four_players
    result = validate_match(
        payload(team1_player1=str(ana.id), team2_player2=dan.id),
        four_players,
    )
    assert result.team1[0] == ana.id
    assert result.team2[1] == dan.id


def test_missing_player(four_players):
    with pytest.raises(ValidationError, match="missing player"):
        validate_match(payload(team1_player2="  "), four_players)


def test_duplicate_player(four_players):
    """Scenario: players [A, A, B, C] are rejected."""
    with pytest.raises(ValidationError, match="duplicate player"):
        validate_match(
            payload(team1_player1="Ana", team1_player2="Ana", team2_player1="Ben", team2_player2="Cleo"),
            four_players,
        )


def test_duplicate_player_ignores_case(four_players):
    with pytest.raises(ValidationError, match="duplicate player"):
        validate_match(payload(team2_player1="ANA"), four_players)


def test_duplicate_player_by_name_and_id(four_players):
    ana = four_players[0]
    with pytest.raises(ValidationError, match="duplicate player"):
        validate_match(payload(team2_player1=str(ana.id)), four_players)


def test_unknown_player(four_players):
    with pytest.raises(ValidationError, match="unknown player"):
        validate_match(payload(team2_player2="Zoe"), four_players)


def test_missing_score(four_players):
    with pytest.raises(ValidationError, match="missing score"):
        validate_match(payload(team2_score=""), four_players)
    with pytest.raises(ValidationError, match="missing score"):
        validate_match(payload(team1_score=None), four_players)


@pytest.mark.parametrize("bad", [-1, "-2", "two", 1.5, True])
def test_invalid_score(four_players, bad):
    with pytest.raises(ValidationError, match="invalid score"):
        validate_match(payload(team1_score=bad), four_players)


def test_string_scores_are_parsed(four_players):
    result = validate_match(payload(team1_score="0", team2_score=" 4 "), four_players)
    assert (result.team1_score, result.team2_score) == (0, 4)


def test_first_failure_wins(four_players):
    """Player rules are checked before scores."""
    with pytest.raises(ValidationError, match="duplicate player"):
        validate_match(payload(team2_player1="Ana", team1_score=-5), four_players)


def test_season_target_explicit(four_players):
    season_id = uuid.uuid4()
    result = validate_match(
        payload(season_id=str(season_id)), four_players, active_season_id=uuid.uuid4()
    )
    assert result.target is SeasonTarget.EXPLICIT
    assert result.season_id == season_id


def test_season_target_active(four_players):
    active_id = uuid.uuid4()
    result = validate_match(payload(), four_players, active_season_id=active_id)
    assert result.target is SeasonTarget.ACTIVE
    assert result.season_id == active_id


def test_season_target_auto_create(four_players):
    result = validate_match(payload(), four_players)
    assert result.target is SeasonTarget.AUTO_CREATE
    assert result.season_id is None


def test_match_date_defaults_to_today(four_players):
    result = validate_match(payload(match_date=None), four_players, today=date(2026, 5, 2))
    assert result.match_date == date(2026, 5, 2)


def test_invalid_match_date(four_players):
    with pytest.raises(ValidationError, match="invalid match date"):
        validate_match(payload(match_date="yesterday"), four_players)


def test_match_date_drops_time_of_day(four_players):
    result = validate_match(payload(match_date=datetime(2026, 4, 2, 15, 30)), four_players)
    assert result.match_date == date(2026, 4, 2)
    assert type(result.match_date) is date
