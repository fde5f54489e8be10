"""
Tests for the standings aggregator.
"""
import uuid

import pytest

from conftest import make_match
from duo_league.models import Player
from duo_league.standings import aggregate, filter_matches, match_stats, overview


def by_name(rows):
    return {row.name: row for row in rows}


# ============================================================================
# Scenarios
# ============================================================================

def test_single_decisive_match(four_players):
    """(A,B) 3-1 (C,D): winners get 3 points each, losers none."""
    ana, ben, cleo, dan = four_players
    rows = by_name(aggregate(four_players, [make_match((ana, ben), (cleo, dan), 3, 1)]))

    for name in ("Ana", "Ben"):
        assert rows[name].wins == 1
        assert rows[name].total_points == 3
        assert rows[name].goals_for == 3
        assert rows[name].goals_against == 1
    for name in ("Cleo", "Dan"):
        assert rows[name].losses == 1
        assert rows[name].total_points == 0
        assert rows[name].success_percentage == 0.0
    assert rows["Ana"].success_percentage == 100.0
    assert rows["Ana"].max_possible_points == 3


def test_win_then_draw(four_players):
    """A second match (A,C) 2-2 (B,D) leaves A on 4 points from 2 matches."""
    ana, ben, cleo, dan = four_players
    matches = [
        make_match((ana, ben), (cleo, dan), 3, 1),
        make_match((ana, cleo), (ben, dan), 2, 2),
    ]
    rows = by_name(aggregate(four_players, matches))

    assert rows["Ana"].matches_played == 2
    assert rows["Ana"].total_points == 4
    assert rows["Ana"].draws == 1
    assert rows["Ana"].success_percentage == 66.7
    assert rows["Ana"].success_ratio == pytest.approx(400 / 6)
    assert rows["Dan"].total_points == 1
    assert rows["Dan"].success_percentage == 16.7


# ============================================================================
# Properties
# ============================================================================

@pytest.mark.parametrize("score1,score2,total", [(5, 2, 3), (0, 4, 3), (2, 2, 2)])
def test_points_per_match(four_players, score1, score2, total):
    """A decisive match awards 3 points per side pairing, a draw 2."""
    ana, ben, cleo, dan = four_players
    match = make_match((ana, ben), (cleo, dan), score1, score2)
    assert match.points_for_team(1) + match.points_for_team(2) == total

    rows = aggregate(four_players, [match])
    outcomes = sum(row.wins + row.draws + row.losses for row in rows)
    assert outcomes == 4


def test_goals_balance_per_match(four_players):
    ana, ben, cleo, dan = four_players
    rows = aggregate(four_players, [make_match((ana, cleo), (ben, dan), 7, 4)])
    assert sum(row.goals_for for row in rows) == sum(row.goals_against for row in rows)


def test_aggregate_is_repeatable(four_players):
    ana, ben, cleo, dan = four_players
    matches = [
        make_match((ana, ben), (cleo, dan), 1, 0),
        make_match((ana, dan), (ben, cleo), 0, 3),
    ]
    assert aggregate(four_players, matches) == aggregate(four_players, matches)


# ============================================================================
# Sorting and scoping
# ============================================================================

def test_sorted_by_percentage_then_points(four_players):
    ana, ben, cleo, dan = four_players
    matches = [
        make_match((ana, ben), (cleo, dan), 2, 0),
        make_match((ana, cleo), (ben, dan), 2, 0),
        make_match((ana, dan), (ben, cleo), 1, 1),
    ]
    rows = aggregate(four_players, matches)

    assert [row.name for row in rows][0] == "Ana"
    assert [row.rank for row in rows] == [1, 2, 3, 4]
    ratios = [row.success_ratio for row in rows]
    assert ratios == sorted(ratios, reverse=True)


def test_points_break_percentage_ties(four_players):
    ana, ben, cleo, dan = four_players
    extra = Player(id=uuid.uuid4(), name="Eve")
    players = four_players + [extra]
    matches = [
        make_match((ana, ben), (cleo, dan), 1, 0),
        make_match((ana, extra), (cleo, dan), 1, 0),
    ]
    rows = aggregate(players, matches)

    # Ana, Ben and Eve are all at 100%; Ana has the most points.
    assert rows[0].name == "Ana"
    assert {rows[1].name, rows[2].name} == {"Ben", "Eve"}
    # Remaining ties keep player order.
    assert rows[1].name == "Ben"


def test_idle_players_excluded_by_default(four_players):
    ana, ben, cleo, dan = four_players
    idle = Player(id=uuid.uuid4(), name="Idle")
    matches = [make_match((ana, ben), (cleo, dan), 1, 0)]

    assert "Idle" not in by_name(aggregate(four_players + [idle], matches))

    rows = by_name(aggregate(four_players + [idle], matches, include_idle=True))
    assert rows["Idle"].matches_played == 0
    assert rows["Idle"].success_percentage == 0.0


def test_unknown_players_are_skipped(four_players):
    ana, ben, cleo, dan = four_players
    rows = aggregate([ana, ben], [make_match((ana, ben), (cleo, dan), 0, 1)])
    assert {row.name for row in rows} == {"Ana", "Ben"}
    assert all(row.losses == 1 for row in rows)


def test_filter_matches_by_season(four_players):
    ana, ben, cleo, dan = four_players
    season_id = uuid.uuid4()
    inside = make_match((ana, ben), (cleo, dan), 1, 0, season_id=season_id)
    outside = make_match((ana, ben), (cleo, dan), 0, 1)

    assert filter_matches([inside, outside], season_id) == [inside]
    assert filter_matches([inside, outside]) == [inside, outside]


def test_overview_counts_only_playing_rows(four_players):
    ana, ben, cleo, dan = four_players
    matches = [make_match((ana, ben), (cleo, dan), 1, 0)]
    rows = aggregate(four_players, matches, include_idle=True)

    summary = overview(rows, matches)
    assert summary.total_players == 4
    assert summary.total_matches == 1
    assert summary.average_success == 50.0


def test_match_stats_counts_outcomes(four_players):
    ana, ben, cleo, dan = four_players
    matches = [
        make_match((ana, ben), (cleo, dan), 3, 1),
        make_match((ana, cleo), (ben, dan), 2, 2),
        make_match((ana, dan), (ben, cleo), 0, 1),
        make_match((ana, ben), (cleo, dan), 5, 0),
    ]

    stats = match_stats(matches)
    assert stats.total_matches == 4
    assert stats.team1_wins == 2
    assert stats.team2_wins == 1
    assert stats.draws == 1
    assert match_stats([]).total_matches == 0
