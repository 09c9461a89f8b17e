from team_core.aggregates import average_rating, balance_objective, balance_summary, rating_spread, refresh_average
from team_core.models import Team
from team_core.test_helpers import quick_participant, quick_roster

def test_average_empty_is_zero():
    assert average_rating([]) == 0.0

def test_average_rounds_half_up_to_two_places():
    assert average_rating(quick_roster([5, 1])) == 3.0
    assert average_rating(quick_roster([2, 3, 3])) == 2.67
    assert average_rating(quick_roster([1, 2])) == 1.5
    # binary float 2.675 sits just below the midpoint; decimal rounding still goes up
    assert average_rating([quick_participant("a", 2.675)]) == 2.68
    assert average_rating([quick_participant("a", 1.125)]) == 1.13

def test_refresh_average_and_spread():
    white = Team(id="team-1", name="A", color="white", members=quick_roster([5, 4]))
    black = Team(id="team-2", name="B", color="black", members=quick_roster([2, 1]))
    empty = Team(id="team-3", name="C", color="colored")
    for t in (white, black, empty):
        refresh_average(t)
    assert white.average_rating == 4.5
    assert black.average_rating == 1.5
    assert empty.average_rating == 0.0
    # empty teams do not count toward the spread
    assert rating_spread([white, black, empty]) == 3.0
    assert rating_spread([white]) == 0.0

def test_balance_summary_reports_sizes():
    t1 = Team(id="team-1", name="A", color="white", members=quick_roster([5, 4, 3]))
    t2 = Team(id="team-2", name="B", color="black", members=quick_roster([3]))
    for t in (t1, t2):
        refresh_average(t)
    summary = balance_summary([t1, t2])
    assert summary["size_delta"] == 2
    assert summary["spread"] == 1.0
    assert summary["teams"][0]["total"] == 12.0
    assert summary["teams"][1]["size"] == 1

def test_balance_objective_ignores_empty_teams():
    assert balance_objective([8, 4, 0], [2, 2, 0]) == (2.0, 2.0)
    assert balance_objective([6, 6], [2, 2]) == (0.0, 0.0)
    assert balance_objective([9, 0], [3, 0]) == (0.0, 0.0)
