import itertools

import pytest

from nrr_api.qualification import evaluate_position_bounds
from nrr_api.simulator import apply_presumed_win

from conftest import make_table_from_teams, make_team


def _five_team_league():
    return make_table_from_teams([
        make_team("Us", points=0, lost=2),
        make_team("A", points=4, nrr=0.3),
        make_team("B", points=4, nrr=0.1),
        make_team("C", points=4, nrr=-0.2),
        make_team("Them", points=0, nrr=-0.4, lost=2),
    ])


def test_position_out_of_reach_on_points():
    post_win = apply_presumed_win(_five_team_league(), "Us", "Them")

    analysis = evaluate_position_bounds(post_win, "Us", 1)

    assert analysis.achievable is False
    assert analysis.violated_bound == "best"
    assert analysis.best_possible_position == 4
    assert analysis.worst_possible_position == 4
    assert "best_possible_position=4 > desired_position=1" in analysis.reason


def test_level_teams_widen_the_range(seed_state):
    post_win = apply_presumed_win(seed_state, "Rajasthan Royals", "Mumbai Indians")

    analysis = evaluate_position_bounds(post_win, "Rajasthan Royals", 3)

    assert analysis.achievable is True
    assert analysis.points_after_win == 8
    assert (analysis.teams_above, analysis.teams_level) == (1, 2)
    assert (analysis.best_possible_position, analysis.worst_possible_position) == (2, 4)
    assert analysis.level_teams == ["Royal Challengers Bangalore", "Delhi Capitals"]
    assert analysis.reason is None


def test_position_below_worst_bound(seed_state):
    post_win = apply_presumed_win(seed_state, "Rajasthan Royals", "Mumbai Indians")

    analysis = evaluate_position_bounds(post_win, "Rajasthan Royals", 5)

    assert analysis.achievable is False
    assert analysis.violated_bound == "worst"


@pytest.mark.parametrize(
    "your,opponent",
    list(itertools.permutations(
        ["Chennai Super Kings", "Royal Challengers Bangalore", "Delhi Capitals",
         "Rajasthan Royals", "Mumbai Indians"], 2
    )),
)
def test_best_never_exceeds_worst(seed_state, your, opponent):
    post_win = apply_presumed_win(seed_state, your, opponent)
    analysis = evaluate_position_bounds(post_win, your, 1)
    assert analysis.best_possible_position <= analysis.worst_possible_position
