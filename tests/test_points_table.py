import pytest

from nrr_api.points_table import apply_result, compute_sorted_table, position_of, rank_teams

from conftest import make_team


def test_ranks_by_points_then_nrr():
    teams = [
        make_team("A", points=4, nrr=-0.5),
        make_team("B", points=6, nrr=-1.0),
        make_team("C", points=4, nrr=0.8),
    ]
    ranked = rank_teams(teams)
    assert [t.name for t in ranked] == ["B", "C", "A"]
    assert position_of(ranked, "A") == 3


def test_position_of_unknown_team():
    with pytest.raises(ValueError):
        position_of(rank_teams([make_team("A")]), "Z")


def test_seed_table_order(seed_state):
    table = compute_sorted_table(seed_state.values())
    assert [row["team"] for row in table] == [
        "Chennai Super Kings",
        "Royal Challengers Bangalore",
        "Delhi Capitals",
        "Rajasthan Royals",
        "Mumbai Indians",
    ]
    assert table[0]["pos"] == 1
    assert table[0]["for_overs"] == "133.1"
    assert table[0]["against_overs"] == "138.5"


def test_apply_result_returns_copies():
    winner = make_team("W", points=2)
    loser = make_team("L", points=2)

    won_row, lost_row = apply_result(winner, loser)

    assert (won_row.matches, won_row.won, won_row.points) == (2, 2, 4)
    assert (lost_row.matches, lost_row.lost, lost_row.points) == (2, 1, 2)
    assert won_row.nrr == winner.nrr
    assert (winner.matches, winner.points) == (1, 2)
