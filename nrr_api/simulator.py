# nrr_api/simulator.py
from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Mapping

from nrr_api.errors import InputError, UnknownTeamError
from nrr_api.models import Overs, Team
from nrr_api.nrr_math import (
    OversLike,
    normalize_innings_balls,
    overs_to_balls,
    revised_nrr,
)
from nrr_api.points_table import apply_result, compute_sorted_table


def create_seed_state() -> Dict[str, Team]:
    """
    Returns the built-in league snapshot (used when no CSV is configured).
    NRR values are the published ones.
    """
    return {
        "Chennai Super Kings": Team("Chennai Super Kings", 7, 5, 2, 10, 1130, Overs(133, 1), 1071, Overs(138, 5), 0.771),
        "Royal Challengers Bangalore": Team("Royal Challengers Bangalore", 7, 4, 3, 8, 1217, Overs(140, 0), 1066, Overs(131, 4), 0.597),
        "Delhi Capitals": Team("Delhi Capitals", 7, 4, 3, 8, 1085, Overs(126, 0), 1136, Overs(137, 0), 0.319),
        "Rajasthan Royals": Team("Rajasthan Royals", 7, 3, 4, 6, 1066, Overs(128, 2), 1094, Overs(137, 1), 0.331),
        "Mumbai Indians": Team("Mumbai Indians", 8, 2, 6, 4, 1003, Overs(155, 2), 1134, Overs(138, 1), -1.75),
    }


def apply_presumed_win(state: Mapping[str, Team], winner: str, loser: str) -> Dict[str, Team]:
    """
    New state where `winner` beat `loser`: counters and points advance,
    aggregates and NRR are left as they are. `state` is not touched.
    """
    for t in (winner, loser):
        if t not in state:
            raise UnknownTeamError(t)

    won_row, lost_row = apply_result(state[winner], state[loser])

    out = dict(state)
    out[winner] = won_row
    out[loser] = lost_row
    return out


def record_innings(
    team: Team,
    runs_for: int,
    balls_for: int,
    runs_against: int,
    balls_against: int,
) -> Team:
    """Copy of `team` with one match worth of aggregates added and NRR recomputed."""
    new_nrr = revised_nrr(
        team,
        runs_for,
        Overs.from_balls(balls_for),
        runs_against,
        Overs.from_balls(balls_against),
    )
    return replace(
        team,
        for_runs=team.for_runs + runs_for,
        for_overs=Overs.from_balls(team.for_overs.total_balls + balls_for),
        against_runs=team.against_runs + runs_against,
        against_overs=Overs.from_balls(team.against_overs.total_balls + balls_against),
        nrr=new_nrr,
    )


def simulate_match(
    state: Mapping[str, Team],
    team1: str,
    team2: str,
    team1_runs: int,
    team1_overs: OversLike,
    team2_runs: int,
    team2_overs: OversLike,
    *,
    match_overs: int = 20,
    team1_all_out: bool = False,
    team2_all_out: bool = False,
) -> List[dict]:
    """
    Applies one completed match and returns the revised sorted table.

    Conventions:
    - team1 bats first, team2 bats second.
    - Winner is derived from the scores; ties are not modelled.
    - `state` is left untouched.
    """
    if team1 not in state:
        raise UnknownTeamError(team1)
    if team2 not in state:
        raise UnknownTeamError(team2)
    if team1 == team2:
        raise InputError("team1 and team2 must be different")
    if team1_runs < 0 or team2_runs < 0:
        raise InputError("Runs cannot be negative")

    max_balls = match_overs * 6
    b1 = overs_to_balls(team1_overs)
    b2 = overs_to_balls(team2_overs)
    if b1 <= 0 or b1 > max_balls:
        raise InputError(f"team1_overs must be between 0.1 and {match_overs}.0")
    if b2 <= 0 or b2 > max_balls:
        raise InputError(f"team2_overs must be between 0.1 and {match_overs}.0")

    b1 = normalize_innings_balls(b1, team1_all_out, match_overs)
    b2 = normalize_innings_balls(b2, team2_all_out, match_overs)

    if team1_runs > team2_runs:
        winner, loser = team1, team2
    elif team2_runs > team1_runs:
        winner, loser = team2, team1
    else:
        raise InputError("Scores are tied; tied matches are not modelled")

    out = dict(state)
    out[team1] = record_innings(out[team1], team1_runs, b1, team2_runs, b2)
    out[team2] = record_innings(out[team2], team2_runs, b2, team1_runs, b1)
    out = apply_presumed_win(out, winner, loser)

    return compute_sorted_table(out.values())
