# nrr_api/points_table.py
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Tuple

from nrr_api.models import Team


def rank_teams(teams: Iterable[Team]) -> List[Team]:
    """
    League order:
    1) Points (desc)
    2) NRR (desc)
    No further tie-breakers (head-to-head etc.) are modelled; complete ties
    keep their input order.
    """
    def key_fn(t: Team):
        return (t.points, t.nrr)

    return sorted(teams, key=key_fn, reverse=True)


def position_of(ranked: List[Team], team: str) -> int:
    for idx, t in enumerate(ranked, start=1):
        if t.name == team:
            return idx
    raise ValueError(f"{team} not present in table")


def compute_sorted_table(teams: Iterable[Team]) -> List[dict]:
    out: List[dict] = []
    for idx, t in enumerate(rank_teams(teams), start=1):
        out.append({
            "pos": idx,
            "team": t.name,
            "matches": t.matches,
            "won": t.won,
            "lost": t.lost,
            "points": t.points,
            "nrr": t.nrr,
            "for_runs": t.for_runs,
            "for_overs": str(t.for_overs),
            "against_runs": t.against_runs,
            "against_overs": str(t.against_overs),
        })
    return out


def apply_result(winner: Team, loser: Team) -> Tuple[Team, Team]:
    """
    Updates matches/won/lost/points ONLY, on copies.
    Aggregates (and NRR) are updated separately from real runs/overs.
    """
    if winner.name == loser.name:
        raise ValueError("winner and loser must be different teams")

    won_row = replace(
        winner,
        matches=winner.matches + 1,
        won=winner.won + 1,
        points=winner.points + 2,
    )
    lost_row = replace(
        loser,
        matches=loser.matches + 1,
        lost=loser.lost + 1,
    )
    return won_row, lost_row
