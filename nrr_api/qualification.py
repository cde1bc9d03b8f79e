# nrr_api/qualification.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Literal, Mapping, Optional

from nrr_api.errors import UnknownTeamError
from nrr_api.models import Team
from nrr_api.points_table import rank_teams

ViolatedBound = Literal["best", "worst"]


@dataclass(frozen=True)
class PositionAnalysis:
    team: str
    points_after_win: int
    desired_position: int

    teams_above: int
    teams_level: int
    level_teams: List[str] = field(default_factory=list)

    best_possible_position: int = 1
    worst_possible_position: int = 1

    achievable: bool = True
    violated_bound: Optional[ViolatedBound] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def evaluate_position_bounds(
    post_win_state: Mapping[str, Team],
    your_team: str,
    desired_position: int,
) -> PositionAnalysis:
    """
    Points-only bounds (no NRR) on where `your_team` can finish, given a
    state in which it has already been credited with this match's win.

    best  = teams strictly above on points + 1
    worst = teams strictly above + teams level on points + 1
    """
    if your_team not in post_win_state:
        raise UnknownTeamError(your_team)

    my_points = post_win_state[your_team].points
    others = rank_teams(t for name, t in post_win_state.items() if name != your_team)

    teams_above = sum(1 for t in others if t.points > my_points)
    level = [t.name for t in others if t.points == my_points]

    best = teams_above + 1
    worst = teams_above + len(level) + 1

    violated: Optional[ViolatedBound] = None
    reason: Optional[str] = None
    if desired_position < best:
        violated = "best"
        reason = (
            f"Position {desired_position} is out of reach for {your_team}: even with a win, "
            f"{teams_above} team(s) stay ahead on points "
            f"(best_possible_position={best} > desired_position={desired_position})."
        )
    elif desired_position > worst:
        violated = "worst"
        reason = (
            f"Position {desired_position} is out of reach for {your_team}: a win on "
            f"{my_points} points already guarantees at least position {worst} "
            f"(worst_possible_position={worst} < desired_position={desired_position})."
        )

    return PositionAnalysis(
        team=your_team,
        points_after_win=my_points,
        desired_position=desired_position,
        teams_above=teams_above,
        teams_level=len(level),
        level_teams=level,
        best_possible_position=best,
        worst_possible_position=worst,
        achievable=violated is None,
        violated_bound=violated,
        reason=reason,
    )
