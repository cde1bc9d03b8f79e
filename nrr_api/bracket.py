# nrr_api/bracket.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Mapping, Optional

from loguru import logger

from nrr_api.errors import InputError, InvalidBracketError, UnknownTeamError
from nrr_api.models import Team
from nrr_api.nrr_math import NRR_STEP
from nrr_api.points_table import rank_teams

# absorbs float noise when comparing truncated NRRs against bracket edges
NRR_TOLERANCE = 1e-9


@dataclass(frozen=True)
class NrrBracket:
    """
    Inclusive NRR interval for landing on one league position.
    None on either edge means unbounded in that direction.
    """
    min_required: Optional[float] = None
    max_allowed: Optional[float] = None

    def meets_min(self, value: float) -> bool:
        return self.min_required is None or value >= self.min_required - NRR_TOLERANCE

    def meets_max(self, value: float) -> bool:
        return self.max_allowed is None or value <= self.max_allowed + NRR_TOLERANCE

    def contains(self, value: float) -> bool:
        return self.meets_min(value) and self.meets_max(value)

    def to_dict(self) -> dict:
        return asdict(self)


def _shift(nrr: float, step: float) -> float:
    return round(nrr + step, 3)


def _floor_from_lower(lower_points: List[Team]) -> float:
    # stay ahead of the best team on fewer points
    if not lower_points:
        return NRR_STEP
    return _shift(max(t.nrr for t in lower_points), NRR_STEP)


def solve_nrr_bracket(
    post_win_state: Mapping[str, Team],
    your_team: str,
    desired_position: int,
) -> NrrBracket:
    """
    Computes [min_required, max_allowed] for `your_team` to finish exactly at
    `desired_position`, given the state after its presumed win (opponent's
    loss recorded, opponent NRR unchanged).
    """
    if your_team not in post_win_state:
        raise UnknownTeamError(your_team)

    my_points = post_win_state[your_team].points
    others = rank_teams(t for name, t in post_win_state.items() if name != your_team)

    above_count = sum(1 for t in others if t.points > my_points)
    same_points = [t for t in others if t.points == my_points]
    lower_points = [t for t in others if t.points < my_points]

    # same-points teams that must finish ahead of us
    level_above = (desired_position - 1) - above_count
    if level_above < 0 or level_above > len(same_points):
        raise InputError(
            f"Position {desired_position} is not reachable on points for {your_team}"
        )

    min_required: Optional[float] = None
    max_allowed: Optional[float] = None

    if 1 <= level_above <= len(same_points):
        max_allowed = _shift(same_points[level_above - 1].nrr, -NRR_STEP)

    if level_above < len(same_points):
        min_required = _shift(same_points[level_above].nrr, NRR_STEP)
    else:
        min_required = _floor_from_lower(lower_points)

    if desired_position == 1:
        max_allowed = None
    elif max_allowed is None:
        above_slot = others[desired_position - 2]
        max_allowed = _shift(above_slot.nrr, -NRR_STEP)

    logger.debug(
        "bracket for {} at position {}: above={} level_above={} same={} -> [{}, {}]",
        your_team,
        desired_position,
        above_count,
        level_above,
        [t.name for t in same_points],
        min_required,
        max_allowed,
    )

    if max_allowed is not None and min_required is not None and min_required >= max_allowed:
        raise InvalidBracketError(min_required, max_allowed)

    return NrrBracket(min_required=min_required, max_allowed=max_allowed)
