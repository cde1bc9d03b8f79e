# nrr_api/thresholds.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Callable, Optional, Tuple

from loguru import logger

from nrr_api.bracket import NrrBracket
from nrr_api.errors import InputError
from nrr_api.models import BALLS_PER_OVER, Team
from nrr_api.nrr_math import (
    balls_to_decimal_overs,
    balls_to_display_overs,
    revised_nrr,
    to_decimal_overs,
)


@dataclass(frozen=True)
class RunsRestriction:
    """Setting a total: opponent scores that keep the revised NRR in bracket."""
    team: str
    opponent: str
    runs_scored: int
    match_overs: int

    restrict_runs_min: Optional[int]
    restrict_runs_max: Optional[int]

    # revised NRR at restrict_runs_max / restrict_runs_min respectively
    revised_nrr_min: Optional[float]
    revised_nrr_max: Optional[float]

    impossible: bool
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ChaseWindow:
    """Chasing: how fast the target must be overhauled to keep NRR in bracket."""
    team: str
    opponent: str
    target: int
    runs_needed: int
    match_overs: int

    min_balls: Optional[int]
    max_balls: Optional[int]
    min_overs: Optional[float]   # display overs, e.g. 13.4
    max_overs: Optional[float]

    # revised NRR at max_balls / min_balls respectively
    revised_nrr_min: Optional[float]
    revised_nrr_max: Optional[float]

    tie_nrr: float
    tie_qualifies: bool

    impossible: bool
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


# -----------------------------
# Monotone boundary search
# -----------------------------
def _first_passing(lo: int, hi: int, check: Callable[[int], bool]) -> Optional[int]:
    """Smallest x in [lo, hi] with check(x), for a check that flips False -> True."""
    best: Optional[int] = None
    while lo <= hi:
        mid = (lo + hi) // 2
        if check(mid):
            best = mid
            hi = mid - 1
        else:
            lo = mid + 1
    return best


def _last_passing(lo: int, hi: int, check: Callable[[int], bool]) -> Optional[int]:
    """Largest x in [lo, hi] with check(x), for a check that flips True -> False."""
    best: Optional[int] = None
    while lo <= hi:
        mid = (lo + hi) // 2
        if check(mid):
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return best


def _walk_to_first(start: int, lo: int, hi: int, check: Callable[[int], bool]) -> Optional[int]:
    """Same contract as _first_passing, walking from a close starting guess."""
    b = start
    if check(b):
        while b > lo and check(b - 1):
            b -= 1
        return b
    while b < hi:
        b += 1
        if check(b):
            return b
    return None


def _walk_to_last(start: int, lo: int, hi: int, check: Callable[[int], bool]) -> Optional[int]:
    """Same contract as _last_passing, walking from a close starting guess."""
    b = start
    if check(b):
        while b < hi and check(b + 1):
            b += 1
        return b
    while b > lo:
        b -= 1
        if check(b):
            return b
    return None


def _clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


# -----------------------------
# Mode A: setting a total
# -----------------------------
def restrict_opponent_runs(
    *,
    team: Team,
    opponent: str,
    match_overs: int,
    runs_scored: int,
    bracket: NrrBracket,
) -> RunsRestriction:
    """
    `team` batted first and made `runs_scored` in `match_overs`.
    Find the range of opponent scores (0..runs_scored-1, opponent batting the
    full overs) for which the revised NRR stays inside `bracket`.

    Revised NRR only falls as the opponent scores more, so each bracket edge
    is a single cut point found by binary search.
    """
    if match_overs <= 0:
        raise InputError("match_overs must be positive")
    if runs_scored < 0:
        raise InputError("runs_scored cannot be negative")

    if runs_scored == 0:
        return RunsRestriction(
            team=team.name,
            opponent=opponent,
            runs_scored=runs_scored,
            match_overs=match_overs,
            restrict_runs_min=None,
            restrict_runs_max=None,
            revised_nrr_min=None,
            revised_nrr_max=None,
            impossible=True,
            message=f"A total of 0 cannot be defended, so {team.name} cannot win this match.",
        )

    def nrr_at(conceded: int) -> float:
        return revised_nrr(team, runs_scored, match_overs, conceded, match_overs)

    hi_limit = runs_scored - 1

    lo = _first_passing(0, hi_limit, lambda r: bracket.meets_max(nrr_at(r)))
    hi = _last_passing(0, hi_limit, lambda r: bracket.meets_min(nrr_at(r)))

    logger.debug("restrict {} (scored {}): conceded window {}..{}", team.name, runs_scored, lo, hi)

    if lo is None or hi is None or lo > hi:
        best_nrr = nrr_at(0)
        worst_nrr = nrr_at(hi_limit)
        return RunsRestriction(
            team=team.name,
            opponent=opponent,
            runs_scored=runs_scored,
            match_overs=match_overs,
            restrict_runs_min=None,
            restrict_runs_max=None,
            revised_nrr_min=worst_nrr,
            revised_nrr_max=best_nrr,
            impossible=True,
            message=(
                f"Target NRR cannot be achieved with the given score: after scoring {runs_scored} "
                f"in {match_overs} overs, {team.name} would finish on an NRR between "
                f"{worst_nrr:.3f} (conceding {hi_limit}) and {best_nrr:.3f} (conceding 0)."
            ),
        )

    nrr_min = nrr_at(hi)
    nrr_max = nrr_at(lo)
    return RunsRestriction(
        team=team.name,
        opponent=opponent,
        runs_scored=runs_scored,
        match_overs=match_overs,
        restrict_runs_min=lo,
        restrict_runs_max=hi,
        revised_nrr_min=nrr_min,
        revised_nrr_max=nrr_max,
        impossible=False,
        message=(
            f"If {team.name} score {runs_scored} runs in {match_overs} overs, {team.name} need to "
            f"restrict {opponent} between {lo} to {hi} runs in {match_overs} overs. "
            f"Revised NRR of {team.name} will be between {nrr_min:.3f} to {nrr_max:.3f}."
        ),
    )


# -----------------------------
# Mode B: chasing
# -----------------------------
def _estimate_ball_window(
    team: Team,
    runs_needed: int,
    target: int,
    match_overs: int,
    bracket: NrrBracket,
    min_balls: int,
    max_balls: int,
) -> Tuple[int, int]:
    """
    Solves the NRR formula for overs consumed at each bracket edge:

        (F + runs_needed) / (Fo + x) - (A + target) / (Ao + match_overs) = edge

    Ball quantization and truncation make this approximate; it only seeds
    the refinement walks.
    """
    against_rate = (team.against_runs + target) / (to_decimal_overs(team.against_overs) + match_overs)
    total_for = team.for_runs + runs_needed
    for_overs = to_decimal_overs(team.for_overs)

    def overs_at(edge: float) -> Optional[float]:
        k = edge + against_rate
        if k <= 0:
            return None
        return total_for / k - for_overs

    # NRR >= min_required  <=>  x <= overs_at(min_required)
    if bracket.min_required is None:
        est_hi = max_balls
    else:
        x = overs_at(bracket.min_required)
        est_hi = max_balls if x is None else math.floor(x * BALLS_PER_OVER)

    # NRR <= max_allowed  <=>  x >= overs_at(max_allowed); unreachable when k <= 0
    if bracket.max_allowed is None:
        est_lo = min_balls
    else:
        x = overs_at(bracket.max_allowed)
        est_lo = max_balls if x is None else math.ceil(x * BALLS_PER_OVER)

    return _clamp(est_lo, min_balls, max_balls), _clamp(est_hi, min_balls, max_balls)


def chase_overs_window(
    *,
    team: Team,
    opponent: str,
    match_overs: int,
    target: int,
    bracket: NrrBracket,
) -> ChaseWindow:
    """
    `opponent` made `target` in `match_overs`; `team` wins by scoring
    target + 1. Find the range of balls the chase may take for the revised
    NRR to land inside `bracket`. Finishing sooner always helps.
    """
    if match_overs <= 0:
        raise InputError("match_overs must be positive")
    if target < 0:
        raise InputError("target cannot be negative")

    runs_needed = target + 1
    max_balls = match_overs * BALLS_PER_OVER
    min_balls_required = math.ceil(runs_needed / BALLS_PER_OVER)

    def nrr_at(balls: int) -> float:
        return revised_nrr(team, runs_needed, balls_to_decimal_overs(balls), target, match_overs)

    tie_nrr = revised_nrr(team, target, match_overs, target, match_overs)
    tie_qualifies = bracket.contains(tie_nrr)

    first: Optional[int] = None
    last: Optional[int] = None
    if min_balls_required <= max_balls:
        start_lo, start_hi = _estimate_ball_window(
            team, runs_needed, target, match_overs, bracket, min_balls_required, max_balls
        )
        first = _walk_to_first(start_lo, min_balls_required, max_balls, lambda b: bracket.meets_max(nrr_at(b)))
        last = _walk_to_last(start_hi, min_balls_required, max_balls, lambda b: bracket.meets_min(nrr_at(b)))
        logger.debug(
            "chase {} (needs {}): estimate {}..{}, refined {}..{}",
            team.name, runs_needed, start_lo, start_hi, first, last,
        )

    tie_note = (
        f" A tie ({target} in {match_overs} overs) would give an NRR of {tie_nrr:.3f}, "
        f"which also lands in the bracket."
        if tie_qualifies else ""
    )

    if first is None or last is None or first > last:
        fastest = min(min_balls_required, max_balls)
        best_nrr = nrr_at(fastest)
        worst_nrr = nrr_at(max_balls)
        if tie_qualifies:
            message = (
                f"No winning chase of {runs_needed} keeps {team.name} in the required NRR bracket."
                + tie_note
            )
        else:
            message = (
                f"Target NRR cannot be achieved by chasing this target: winning the chase gives "
                f"{team.name} an NRR between {worst_nrr:.3f} (in {balls_to_display_overs(max_balls)} overs) "
                f"and {best_nrr:.3f} (in {balls_to_display_overs(fastest)} overs)."
            )
        return ChaseWindow(
            team=team.name,
            opponent=opponent,
            target=target,
            runs_needed=runs_needed,
            match_overs=match_overs,
            min_balls=None,
            max_balls=None,
            min_overs=None,
            max_overs=None,
            revised_nrr_min=worst_nrr,
            revised_nrr_max=best_nrr,
            tie_nrr=tie_nrr,
            tie_qualifies=tie_qualifies,
            impossible=not tie_qualifies,
            message=message,
        )

    min_overs = balls_to_display_overs(first)
    max_overs = balls_to_display_overs(last)
    nrr_min = nrr_at(last)
    nrr_max = nrr_at(first)
    return ChaseWindow(
        team=team.name,
        opponent=opponent,
        target=target,
        runs_needed=runs_needed,
        match_overs=match_overs,
        min_balls=first,
        max_balls=last,
        min_overs=min_overs,
        max_overs=max_overs,
        revised_nrr_min=nrr_min,
        revised_nrr_max=nrr_max,
        tie_nrr=tie_nrr,
        tie_qualifies=tie_qualifies,
        impossible=False,
        message=(
            f"{team.name} need to chase {runs_needed} runs between {min_overs} and {max_overs} overs. "
            f"Revised NRR for {team.name} will be between {nrr_min:.3f} to {nrr_max:.3f}."
            + tie_note
        ),
    )
