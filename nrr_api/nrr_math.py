# nrr_api/nrr_math.py
from __future__ import annotations

import math
from typing import Union

from nrr_api.errors import DomainError, InputError
from nrr_api.models import BALLS_PER_OVER, Overs, Team

NRR_STEP = 0.001
OversLike = Union[str, int, float]
DecimalOversLike = Union[Overs, int, float]


def overs_to_balls(overs: OversLike) -> int:
    """
    Converts cricket overs notation to balls.

    Supported inputs:
    - "20.0", "19.4", "7.2" (string overs notation)
    - 20 (int overs)
    - 19.4 (float) -> treated as "19.4" (strings preferred)

    Rule: ".x" means x balls (0-5). Example: 19.4 = 19*6 + 4 = 118 balls.
    """
    if overs is None:
        raise InputError("Overs cannot be None")

    s = str(overs).strip()
    if not s:
        raise InputError("Overs cannot be empty")

    try:
        if "." not in s:
            ov_i = int(s)
            balls_i = 0
        else:
            ov_part, ball_part = s.split(".", 1)
            ov_i = int(ov_part) if ov_part else 0
            ball_part = ball_part.strip()
            balls_i = int(ball_part) if ball_part else 0
    except ValueError as e:
        raise InputError(f"Invalid overs: {overs}") from e

    if ov_i < 0:
        raise InputError(f"Invalid overs: {overs}")
    if balls_i < 0 or balls_i >= BALLS_PER_OVER:
        raise InputError(f"Invalid overs format: {overs} (balls part must be 0-5)")

    return ov_i * BALLS_PER_OVER + balls_i


def to_decimal_overs(overs: DecimalOversLike, balls: int = 0) -> float:
    """
    overs + balls/6. Balls outside 0..5 are carried into overs rather than
    rejected; negative values are malformed.
    """
    if isinstance(overs, Overs):
        return overs.overs + overs.balls / BALLS_PER_OVER

    if overs < 0 or balls < 0:
        raise InputError(f"Invalid overs: overs={overs}, balls={balls}")

    whole = overs + balls // BALLS_PER_OVER
    return whole + (balls % BALLS_PER_OVER) / BALLS_PER_OVER


def balls_to_overs(total_balls: int) -> Overs:
    return Overs.from_balls(total_balls)


def balls_to_decimal_overs(total_balls: int) -> float:
    ov = balls_to_overs(total_balls)
    return to_decimal_overs(ov.overs, ov.balls)


def balls_to_display_overs(total_balls: int) -> float:
    """
    82 balls -> 13.4 (13 overs, 4 balls). A display numeral only: never feed
    it back into NRR arithmetic.
    """
    return float(str(balls_to_overs(total_balls)))


def normalize_innings_balls(balls: int, all_out: bool, match_overs: int) -> int:
    """
    NRR rule: an all-out innings counts as the full quota of overs.
    Otherwise, use actual balls faced.
    """
    if balls < 0:
        raise InputError("Balls cannot be negative")
    if balls == 0:
        return 0
    return match_overs * BALLS_PER_OVER if all_out else balls


def truncate_nrr(value: float) -> float:
    """
    Truncates toward zero to three decimals (1.2349 -> 1.234, -1.2349 -> -1.234).
    Float noise below 1e-9 is rounded off first so 0.99999999999 stays 1.0.
    """
    return math.trunc(round(value * 1000, 6)) / 1000


def revised_nrr(
    team: Team,
    for_runs: int = 0,
    for_overs: DecimalOversLike = 0.0,
    against_runs: int = 0,
    against_overs: DecimalOversLike = 0.0,
) -> float:
    """
    Net Run Rate = (runs_for / overs_for) - (runs_against / overs_against)

    Team cumulative totals plus one match worth of deltas (overs as decimal
    overs). This is the only place NRR is computed.
    """
    total_for_runs = team.for_runs + for_runs
    total_for_overs = to_decimal_overs(team.for_overs) + to_decimal_overs(for_overs)
    total_against_runs = team.against_runs + against_runs
    total_against_overs = to_decimal_overs(team.against_overs) + to_decimal_overs(against_overs)

    if total_for_overs <= 0 or total_against_overs <= 0:
        raise DomainError(f"Total overs must be greater than 0 for {team.name}")

    raw = total_for_runs / total_for_overs - total_against_runs / total_against_overs
    return truncate_nrr(raw)


def team_nrr(team: Team) -> float:
    return revised_nrr(team)
