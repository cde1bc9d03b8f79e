# nrr_api/impact.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Union

from loguru import logger

from nrr_api.bracket import solve_nrr_bracket
from nrr_api.errors import InfeasiblePositionError, InputError, UnknownTeamError
from nrr_api.models import MatchRequest, Phase, Team
from nrr_api.points_table import position_of, rank_teams
from nrr_api.qualification import PositionAnalysis, evaluate_position_bounds
from nrr_api.simulator import apply_presumed_win
from nrr_api.thresholds import ChaseWindow, RunsRestriction, chase_overs_window, restrict_opponent_runs


@dataclass(frozen=True)
class MatchImpactResult:
    mode: Phase
    answer: Union[RunsRestriction, ChaseWindow]
    current_position: int
    desired_position: int
    required_nrr: Optional[float]
    max_allowed_nrr: Optional[float]   # None = no upper bound
    team_at_desired_position: str
    position_analysis: PositionAnalysis

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "answer": self.answer.to_dict(),
            "current_position": self.current_position,
            "desired_position": self.desired_position,
            "required_nrr": self.required_nrr,
            "max_allowed_nrr": self.max_allowed_nrr,
            "team_at_desired_position": self.team_at_desired_position,
            "position_analysis": self.position_analysis.to_dict(),
        }


def compute_match_impact(request: MatchRequest, standings: Mapping[str, Team]) -> MatchImpactResult:
    """
    Works out what `request.your_team` has to do in this match (which it is
    presumed to win) to finish at `request.desired_position`.

    Steps:
      1) points-only feasibility of the position after a win
      2) NRR bracket for that exact position
      3) opponent runs (setting_total) or chase overs (chasing) that land in it

    `standings` is read only. Raises DomainError subclasses; an unreachable
    NRR is reported in the answer (impossible=True), not raised.
    """
    your = request.your_team
    opponent = request.opponent_team

    for name in (your, opponent):
        if name not in standings:
            raise UnknownTeamError(name)
    if your == opponent:
        raise InputError("Your team and opponent team must be different")

    team_count = len(standings)
    if request.desired_position < 1 or request.desired_position > team_count:
        raise InputError(f"Desired position must be between 1 and {team_count}.")

    current_table = rank_teams(standings.values())
    current_position = position_of(current_table, your)
    team_at_desired = current_table[request.desired_position - 1].name

    post_win = apply_presumed_win(standings, your, opponent)

    analysis = evaluate_position_bounds(post_win, your, request.desired_position)
    if not analysis.achievable:
        logger.info("{} cannot reach position {}: {}", your, request.desired_position, analysis.reason)
        raise InfeasiblePositionError(analysis)

    bracket = solve_nrr_bracket(post_win, your, request.desired_position)

    # revised NRR is built on the pre-match aggregates
    team = standings[your]
    if request.phase == "setting_total":
        answer: Union[RunsRestriction, ChaseWindow] = restrict_opponent_runs(
            team=team,
            opponent=opponent,
            match_overs=request.match_overs,
            runs_scored=request.runs_value,
            bracket=bracket,
        )
    elif request.phase == "chasing":
        answer = chase_overs_window(
            team=team,
            opponent=opponent,
            match_overs=request.match_overs,
            target=request.runs_value,
            bracket=bracket,
        )
    else:
        raise InputError(f"Invalid phase: {request.phase}")

    logger.info(
        "{} vs {} ({}): position {} -> {}, bracket [{}, {}], impossible={}",
        your,
        opponent,
        request.phase,
        current_position,
        request.desired_position,
        bracket.min_required,
        bracket.max_allowed,
        answer.impossible,
    )

    return MatchImpactResult(
        mode=request.phase,
        answer=answer,
        current_position=current_position,
        desired_position=request.desired_position,
        required_nrr=bracket.min_required,
        max_allowed_nrr=bracket.max_allowed,
        team_at_desired_position=team_at_desired,
        position_analysis=analysis,
    )
