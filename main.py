# main.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field, model_validator

from nrr_api.config import (
    CORS_ALLOW_ORIGINS,
    DEFAULT_MATCH_OVERS,
    MAX_MATCH_OVERS,
    validate_config,
)
from nrr_api.errors import (
    DomainError,
    InfeasiblePositionError,
    InputError,
    InvalidBracketError,
    UnknownTeamError,
)
from nrr_api.impact import compute_match_impact
from nrr_api.logging_setup import setup_logging
from nrr_api.models import MatchRequest, Phase, Team
from nrr_api.points_table import compute_sorted_table
from nrr_api.simulator import simulate_match
from nrr_api.state_from_standings import (
    StandingsLoadError,
    load_standings,
    resolve_team_name,
    standings_source,
)

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="NRR Calculator API",
    version="0.1.0",
    description="Works out the opponent score or chase overs a team needs to reach a league position on net run rate",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    validate_config()
    setup_logging()


@app.get("/")
def root():
    return {"message": "NRR Calculator API is running!"}


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}


# -----------------------
# Helpers
# -----------------------
def _load_state() -> Dict[str, Team]:
    try:
        return load_standings()
    except StandingsLoadError as e:
        logger.error(f"Standings load failed: {e}")
        raise HTTPException(status_code=502, detail=f"Unable to load standings: {str(e)}")


def _resolve(state: Dict[str, Team], raw: str) -> str:
    try:
        return resolve_team_name(state, raw)
    except UnknownTeamError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -----------------------
# Standings Endpoint
# -----------------------
@app.get("/api/standings")
def get_standings():
    state = _load_state()
    return {"source": standings_source(), "teams": compute_sorted_table(state.values())}


# -----------------------
# Match Impact Endpoint
# -----------------------
class MatchImpactRequest(BaseModel):
    your_team: str = Field(..., min_length=1, description="Team to evaluate, e.g. Rajasthan Royals")
    opponent_team: str = Field(..., min_length=1, description="Team it is playing")
    match_overs: int = Field(DEFAULT_MATCH_OVERS, gt=0, le=MAX_MATCH_OVERS)
    desired_position: int = Field(..., ge=1)
    phase: Phase = Field(..., description="setting_total (batting first) or chasing")
    runs_value: int = Field(..., ge=0, description="Runs scored when setting a total, or the target being chased")

    @model_validator(mode="after")
    def _teams_must_differ(self):
        if self.your_team.strip().casefold() == self.opponent_team.strip().casefold():
            raise ValueError("your_team and opponent_team must be different")
        return self


@app.post("/api/calculate")
def calculate(req: MatchImpactRequest):
    state = _load_state()

    your = _resolve(state, req.your_team)
    opponent = _resolve(state, req.opponent_team)

    request = MatchRequest(
        your_team=your,
        opponent_team=opponent,
        match_overs=req.match_overs,
        desired_position=req.desired_position,
        phase=req.phase,
        runs_value=req.runs_value,
    )

    try:
        result = compute_match_impact(request, state)
    except InfeasiblePositionError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": str(e), "position_analysis": e.analysis.to_dict()},
        )
    except InvalidBracketError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": str(e), "min_required": e.min_required, "max_allowed": e.max_allowed},
        )
    except (UnknownTeamError, InputError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DomainError as e:
        logger.exception("Match impact computation failed")
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


# -----------------------
# Simulation Endpoint
# -----------------------
class SimulateRequest(BaseModel):
    team1: str = Field(..., description="Team batting first")
    team2: str = Field(..., description="Team batting second")
    team1_runs: int = Field(..., ge=0)
    team1_overs: str = Field(..., description="e.g. 20.0 or 19.4")
    team2_runs: int = Field(..., ge=0)
    team2_overs: str = Field(..., description="e.g. 20.0 or 18.2")
    match_overs: int = Field(DEFAULT_MATCH_OVERS, gt=0, le=MAX_MATCH_OVERS)
    team1_all_out: bool = Field(False, description="True if team1 got all-out")
    team2_all_out: bool = Field(False, description="True if team2 got all-out")


@app.post("/api/simulate")
def simulate(req: SimulateRequest):
    state = _load_state()

    t1 = _resolve(state, req.team1)
    t2 = _resolve(state, req.team2)
    if t1 == t2:
        raise HTTPException(status_code=400, detail="team1 and team2 must be different")

    try:
        updated = simulate_match(
            state,
            t1,
            t2,
            req.team1_runs,
            req.team1_overs,
            req.team2_runs,
            req.team2_overs,
            match_overs=req.match_overs,
            team1_all_out=req.team1_all_out,
            team2_all_out=req.team2_all_out,
        )
    except DomainError as e:
        raise HTTPException(status_code=400, detail=str(e))

    resp: Dict[str, Any] = {
        "table_source": standings_source(),
        "input": req.model_dump(),
        "updated_table": updated,
    }
    return resp
