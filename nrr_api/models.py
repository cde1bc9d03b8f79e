from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from nrr_api.errors import InputError

BALLS_PER_OVER = 6


# -----------------------------
# Match phase semantics
# -----------------------------
Phase = Literal["setting_total", "chasing"]


# -----------------------------
# Overs (overs + balls, balls always 0..5)
# -----------------------------
@dataclass(frozen=True)
class Overs:
    overs: int = 0
    balls: int = 0

    def __post_init__(self) -> None:
        if self.overs < 0 or self.balls < 0:
            raise InputError(f"Invalid overs: {self.overs}.{self.balls}")

        # 6+ balls carry into whole overs
        if self.balls >= BALLS_PER_OVER:
            object.__setattr__(self, "overs", self.overs + self.balls // BALLS_PER_OVER)
            object.__setattr__(self, "balls", self.balls % BALLS_PER_OVER)

    @classmethod
    def from_balls(cls, total_balls: int) -> "Overs":
        return cls(0, int(total_balls))

    @property
    def total_balls(self) -> int:
        return self.overs * BALLS_PER_OVER + self.balls

    def __str__(self) -> str:
        # display form: 14 overs 4 balls -> "14.4"
        return f"{self.overs}.{self.balls}"


# -----------------------------
# Canonical Team
# -----------------------------
@dataclass(frozen=True)
class Team:
    name: str

    matches: int
    won: int
    lost: int
    points: int

    for_runs: int
    for_overs: Overs
    against_runs: int
    against_overs: Overs

    # cached; recomputable through nrr_math.team_nrr
    nrr: float


# -----------------------------
# Canonical MatchRequest
# -----------------------------
@dataclass(frozen=True)
class MatchRequest:
    your_team: str
    opponent_team: str
    match_overs: int
    desired_position: int
    phase: Phase

    # runs your team set (setting_total) or the target it chases (chasing)
    runs_value: int
