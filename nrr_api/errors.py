# nrr_api/errors.py
from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for every failure raised by the match-impact computation."""
    pass


class InputError(DomainError):
    """Raised when a value reaching the core is malformed or out of range."""
    pass


class UnknownTeamError(DomainError):
    """Raised when a team name does not resolve in the standings snapshot."""

    def __init__(self, team: str):
        self.team = team
        super().__init__(f"Unknown team: {team}")


class InfeasiblePositionError(DomainError):
    """
    Raised when the desired position cannot be reached on points alone,
    whatever the NRR. Carries the position analysis (best/worst bounds).
    """

    def __init__(self, analysis: Any):
        self.analysis = analysis
        super().__init__(getattr(analysis, "reason", None) or "Desired position is not achievable")


class InvalidBracketError(DomainError):
    """Raised when the bracket solver derives min_required >= max_allowed."""

    def __init__(self, min_required: Optional[float], max_allowed: Optional[float]):
        self.min_required = min_required
        self.max_allowed = max_allowed
        super().__init__(
            f"invalid NRR bracket: min_required={min_required} >= max_allowed={max_allowed}"
        )
