# nrr_api/state_from_standings.py
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Mapping

import pandas as pd
from loguru import logger

from nrr_api.config import STANDINGS_CSV_PATH
from nrr_api.errors import DomainError, UnknownTeamError
from nrr_api.models import Overs, Team
from nrr_api.nrr_math import overs_to_balls, team_nrr
from nrr_api.simulator import create_seed_state

REQUIRED_COLUMNS = (
    "team",
    "matches",
    "won",
    "lost",
    "for_runs",
    "for_overs",
    "against_runs",
    "against_overs",
)


class StandingsLoadError(Exception):
    """Raised when a standings table cannot be read or parsed."""
    pass


def _is_missing(x: object) -> bool:
    if x is None:
        return True
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def _safe_int(x: object, default: int = 0) -> int:
    if _is_missing(x):
        return default
    sx = str(x).strip()
    if not sx:
        return default
    try:
        return int(float(sx))
    except ValueError:
        return default


def _parse_overs(x: object) -> Overs:
    if _is_missing(x):
        return Overs()
    return Overs.from_balls(overs_to_balls(str(x)))


def build_state_from_standings(rows: Iterable[Mapping[str, object]]) -> Dict[str, Team]:
    """
    Convert standings rows -> internal state.

    Rules:
      - `points` defaults to 2 x won when absent.
      - `nrr` is taken as published when present, else recomputed from the
        aggregates (0.0 for a team that has not faced a ball).
    """
    state: Dict[str, Team] = {}

    for row in rows:
        name = "" if _is_missing(row.get("team")) else str(row.get("team")).strip()
        if not name:
            continue
        if name in state:
            raise StandingsLoadError(f"Duplicate team in standings: {name}")

        won = _safe_int(row.get("won"))
        points_raw = row.get("points")
        points = 2 * won if _is_missing(points_raw) else _safe_int(points_raw)

        try:
            team = Team(
                name=name,
                matches=_safe_int(row.get("matches")),
                won=won,
                lost=_safe_int(row.get("lost")),
                points=points,
                for_runs=_safe_int(row.get("for_runs")),
                for_overs=_parse_overs(row.get("for_overs")),
                against_runs=_safe_int(row.get("against_runs")),
                against_overs=_parse_overs(row.get("against_overs")),
                nrr=0.0,
            )
        except DomainError as e:
            raise StandingsLoadError(f"Invalid standings row for {name}: {e}") from e

        nrr_raw = row.get("nrr")
        if not _is_missing(nrr_raw):
            try:
                nrr_val = float(nrr_raw)
            except ValueError as e:
                raise StandingsLoadError(f"Invalid nrr for {name}: {nrr_raw}") from e
        elif team.for_overs.total_balls > 0 and team.against_overs.total_balls > 0:
            nrr_val = team_nrr(team)
        else:
            nrr_val = 0.0

        logger.debug("[STATE_BUILD] {} points={} nrr={}", name, points, nrr_val)
        state[name] = replace(team, nrr=nrr_val)

    return state


def load_standings_csv(path: str) -> Dict[str, Team]:
    try:
        df = pd.read_csv(path, dtype=str, skipinitialspace=True)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise StandingsLoadError(f"Unable to read standings CSV {path}: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise StandingsLoadError(f"Standings CSV {path} is missing columns: {', '.join(missing)}")

    state = build_state_from_standings(df.to_dict(orient="records"))
    if not state:
        raise StandingsLoadError(f"Standings CSV {path} has no teams")
    return state


def load_standings() -> Dict[str, Team]:
    """Fresh snapshot per call: the CSV table when configured, else the seed table."""
    if STANDINGS_CSV_PATH:
        return load_standings_csv(STANDINGS_CSV_PATH)
    return create_seed_state()


def standings_source() -> str:
    return "csv" if STANDINGS_CSV_PATH else "seed"


def resolve_team_name(state: Mapping[str, Team], raw: str) -> str:
    """Exact match first, then case-insensitive."""
    name = (raw or "").strip()
    if name in state:
        return name

    folded = name.casefold()
    for key in state:
        if key.casefold() == folded:
            return key

    raise UnknownTeamError(name)
