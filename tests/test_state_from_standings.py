import pytest

import nrr_api.state_from_standings as standings_module
from nrr_api.errors import UnknownTeamError
from nrr_api.models import Overs
from nrr_api.state_from_standings import (
    StandingsLoadError,
    build_state_from_standings,
    load_standings,
    load_standings_csv,
    resolve_team_name,
)

CSV_HEADER = "team,matches,won,lost,nrr,for_runs,for_overs,against_runs,against_overs\n"


def _write(tmp_path, text):
    path = tmp_path / "standings.csv"
    path.write_text(text)
    return str(path)


def test_load_csv(tmp_path):
    path = _write(
        tmp_path,
        CSV_HEADER
        + "Alpha,4,3,1,0.5,700,80.0,650,80.0\n"
        + "Beta,4,1,3,,1000,100.0,900,100.0\n",
    )

    state = load_standings_csv(path)

    assert list(state) == ["Alpha", "Beta"]
    assert state["Alpha"].points == 6
    assert state["Alpha"].nrr == 0.5
    # missing nrr recomputed: 10.0 - 9.0
    assert state["Beta"].nrr == 1.0
    assert state["Beta"].for_overs == Overs(100, 0)


def test_overs_notation_in_csv(tmp_path):
    path = _write(
        tmp_path,
        CSV_HEADER + "Chennai Super Kings,7,5,2,0.771,1130,133.1,1071,138.5\n",
    )

    team = load_standings_csv(path)["Chennai Super Kings"]

    assert team.for_overs == Overs(133, 1)
    assert team.against_overs == Overs(138, 5)


def test_missing_columns(tmp_path):
    path = _write(tmp_path, "team,won\nAlpha,3\n")
    with pytest.raises(StandingsLoadError):
        load_standings_csv(path)


def test_missing_file(tmp_path):
    with pytest.raises(StandingsLoadError):
        load_standings_csv(str(tmp_path / "nope.csv"))


def test_non_utf8_file(tmp_path):
    path = tmp_path / "standings.csv"
    path.write_bytes(CSV_HEADER.encode() + b"Caf\xe9 XI,4,3,1,0.5,700,80.0,650,80.0\n")

    with pytest.raises(StandingsLoadError):
        load_standings_csv(str(path))


def test_duplicate_team():
    rows = [{"team": "Alpha", "won": 1}, {"team": "Alpha", "won": 2}]
    with pytest.raises(StandingsLoadError):
        build_state_from_standings(rows)


def test_team_without_overs_has_zero_nrr():
    state = build_state_from_standings([{"team": "New", "matches": 0, "won": 0, "lost": 0}])
    assert state["New"].nrr == 0.0
    assert state["New"].points == 0


def test_bad_overs_notation():
    with pytest.raises(StandingsLoadError):
        build_state_from_standings([{"team": "Alpha", "for_overs": "10.7"}])


def test_load_standings_falls_back_to_seed(monkeypatch):
    monkeypatch.setattr(standings_module, "STANDINGS_CSV_PATH", "")
    state = load_standings()
    assert len(state) == 5
    assert "Mumbai Indians" in state


def test_load_standings_reads_configured_csv(monkeypatch, tmp_path):
    path = _write(tmp_path, CSV_HEADER + "Alpha,4,3,1,0.5,700,80.0,650,80.0\n")
    monkeypatch.setattr(standings_module, "STANDINGS_CSV_PATH", path)
    assert list(load_standings()) == ["Alpha"]


def test_resolve_team_name(seed_state):
    assert resolve_team_name(seed_state, " delhi capitals ") == "Delhi Capitals"
    with pytest.raises(UnknownTeamError):
        resolve_team_name(seed_state, "Gujarat Titans")
