import pytest

from nrr_api.models import Overs, Team
from nrr_api.simulator import create_seed_state


def make_table_from_teams(teams):
    return {t.name: t for t in teams}


def make_team(
    name,
    points=0,
    nrr=0.0,
    for_runs=1000,
    for_overs=Overs(100, 0),
    against_runs=1000,
    against_overs=Overs(100, 0),
    lost=0,
):
    won = points // 2
    return Team(
        name=name,
        matches=won + lost,
        won=won,
        lost=lost,
        points=points,
        for_runs=for_runs,
        for_overs=for_overs,
        against_runs=against_runs,
        against_overs=against_overs,
        nrr=nrr,
    )


@pytest.fixture
def seed_state():
    return create_seed_state()


@pytest.fixture
def even_team():
    """1000 runs in 100 overs both ways: NRR 0.000, easy to reason about."""
    return make_team("Us", points=2, nrr=0.0)
