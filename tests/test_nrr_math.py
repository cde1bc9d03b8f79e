import pytest

from nrr_api.errors import DomainError, InputError
from nrr_api.models import Overs
from nrr_api.nrr_math import (
    balls_to_decimal_overs,
    balls_to_display_overs,
    balls_to_overs,
    normalize_innings_balls,
    overs_to_balls,
    revised_nrr,
    team_nrr,
    to_decimal_overs,
    truncate_nrr,
)

from conftest import make_team


class TestOversArithmetic:

    def test_balls_to_decimal_overs(self):
        assert balls_to_decimal_overs(82) == pytest.approx(13.6667, abs=1e-4)

    def test_balls_to_display_overs_is_a_digit_pair(self):
        assert balls_to_display_overs(82) == 13.4
        assert balls_to_display_overs(120) == 20.0
        assert balls_to_display_overs(5) == 0.5

    def test_balls_to_overs(self):
        assert balls_to_overs(82) == Overs(13, 4)

    def test_extra_balls_carry_into_overs(self):
        assert Overs(2, 7) == Overs(3, 1)
        assert to_decimal_overs(13, 10) == pytest.approx(14 + 4 / 6)

    def test_to_decimal_overs_accepts_overs_value(self):
        assert to_decimal_overs(Overs(14, 4)) == pytest.approx(14.6667, abs=1e-4)

    def test_negative_overs_rejected(self):
        with pytest.raises(InputError):
            to_decimal_overs(-1)
        with pytest.raises(InputError):
            Overs(-1, 0)

    @pytest.mark.parametrize("balls", range(0, 250))
    def test_round_trip(self, balls):
        assert to_decimal_overs(balls_to_overs(balls)) == pytest.approx(balls / 6)

    def test_overs_notation(self):
        assert overs_to_balls("19.4") == 118
        assert overs_to_balls("20") == 120
        assert overs_to_balls("0.1") == 1

    @pytest.mark.parametrize("bad", ["19.6", "abc", "", "-2.0"])
    def test_overs_notation_rejects_malformed(self, bad):
        with pytest.raises(InputError):
            overs_to_balls(bad)

    def test_all_out_counts_full_quota(self):
        assert normalize_innings_balls(100, True, 20) == 120
        assert normalize_innings_balls(100, False, 20) == 100
        assert normalize_innings_balls(0, True, 20) == 0


class TestRunRateEngine:

    def test_revised_nrr_exact_value(self):
        team = make_team("A", for_runs=1000, against_runs=900)
        assert revised_nrr(team, 50, 10, 40, 10) == 1.0

    def test_truncates_toward_zero(self):
        assert truncate_nrr(1.2349) == 1.234
        assert truncate_nrr(-1.2349) == -1.234

    def test_float_noise_does_not_drop_a_thousandth(self):
        assert truncate_nrr(0.9999999999999) == 1.0

    def test_zero_overs_is_a_domain_error(self):
        team = make_team("Fresh", for_runs=0, for_overs=Overs(), against_runs=0, against_overs=Overs())
        with pytest.raises(DomainError):
            revised_nrr(team)

    def test_seed_nrr_recomputes(self, seed_state):
        assert team_nrr(seed_state["Chennai Super Kings"]) == 0.771
        assert team_nrr(seed_state["Delhi Capitals"]) == 0.319

    def test_strictly_decreasing_in_conceded_runs(self, even_team):
        values = [revised_nrr(even_team, 180, 20, r, 20) for r in range(0, 180)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_decreasing_in_balls_consumed(self, even_team):
        values = [
            revised_nrr(even_team, 151, balls_to_decimal_overs(b), 150, 20)
            for b in range(26, 121)
        ]
        assert all(a >= b for a, b in zip(values, values[1:]))
        assert values[0] > values[-1]
