"""Tests for finite-difference Greeks on the closed form."""

import math
import pytest
from scipy.stats import norm

from wxpricer import CALL, PUT, ContractTerms, DomainError, Greeks, PricingConfig
from wxpricer.greeks import greeks, greeks_for

K, DAYS, S, SIGMA, R = 100.0, 30, 100.0, 0.30, 0.05


def _analytic(kind, S, K, days, r, sigma):
    """Textbook Black-Scholes Greeks; theta per day, vega per unit vol."""
    T = days / 365
    d1 = (math.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    n_d1 = norm.pdf(d1)
    gamma = n_d1 / (S * sigma * math.sqrt(T))
    vega = S * n_d1 * math.sqrt(T)
    if kind is CALL:
        delta = norm.cdf(d1)
        theta = -S * n_d1 * sigma / (2 * math.sqrt(T)) - r * K * math.exp(-r * T) * norm.cdf(d2)
    else:
        delta = norm.cdf(d1) - 1.0
        theta = -S * n_d1 * sigma / (2 * math.sqrt(T)) + r * K * math.exp(-r * T) * norm.cdf(-d2)
    return {"delta": delta, "gamma": gamma, "theta": theta / 365, "vega": vega}


class TestAgainstAnalytic:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_close_to_textbook(self, kind):
        g = greeks(kind, K, DAYS, S, SIGMA, R)
        a = _analytic(kind, S, K, DAYS, R, SIGMA)
        assert abs(g.delta - a["delta"]) < 0.005
        assert abs(g.gamma - a["gamma"]) < 0.001
        assert abs(g.theta - a["theta"]) < 0.005
        assert abs(g.vega - a["vega"]) < 0.1


class TestSigns:
    def test_call_delta_in_unit_interval(self):
        g = greeks(CALL, K, DAYS, S, SIGMA, R)
        assert 0 < g.delta < 1

    def test_put_delta_in_negative_unit_interval(self):
        g = greeks(PUT, K, DAYS, S, SIGMA, R)
        assert -1 < g.delta < 0

    @pytest.mark.parametrize("kind", [CALL, PUT])
    @pytest.mark.parametrize("spot", [80.0, 100.0, 120.0])
    def test_gamma_nonnegative(self, kind, spot):
        assert greeks(kind, K, DAYS, spot, SIGMA, R).gamma >= 0

    def test_call_loses_value_with_time(self):
        assert greeks(CALL, K, DAYS, S, SIGMA, R).theta < 0

    def test_atm_put_loses_value_with_time(self):
        assert greeks(PUT, K, DAYS, S, SIGMA, 0.01).theta < 0

    def test_deep_itm_put_gains_value_with_time(self):
        # worth about K e^{-rT} - S, which grows as expiry nears
        assert greeks(PUT, K, DAYS, 50.0, SIGMA, R).theta > 0

    def test_vega_positive(self):
        assert greeks(CALL, K, DAYS, S, SIGMA, R).vega > 0
        assert greeks(PUT, K, DAYS, S, SIGMA, R).vega > 0


class TestBehaviour:
    def test_rounded_to_four_places(self):
        g = greeks(CALL, 15.0, 30, 12.0, 0.30, R)
        for v in g.as_dict().values():
            assert round(v, 4) == v

    def test_deterministic(self):
        assert greeks(PUT, K, DAYS, S, SIGMA, R) == greeks(PUT, K, DAYS, S, SIGMA, R)

    def test_last_day_theta_uses_intrinsic(self):
        g = greeks(CALL, 15.0, 1, 18.0, 0.30, R)
        assert math.isfinite(g.theta)
        assert g.delta == pytest.approx(1.0, abs=1e-3)

    def test_zero_underlying_raises(self):
        with pytest.raises(DomainError):
            greeks(CALL, K, DAYS, 0.0, SIGMA, R)

    def test_zero_vol_raises(self):
        with pytest.raises(DomainError):
            greeks(CALL, K, DAYS, S, 0.0, R)

    def test_greeks_for_uses_config_bumps(self):
        terms = ContractTerms(CALL, K, DAYS, S, SIGMA, R)
        default = greeks_for(terms)
        assert isinstance(default, Greeks)
        assert default == greeks(CALL, K, DAYS, S, SIGMA, R)
        wide = greeks_for(terms, PricingConfig(spot_bump=0.2))
        assert wide.gamma != default.gamma
