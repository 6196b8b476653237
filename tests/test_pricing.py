"""End-to-end pricing scenarios."""

import math
import pytest

from wxpricer import (
    CALL, PUT, ContractTerms, PricedOption, PricingConfig, InvalidContractTerms,
    price_option, price, try_price_option, break_even, max_profit_loss,
)

RAIN_CALL = ContractTerms(CALL, strike=15.0, expiry_days=30, underlying=12.0,
                          volatility=0.30, risk_free_rate=0.05)


class TestRainfallCallScenario:
    @pytest.fixture(scope="class")
    def priced(self):
        return price_option(RAIN_CALL, seed=7)

    def test_small_positive_premium(self, priced):
        assert isinstance(priced, PricedOption)
        assert 0 < priced.premium < RAIN_CALL.underlying

    def test_fair_value_equals_premium(self, priced):
        assert priced.fair_value == priced.premium
        assert priced.implied_volatility == 0.30
        assert priced.simulations == 10_000

    def test_break_even_and_extremes(self, priced):
        assert break_even(CALL, 15.0, priced.premium) == 15.0 + priced.premium
        pl = max_profit_loss(CALL, 15.0, priced.premium)
        assert pl.max_loss == priced.premium
        assert pl.max_profit == math.inf

    def test_greeks_attached(self, priced):
        assert 0 < priced.greeks.delta < 1
        assert priced.greeks.gamma >= 0


class TestPriceOption:
    def test_flat_signature_matches_terms(self):
        a = price(CALL, 15.0, 30, 12.0, 0.30, 0.05, 2_000, seed=3)
        b = price_option(RAIN_CALL, simulations=2_000, seed=3)
        assert a == b

    def test_flat_signature_defaults(self):
        res = price("put", 15.0, 30, 16.0, 0.30, simulations=1_000, seed=1)
        assert res.premium >= 0
        assert res.greeks.delta < 0

    def test_rate_override(self):
        low = price_option(RAIN_CALL, risk_free_rate=0.0, simulations=2_000, seed=3)
        high = price_option(RAIN_CALL, risk_free_rate=0.10, simulations=2_000, seed=3)
        assert high.greeks.delta > low.greeks.delta

    def test_config_rate_fills_missing_terms_rate(self):
        terms = ContractTerms(CALL, 15.0, 30, 12.0, 0.30)
        base = price_option(terms, simulations=2_000, seed=1)
        assert base == price_option(terms.with_rate(0.05), simulations=2_000, seed=1)
        high = price_option(terms, simulations=2_000, seed=1,
                            config=PricingConfig(risk_free_rate=0.20))
        assert high.premium > base.premium
        assert high.greeks.delta > base.greeks.delta

    def test_terms_rate_wins_over_config(self):
        cfg = PricingConfig(risk_free_rate=0.20)
        assert (price_option(RAIN_CALL, simulations=2_000, seed=1, config=cfg)
                == price_option(RAIN_CALL, simulations=2_000, seed=1))

    def test_volatility_clamped_high(self):
        res = price_option(RAIN_CALL.with_volatility(5.0), simulations=1_000, seed=1)
        assert res.implied_volatility == 2.00

    def test_volatility_clamped_low(self):
        res = price_option(RAIN_CALL.with_volatility(0.01), simulations=1_000, seed=1)
        assert res.implied_volatility == 0.10

    def test_config_simulations(self):
        cfg = PricingConfig(simulations=1_500, chunk_size=500)
        res = price_option(RAIN_CALL, seed=2, config=cfg)
        assert res.simulations == 1_500
        assert res.standard_error > 0

    def test_invalid_terms(self):
        with pytest.raises(InvalidContractTerms):
            price(CALL, 15.0, 30, 0.0, 0.30)
        with pytest.raises(InvalidContractTerms):
            price(CALL, -15.0, 30, 12.0, 0.30)
        with pytest.raises(InvalidContractTerms):
            price(CALL, 15.0, 0, 12.0, 0.30)

    def test_as_dict(self):
        d = price_option(RAIN_CALL, simulations=1_000, seed=1).as_dict()
        assert set(d["greeks"]) == {"delta", "gamma", "theta", "vega"}
        assert d["fair_value"] == d["premium"]


class TestPriceUnavailable:
    def test_timeout_degrades_to_none(self):
        cfg = PricingConfig(simulations=50_000, chunk_size=1_000, deadline=1e-9)
        assert try_price_option(RAIN_CALL, seed=1, config=cfg) is None

    def test_success_passes_through(self):
        res = try_price_option(RAIN_CALL, simulations=1_000, seed=1)
        assert res is not None and res.premium >= 0
