"""Model validation for the weather-option engine.

Benchmarks the Monte Carlo premium and the Abramowitz-Stegun closed form
against an exact Black-Scholes reference, measures Monte Carlo convergence,
and evaluates the closed form over a grid of index / volatility shocks.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
from scipy.stats import norm

from .closed_form import approximate
from .config import DEFAULT_CONFIG
from .core import ContractTerms, OptionKind
from .errors import InvalidContractTerms
from .monte_carlo import premium_mc

logger = logging.getLogger(__name__)

__all__ = [
    "reference_price",
    "cross_validate",
    "convergence_analysis",
    "stress_test",
]


def reference_price(terms: ContractTerms) -> float:
    """Black-Scholes value using SciPy's exact normal CDF."""
    terms = terms.with_default_rate(DEFAULT_CONFIG.risk_free_rate)
    S, K, T, r, sigma = (terms.underlying, terms.strike, terms.T,
                         terms.risk_free_rate, terms.volatility)
    sig_sqrt_T = sigma * math.sqrt(T)
    d1 = (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    disc = math.exp(-r * T)
    if terms.kind is OptionKind.CALL:
        return float(S * norm.cdf(d1) - K * disc * norm.cdf(d2))
    elif terms.kind is OptionKind.PUT:
        return float(K * disc * norm.cdf(-d2) - S * norm.cdf(-d1))
    raise InvalidContractTerms(f"unhandled option kind {terms.kind!r}")


# ---------------------------------------------------------------------------
# Cross-model benchmarking
# ---------------------------------------------------------------------------

def cross_validate(
    terms: ContractTerms,
    *,
    simulations: int = 100_000,
    seed: int = 42,
) -> dict:
    """Compare Monte Carlo and closed form against the exact reference.

    Returns
    -------
    dict
        ``"reference"``, ``"closed_form"``, ``"mc"`` (premium, stderr),
        ``"erf_error"`` (|closed form - reference|),
        ``"max_discrepancy"`` (largest absolute gap to the reference) and
        ``"mc_z"`` (MC gap in units of its standard error).
    """
    terms = terms.with_default_rate(DEFAULT_CONFIG.risk_free_rate)
    ref = reference_price(terms)
    cf = approximate(terms.kind, terms.strike, terms.expiry_days, terms.underlying,
                     terms.volatility, terms.risk_free_rate)
    mc, se = premium_mc(terms, simulations=simulations, seed=seed)

    result = {
        "reference": ref,
        "closed_form": cf,
        "mc": (mc, se),
        "erf_error": abs(cf - ref),
        "max_discrepancy": max(abs(cf - ref), abs(mc - ref)),
        "mc_z": abs(mc - ref) / se if se > 0 else float("nan"),
    }
    logger.debug("cross-validation %s: %s", terms, result)
    return result


# ---------------------------------------------------------------------------
# Convergence analysis
# ---------------------------------------------------------------------------

def convergence_analysis(
    terms: ContractTerms,
    simulation_counts,
    *,
    seed: int = 42,
    reference: Optional[float] = None,
) -> dict:
    """Monte Carlo error as the number of trials grows.

    Returns
    -------
    dict
        ``"simulations"``, ``"prices"``, ``"errors"``, ``"order"``
        (fitted from ``error ~ C / n^order``; about 0.5 for plain MC).
    """
    counts = [int(n) for n in simulation_counts]
    if reference is None:
        reference = reference_price(terms)

    prices = [premium_mc(terms, simulations=n, seed=seed)[0] for n in counts]
    errors = [abs(p - reference) for p in prices]

    # Estimate convergence order from log-log regression
    order = float("nan")
    valid = [(n, e) for n, e in zip(counts, errors) if e > 0]
    if len(valid) >= 2:
        log_n = np.log([n for n, _ in valid])
        log_e = np.log([e for _, e in valid])
        coeffs = np.polyfit(log_n, log_e, 1)
        order = -float(coeffs[0])

    return {
        "simulations": counts,
        "prices": prices,
        "errors": errors,
        "order": order,
    }


# ---------------------------------------------------------------------------
# Stress testing
# ---------------------------------------------------------------------------

def stress_test(
    terms: ContractTerms,
    index_shocks,
    vol_shocks,
) -> np.ndarray:
    """Closed-form value over a 2-D grid of market shocks.

    Parameters
    ----------
    index_shocks : array, shape (n_index,)
        Multiplicative shocks to the index level (e.g. [0.8, 1.0, 1.2]).
    vol_shocks : array, shape (n_vol,)
        Additive shocks to volatility; shocked vol is floored at 1e-4.

    Returns
    -------
    ndarray, shape (n_index, n_vol)
    """
    index_shocks = np.asarray(index_shocks, dtype=float)
    vol_shocks = np.asarray(vol_shocks, dtype=float)
    if np.any(index_shocks <= 0):
        raise InvalidContractTerms("index shocks must be positive multipliers")
    terms = terms.with_default_rate(DEFAULT_CONFIG.risk_free_rate)

    out = np.empty((index_shocks.size, vol_shocks.size))
    for i, ds in enumerate(index_shocks):
        for j, dv in enumerate(vol_shocks):
            out[i, j] = approximate(
                terms.kind, terms.strike, terms.expiry_days,
                terms.underlying * ds, max(terms.volatility + dv, 1e-4),
                terms.risk_free_rate,
            )
    return out
