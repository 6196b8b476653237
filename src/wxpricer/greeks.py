"""Bump-and-reprice Greeks on the closed-form approximation.

The Monte Carlo premium is too noisy to difference, so sensitivities are
taken from :func:`wxpricer.closed_form.approximate` for the same terms.
"""

from __future__ import annotations

import logging
import math

from .closed_form import approximate
from .config import DEFAULT_CONFIG, PricingConfig
from .core import ContractTerms, Greeks, OptionKind
from .errors import DomainError

logger = logging.getLogger(__name__)

__all__ = ["greeks", "greeks_for"]


def greeks(
    kind: OptionKind | str,
    strike: float,
    expiry_days: float,
    underlying: float,
    volatility: float,
    risk_free_rate: float = 0.05,
    *,
    spot_bump: float = 0.01,
    vol_bump: float = 0.01,
    time_bump_days: int = 1,
) -> Greeks:
    """Finite-difference Greeks.

    Parameters
    ----------
    spot_bump : float
        Relative spot step ``dS = spot_bump * S`` (central difference for
        delta and gamma).
    vol_bump : float
        Relative vol step ``dsigma = vol_bump * sigma`` (forward difference).
    time_bump_days : int
        Days rolled forward for theta.

    Returns
    -------
    Greeks
        ``theta`` is value change per day (negative means decay); ``vega`` is
        per unit of annualized volatility.  Each value is rounded to 4 dp.

    Raises
    ------
    DomainError
        If any sensitivity is NaN or infinite.
    """
    kind = OptionKind.parse(kind)

    def V(S=underlying, days=expiry_days, sigma=volatility):
        return approximate(kind, strike, days, S, sigma, risk_free_rate)

    P0 = V()

    # --- Delta & Gamma (spot bump) ---
    eps_S = spot_bump * underlying
    P_up = V(S=underlying + eps_S)
    P_dn = V(S=underlying - eps_S)
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Theta (roll forward; an expired contract prices at intrinsic) ---
    P_t = V(days=expiry_days - time_bump_days)
    theta = (P_t - P0) / time_bump_days

    # --- Vega (vol bump) ---
    eps_v = vol_bump * volatility
    P_v = V(sigma=volatility + eps_v)
    vega = (P_v - P0) / eps_v

    values = {"delta": delta, "gamma": gamma, "theta": theta, "vega": vega}
    bad = [k for k, v in values.items() if not math.isfinite(v)]
    if bad:
        raise DomainError(
            f"non-finite Greeks {bad} for kind={kind.value}, K={strike}, "
            f"days={expiry_days}, S={underlying}, sigma={volatility}"
        )
    return Greeks(**{k: round(float(v), 4) for k, v in values.items()})


def greeks_for(terms: ContractTerms, config: PricingConfig = DEFAULT_CONFIG) -> Greeks:
    """Greeks for validated terms with bump sizes (and a missing rate) taken
    from ``config``."""
    terms = terms.with_default_rate(config.risk_free_rate)
    g = greeks(
        terms.kind, terms.strike, terms.expiry_days, terms.underlying,
        terms.volatility, terms.risk_free_rate,
        spot_bump=config.spot_bump,
        vol_bump=config.vol_bump,
        time_bump_days=config.time_bump_days,
    )
    logger.debug("greeks %s: %s", terms.kind.value, g)
    return g
