# closed_form.py
# Black-Scholes approximation used as the smooth, deterministic proxy that
# the Greeks are bumped against.
#
# The normal CDF is built on the Abramowitz-Stegun 7.1.26 rational
# approximation of erf (|error| <= 1.5e-7).  erf / norm_cdf accept scalars
# *or* NumPy arrays.

from __future__ import annotations

import math

import numpy as np

from .core import DAYS_PER_YEAR, OptionKind
from .errors import DomainError

__all__ = ["erf", "norm_cdf", "intrinsic_value", "approximate"]

# Abramowitz & Stegun 7.1.26
_P = 0.3275911
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429

_SQRT2 = math.sqrt(2.0)


def erf(x):
    """Rational approximation of the error function (odd extension for x < 0)."""
    x = np.asarray(x, dtype=float)
    sign = np.sign(x)
    ax = np.abs(x)
    t = 1.0 / (1.0 + _P * ax)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    y = sign * (1.0 - poly * np.exp(-ax * ax))
    return float(y) if y.ndim == 0 else y


def norm_cdf(x):
    """Standard normal CDF, ``0.5 * (1 + erf(x / sqrt(2)))``."""
    x = np.asarray(x, dtype=float)
    y = 0.5 * (1.0 + np.asarray(erf(x / _SQRT2)))
    return float(y) if y.ndim == 0 else y


def intrinsic_value(kind: OptionKind | str, strike: float, underlying: float) -> float:
    """Payoff if exercised right now."""
    kind = OptionKind.parse(kind)
    if kind is OptionKind.CALL:
        return max(underlying - strike, 0.0)
    elif kind is OptionKind.PUT:
        return max(strike - underlying, 0.0)
    raise DomainError(f"unhandled option kind {kind!r}")


def approximate(
    kind: OptionKind | str,
    strike: float,
    expiry_days: float,
    underlying: float,
    volatility: float,
    risk_free_rate: float = 0.05,
) -> float:
    """Closed-form Black-Scholes value with ``T = expiry_days / 365``.

    An expired contract (``T <= 0``) is worth its intrinsic value.

    Raises
    ------
    DomainError
        If ``underlying``, ``strike`` or ``volatility`` is non-positive for an
        unexpired contract, or the result is not finite.
    """
    kind = OptionKind.parse(kind)
    T = expiry_days / DAYS_PER_YEAR
    if T <= 0:
        return intrinsic_value(kind, strike, underlying)

    S, K, r, sigma = float(underlying), float(strike), float(risk_free_rate), float(volatility)
    if S <= 0 or K <= 0 or sigma <= 0:
        raise DomainError(
            f"closed form needs positive underlying, strike and volatility "
            f"(got S={S}, K={K}, sigma={sigma})"
        )

    sig_sqrt_T = sigma * math.sqrt(T)
    d1 = (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    disc = math.exp(-r * T)

    if kind is OptionKind.CALL:
        value = S * norm_cdf(d1) - K * disc * norm_cdf(d2)
    elif kind is OptionKind.PUT:
        value = K * disc * norm_cdf(-d2) - S * norm_cdf(-d1)
    else:
        raise DomainError(f"unhandled option kind {kind!r}")

    if not math.isfinite(value):
        raise DomainError(
            f"closed form produced {value} for kind={kind.value}, S={S}, K={K}, "
            f"T={T}, r={r}, sigma={sigma}"
        )
    return float(value)
