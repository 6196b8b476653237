"""Risk statistics for weather options.

Volatility estimation from historical index readings, break-even level,
payoff extremes and a historical probability of profit.  All functions are
pure; historical series are never modified.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence, Union

import numpy as np

from .core import OptionKind, ProfitLoss
from .errors import InsufficientHistoricalData, InvalidContractTerms

logger = logging.getLogger(__name__)

__all__ = [
    "clamp_volatility",
    "implied_volatility",
    "break_even",
    "max_profit_loss",
    "probability_of_profit",
]

Series = Union[Sequence[float], np.ndarray]

VOL_FLOOR = 0.10
VOL_CAP = 2.00
DEFAULT_VOL = 0.30
MIN_RETURNS = 2
MIN_POP_POINTS = 10


def _as_series(series: Series) -> np.ndarray:
    # np.array copies, so the caller's buffer is never touched
    return np.array(series, dtype=float).ravel()


def _check_premium(strike: float, premium: float) -> None:
    if not (math.isfinite(strike) and strike > 0):
        raise InvalidContractTerms(f"strike must be positive and finite, got {strike!r}")
    if not (math.isfinite(premium) and premium >= 0):
        raise InvalidContractTerms(f"premium must be non-negative and finite, got {premium!r}")


def clamp_volatility(vol: float, floor: float = VOL_FLOOR, cap: float = VOL_CAP) -> float:
    """Clip ``vol`` into ``[floor, cap]``."""
    clamped = min(cap, max(floor, float(vol)))
    if clamped != vol:
        logger.warning("volatility %.4f clamped to %.4f", vol, clamped)
    return clamped


# ---------------------------------------------------------------------------
# Volatility from history
# ---------------------------------------------------------------------------

def implied_volatility(
    series: Series,
    *,
    default: float = DEFAULT_VOL,
    floor: float = VOL_FLOOR,
    cap: float = VOL_CAP,
    annualization: float = 365.0,
    strict: bool = False,
) -> float:
    """Annualized volatility of daily log-returns of a weather index.

    Returns are taken between adjacent readings that are both positive (a
    dry day breaks the chain).  The sample standard deviation is scaled by
    ``sqrt(annualization)`` and clipped to ``[floor, cap]``.

    With fewer than two usable returns the ``default`` is returned, or
    :class:`InsufficientHistoricalData` is raised when ``strict`` is set.
    """
    x = _as_series(series)
    prev, nxt = x[:-1], x[1:]
    usable = np.isfinite(prev) & np.isfinite(nxt) & (prev > 0) & (nxt > 0)
    rets = np.log(nxt[usable] / prev[usable])

    if rets.size < MIN_RETURNS:
        if strict:
            raise InsufficientHistoricalData(MIN_RETURNS, int(rets.size), "usable log-returns")
        logger.warning(
            "only %d usable log-returns in %d readings; using default vol %.2f",
            rets.size, x.size, default,
        )
        return float(default)

    vol = float(rets.std(ddof=1) * math.sqrt(annualization))
    return clamp_volatility(vol, floor, cap)


# ---------------------------------------------------------------------------
# Payoff geometry
# ---------------------------------------------------------------------------

def break_even(kind: OptionKind | str, strike: float, premium: float) -> float:
    """Index level at expiry where the buyer recovers the premium."""
    kind = OptionKind.parse(kind)
    if kind is OptionKind.CALL:
        return float(strike + premium)
    elif kind is OptionKind.PUT:
        return float(strike - premium)
    raise InvalidContractTerms(f"unhandled option kind {kind!r}")


def max_profit_loss(kind: OptionKind | str, strike: float, premium: float) -> ProfitLoss:
    """Buyer's best and worst outcome.

    A call's upside is unbounded (``math.inf``); a put can at most pay the
    strike (index at zero) less the premium.  Either way the most the buyer
    can lose is the premium.
    """
    kind = OptionKind.parse(kind)
    _check_premium(strike, premium)
    if kind is OptionKind.CALL:
        return ProfitLoss(max_profit=math.inf, max_loss=float(premium))
    elif kind is OptionKind.PUT:
        return ProfitLoss(max_profit=max(float(strike - premium), 0.0), max_loss=float(premium))
    raise InvalidContractTerms(f"unhandled option kind {kind!r}")


# ---------------------------------------------------------------------------
# Historical probability of profit
# ---------------------------------------------------------------------------

def probability_of_profit(
    kind: OptionKind | str,
    strike: float,
    premium: float,
    series: Series,
    *,
    strict: bool = False,
) -> float:
    """Share of historical readings beyond break-even in the profitable direction.

    Calls count readings strictly above break-even, puts strictly below.  With
    fewer than ten readings the answer is 0.5, or
    :class:`InsufficientHistoricalData` is raised when ``strict`` is set.
    """
    kind = OptionKind.parse(kind)
    x = _as_series(series)

    if x.size < MIN_POP_POINTS:
        if strict:
            raise InsufficientHistoricalData(MIN_POP_POINTS, int(x.size), "readings")
        logger.warning("only %d readings; probability of profit defaults to 0.5", x.size)
        return 0.5

    be = break_even(kind, strike, premium)
    if kind is OptionKind.CALL:
        wins = np.count_nonzero(x > be)
    elif kind is OptionKind.PUT:
        wins = np.count_nonzero(x < be)
    else:
        raise InvalidContractTerms(f"unhandled option kind {kind!r}")
    return float(wins) / x.size
