# pricing.py
# Public pricing entry points: Monte Carlo premium + closed-form Greeks
# combined into one PricedOption.

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from .config import DEFAULT_CONFIG, PricingConfig
from .core import ContractTerms, OptionKind, PricedOption
from .errors import PricingError
from .greeks import greeks_for
from .monte_carlo import premium_mc
from .risk import clamp_volatility

logger = logging.getLogger(__name__)

__all__ = ["price_option", "price", "try_price_option"]

SeedLike = Union[int, np.random.SeedSequence, None]


def price_option(
    terms: ContractTerms,
    risk_free_rate: Optional[float] = None,
    simulations: Optional[int] = None,
    *,
    seed: SeedLike = None,
    config: Optional[PricingConfig] = None,
) -> PricedOption:
    """Price a weather option.

    Parameters
    ----------
    terms : ContractTerms
        Validated contract; its volatility is clamped to
        ``[config.vol_floor, config.vol_cap]`` before use.
    risk_free_rate : float, optional
        Overrides ``terms.risk_free_rate``.  When neither is given the rate
        comes from ``config.risk_free_rate``.
    simulations : int, optional
        Overrides ``config.simulations``.
    seed : int | SeedSequence, optional
        Root of the random streams; identical seeds give identical premiums.
    config : PricingConfig, optional
        Engine settings (defaults to :data:`DEFAULT_CONFIG`).

    Returns
    -------
    PricedOption
        ``fair_value`` equals ``premium``; ``implied_volatility`` is the
        clamped volatility actually priced with.
    """
    cfg = config or DEFAULT_CONFIG
    if risk_free_rate is not None:
        terms = terms.with_rate(risk_free_rate)
    terms = terms.with_default_rate(cfg.risk_free_rate)

    vol = clamp_volatility(terms.volatility, cfg.vol_floor, cfg.vol_cap)
    if vol != terms.volatility:
        terms = terms.with_volatility(vol)

    n = int(simulations) if simulations is not None else cfg.simulations

    premium, se = premium_mc(
        terms,
        simulations=n,
        seed=seed,
        chunk_size=cfg.chunk_size,
        antithetic=cfg.antithetic,
        control_variate=cfg.control_variate,
        n_workers=cfg.n_workers,
        deadline=cfg.deadline,
    )
    g = greeks_for(terms, cfg)

    logger.info(
        "priced %s K=%s S=%s days=%d vol=%.4f: premium=%.6f (se %.6f)",
        terms.kind.value, terms.strike, terms.underlying, terms.expiry_days,
        vol, premium, se,
    )
    return PricedOption(
        premium=premium,
        greeks=g,
        fair_value=premium,
        implied_volatility=vol,
        standard_error=se,
        simulations=n,
    )


def price(
    kind: OptionKind | str,
    strike: float,
    expiry_days: int,
    underlying: float,
    volatility: float,
    risk_free_rate: Optional[float] = None,
    simulations: Optional[int] = None,
    *,
    seed: SeedLike = None,
    config: Optional[PricingConfig] = None,
) -> PricedOption:
    """Flat-argument form of :func:`price_option`.

    ``risk_free_rate`` and ``simulations`` fall back to the config defaults
    (0.05 and 10 000).
    """
    cfg = config or DEFAULT_CONFIG
    terms = ContractTerms(
        kind=kind,
        strike=strike,
        expiry_days=expiry_days,
        underlying=underlying,
        volatility=volatility,
        risk_free_rate=risk_free_rate,
    )
    return price_option(terms, simulations=simulations, seed=seed, config=cfg)


def try_price_option(
    terms: ContractTerms,
    risk_free_rate: Optional[float] = None,
    simulations: Optional[int] = None,
    *,
    seed: SeedLike = None,
    config: Optional[PricingConfig] = None,
) -> Optional[PricedOption]:
    """Like :func:`price_option` but returns ``None`` ("price unavailable")
    on any :class:`PricingError`, which is logged."""
    try:
        return price_option(terms, risk_free_rate, simulations, seed=seed, config=config)
    except PricingError as exc:
        logger.warning("price unavailable for %s: %s", terms, exc)
        return None
