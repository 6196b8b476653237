# monte_carlo.py
# Chunked Monte Carlo premium for weather options under daily-step GBM.

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Optional, Union

import numpy as np

from .config import DEFAULT_CONFIG
from .core import DAYS_PER_YEAR, ContractTerms, OptionKind
from .errors import InvalidContractTerms, PricingTimeout
from .processes import gbm_terminal

logger = logging.getLogger(__name__)

__all__ = ["premium_mc"]


# ---- helper: one simulation chunk (no path storage, only terminal S_T) ----

def _mc_chunk_sumstats(
    n: int,
    *,
    S0: float, K: float, n_days: int, r: float, sigma: float,
    kind: str, antithetic: bool, seed: Union[np.random.SeedSequence, int, None],
):
    """
    Simulate `n` terminal index levels, compute discounted payoff X and the
    control variate Y = e^{-rT} S_T. Return sufficient statistics to aggregate:
        n, sumX, sumX2, sumY, sumY2, sumXY
    """
    if n <= 0:
        return (0, 0.0, 0.0, 0.0, 0.0, 0.0)

    ST = gbm_terminal(S0, r, sigma, n_days, n, antithetic=antithetic, seed=seed)
    df = math.exp(-r * n_days / DAYS_PER_YEAR)

    kind = OptionKind.parse(kind)
    if kind is OptionKind.CALL:
        payoff = np.maximum(ST - K, 0.0)
    elif kind is OptionKind.PUT:
        payoff = np.maximum(K - ST, 0.0)
    else:
        raise InvalidContractTerms(f"unhandled option kind {kind!r}")

    X = df * payoff
    Y = df * ST
    return (
        X.size,
        float(X.sum()),
        float((X * X).sum()),
        float(Y.sum()),
        float((Y * Y).sum()),
        float((X * Y).sum()),
    )


def _aggregate_stats(stats_list):
    n = sum(s[0] for s in stats_list)
    sumX  = sum(s[1] for s in stats_list)
    sumX2 = sum(s[2] for s in stats_list)
    sumY  = sum(s[3] for s in stats_list)
    sumY2 = sum(s[4] for s in stats_list)
    sumXY = sum(s[5] for s in stats_list)
    return n, sumX, sumX2, sumY, sumY2, sumXY


def _plan_chunks(n_paths: int, chunk_size: int) -> list[int]:
    chunks = []
    remaining = int(n_paths)
    while remaining > 0:
        m = min(chunk_size, remaining)
        chunks.append(m)
        remaining -= m
    return chunks


def premium_mc(
    terms: ContractTerms,
    *,
    simulations: int = 10_000,
    seed: Union[int, np.random.SeedSequence, None] = None,
    chunk_size: int = 10_000,
    antithetic: bool = False,
    control_variate: bool = False,
    n_workers: int = 1,
    deadline: Optional[float] = None,
) -> tuple[float, float]:
    """
    Monte Carlo premium of a weather option. Returns (premium, stderr).

    - One GBM step per calendar day, normals via Box-Muller.
    - Streams in chunks; each chunk gets an independent stream spawned from
      SeedSequence(seed), so a seeded call is reproducible and concurrent
      calls never share random state.
    - Optional antithetic variates and control variate Y = e^{-rT} S_T with
      E[Y] = S0.
    - Optional process-level parallelism (n_workers > 1).
    - `deadline` is a wall-clock budget in seconds; exceeding it raises
      PricingTimeout.

    The premium is floored at zero.
    """
    if simulations <= 0:
        raise InvalidContractTerms(f"simulations must be positive, got {simulations}")
    if chunk_size <= 0:
        raise InvalidContractTerms(f"chunk_size must be positive, got {chunk_size}")

    terms = terms.with_default_rate(DEFAULT_CONFIG.risk_free_rate)
    S0, K, r, sigma = terms.underlying, terms.strike, terms.risk_free_rate, terms.volatility
    n_days = terms.expiry_days
    kind = terms.kind.value

    ss_root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    chunks = _plan_chunks(simulations, chunk_size)
    child_seeds = ss_root.spawn(len(chunks))
    started = time.monotonic()

    logger.debug(
        "MC %s K=%s S0=%s days=%d sigma=%.4f r=%.4f: %d paths in %d chunk(s), workers=%d",
        kind, K, S0, n_days, sigma, r, simulations, len(chunks), n_workers,
    )

    common = dict(S0=S0, K=K, n_days=n_days, r=r, sigma=sigma,
                  kind=kind, antithetic=antithetic)

    def _timeout(done: int) -> PricingTimeout:
        return PricingTimeout(
            f"simulation exceeded {deadline:.3f}s after {done} of {len(chunks)} chunks"
        )

    stats_list = []
    if n_workers <= 1:
        for m, ss in zip(chunks, child_seeds):
            if deadline is not None and time.monotonic() - started > deadline:
                raise _timeout(len(stats_list))
            stats_list.append(_mc_chunk_sumstats(m, seed=ss, **common))
        # the last chunk can overrun too
        if deadline is not None and time.monotonic() - started > deadline:
            raise _timeout(len(stats_list))
    else:
        # process pool: safe in scripts; in notebooks prefer n_workers=1
        # shut down without waiting once the deadline has passed
        ex = ProcessPoolExecutor(max_workers=n_workers)
        timed_out = False
        try:
            futs = [ex.submit(_mc_chunk_sumstats, m, seed=ss, **common)
                    for m, ss in zip(chunks, child_seeds)]
            remaining = None if deadline is None else max(0.0, deadline - (time.monotonic() - started))
            for f in as_completed(futs, timeout=remaining):
                stats_list.append(f.result())
        except FuturesTimeout:
            timed_out = True
        finally:
            ex.shutdown(wait=not timed_out, cancel_futures=True)
        if timed_out:
            raise _timeout(len(stats_list))

    n, sumX, sumX2, sumY, sumY2, sumXY = _aggregate_stats(stats_list)

    meanX = sumX / n
    varX  = max(0.0, sumX2 / n - meanX * meanX)

    if control_variate:
        # c_hat = Cov(X,Y)/Var(Y)
        meanY = sumY / n
        varY  = max(0.0, sumY2 / n - meanY * meanY)
        covXY = (sumXY / n) - meanX * meanY
        c_hat = 0.0 if varY == 0.0 else (covXY / varY)

        mean = meanX - c_hat * (meanY - S0)
        var = max(0.0, varX - 2.0 * c_hat * covXY + (c_hat * c_hat) * varY)
    else:
        mean, var = meanX, varX

    se = math.sqrt(var / n)
    premium = max(0.0, float(mean))
    logger.debug("MC premium=%.6f stderr=%.6f (%.3fs)", premium, se, time.monotonic() - started)
    return premium, float(se)
