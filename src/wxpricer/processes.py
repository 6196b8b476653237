# processes.py
# Daily-step GBM path generators for the weather index.
#
# Normals come from the Box-Muller transform of two uniform draws.  Every
# generator takes its own ``seed`` (int, SeedSequence or Generator) so no
# global random state is touched.

from __future__ import annotations

import math
from typing import Union

import numpy as np

from .core import DAYS_PER_YEAR

__all__ = [
    "box_muller",
    "gbm_paths",
    "gbm_terminal",
]

SeedLike = Union[int, np.random.SeedSequence, np.random.Generator, None]

DT = 1.0 / DAYS_PER_YEAR


def _rng(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def box_muller(rng: np.random.Generator, size) -> np.ndarray:
    """Standard normals ``sqrt(-2 ln U1) cos(2 pi U2)``.

    ``U1`` is drawn from (0, 1] so the logarithm is always finite.
    """
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def _normals(rng: np.random.Generator, n: int, antithetic: bool) -> np.ndarray:
    if antithetic:
        half = (n + 1) // 2
        z = box_muller(rng, half)
        return np.concatenate([z, -z])[:n]
    return box_muller(rng, n)


# -----------------------------
# Full paths
# -----------------------------
def gbm_paths(
    S0: float, r: float, sigma: float,
    n_days: int, n_paths: int,
    *, antithetic: bool = False, seed: SeedLike = None,
) -> np.ndarray:
    """
    Daily GBM paths, shape ``(n_days + 1, n_paths)`` including the t=0 row:
        S_{t+1} = S_t * exp((r - 0.5*sigma^2) dt + sigma * sqrt(dt) * Z),  dt = 1/365
    """
    if n_days <= 0 or n_paths <= 0:
        raise ValueError("n_days and n_paths must be positive.")

    rng = _rng(seed)
    drift = (r - 0.5 * sigma * sigma) * DT
    vol = sigma * math.sqrt(DT)

    Z = np.vstack([_normals(rng, n_paths, antithetic) for _ in range(n_days)])
    log_paths = np.cumsum(drift + vol * Z, axis=0)
    S = S0 * np.exp(log_paths)
    return np.vstack([np.full((1, n_paths), S0, dtype=float), S])


# -----------------------------
# Terminal values only
# -----------------------------
def gbm_terminal(
    S0: float, r: float, sigma: float,
    n_days: int, n_paths: int,
    *, antithetic: bool = False, seed: SeedLike = None,
) -> np.ndarray:
    """Terminal index levels after ``n_days`` daily steps.

    Same dynamics as :func:`gbm_paths` but only the running log-level per
    path is kept, so memory is O(n_paths).
    """
    if n_days <= 0 or n_paths <= 0:
        raise ValueError("n_days and n_paths must be positive.")

    rng = _rng(seed)
    drift = (r - 0.5 * sigma * sigma) * DT
    vol = sigma * math.sqrt(DT)

    log_S = np.zeros(n_paths, dtype=float)
    for _ in range(n_days):
        log_S += drift + vol * _normals(rng, n_paths, antithetic)
    return S0 * np.exp(log_S)
