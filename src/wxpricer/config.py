"""Engine configuration.

All tunables that used to be hard-coded defaults live on an immutable
:class:`PricingConfig` that is passed into each pricing call.  Overrides can
be read from the environment (or a ``.env`` file)::

    WXPRICER_RISK_FREE_RATE=0.04
    WXPRICER_SIMULATIONS=50000
    WXPRICER_N_WORKERS=4
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from dotenv import load_dotenv

from .errors import InvalidContractTerms

logger = logging.getLogger(__name__)

__all__ = ["PricingConfig", "DEFAULT_CONFIG"]


def _to_bool(raw: str) -> bool:
    s = raw.strip().lower()
    if s in {"1", "true", "yes", "on"}:
        return True
    if s in {"0", "false", "no", "off"}:
        return False
    raise InvalidContractTerms(f"cannot interpret {raw!r} as a boolean")


@dataclass(frozen=True)
class PricingConfig:
    """Numerical settings for a pricing call.

    Parameters
    ----------
    risk_free_rate : float
        Rate used when the contract does not carry one.
    simulations : int
        Monte Carlo trials per premium estimate.
    chunk_size : int
        Trials per chunk; bounds memory and sets the deadline granularity.
    antithetic : bool
        Pair each normal draw with its negative.
    control_variate : bool
        Use ``e^{-rT} S_T`` as a control variate.
    n_workers : int
        Processes used for chunks (1 = serial).
    deadline : float | None
        Wall-clock budget in seconds for the simulation.
    vol_floor, vol_cap : float
        Clamp applied to volatility before pricing.
    default_volatility : float
        Returned by the volatility estimator when history is too short.
    spot_bump, vol_bump : float
        Relative finite-difference steps for delta/gamma and vega.
    time_bump_days : int
        Step in days for theta.
    """
    risk_free_rate: float = 0.05
    simulations: int = 10_000
    chunk_size: int = 10_000
    antithetic: bool = False
    control_variate: bool = False
    n_workers: int = 1
    deadline: Optional[float] = None
    vol_floor: float = 0.10
    vol_cap: float = 2.00
    default_volatility: float = 0.30
    spot_bump: float = 0.01
    vol_bump: float = 0.01
    time_bump_days: int = 1

    def __post_init__(self):
        if not math.isfinite(self.risk_free_rate):
            raise InvalidContractTerms("risk_free_rate must be finite")
        for name in ("simulations", "chunk_size", "n_workers", "time_bump_days"):
            if int(getattr(self, name)) <= 0:
                raise InvalidContractTerms(f"{name} must be positive, got {getattr(self, name)}")
        if self.deadline is not None and self.deadline <= 0:
            raise InvalidContractTerms(f"deadline must be positive, got {self.deadline}")
        if not (0 < self.vol_floor <= self.vol_cap):
            raise InvalidContractTerms(
                f"need 0 < vol_floor <= vol_cap, got {self.vol_floor}, {self.vol_cap}"
            )
        if not (self.vol_floor <= self.default_volatility <= self.vol_cap):
            raise InvalidContractTerms("default_volatility must lie within [vol_floor, vol_cap]")
        for name in ("spot_bump", "vol_bump"):
            v = getattr(self, name)
            if not (0 < v < 1):
                raise InvalidContractTerms(f"{name} must be in (0, 1), got {v}")

    def with_overrides(self, **kwargs) -> "PricingConfig":
        """Copy with the non-``None`` keyword arguments applied."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})

    @classmethod
    def from_env(cls, prefix: str = "WXPRICER_", *, dotenv: bool = True) -> "PricingConfig":
        """Build a config from ``<prefix><FIELD>`` environment variables."""
        if dotenv:
            load_dotenv()

        overrides = {}
        for f in fields(cls):
            raw = os.getenv(prefix + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            default = f.default
            try:
                if isinstance(default, bool):
                    overrides[f.name] = _to_bool(raw)
                elif isinstance(default, int):
                    overrides[f.name] = int(raw)
                else:
                    overrides[f.name] = float(raw)
            except ValueError:
                raise InvalidContractTerms(
                    f"environment variable {prefix + f.name.upper()}={raw!r} is not valid"
                ) from None
        if overrides:
            logger.debug("config overrides from environment: %s", overrides)
        return cls(**overrides)


DEFAULT_CONFIG = PricingConfig()
