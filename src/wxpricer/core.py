from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Optional

from .errors import InvalidContractTerms

DAYS_PER_YEAR = 365.0


class OptionKind(str, Enum):
    """Payoff direction of a weather option."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: "OptionKind | str") -> "OptionKind":
        """Accept an ``OptionKind`` or a case-insensitive name / one-letter alias."""
        if isinstance(value, cls):
            return value
        s = str(value).strip().lower()
        if s in {"call", "c"}:
            return cls.CALL
        if s in {"put", "p"}:
            return cls.PUT
        raise InvalidContractTerms(f"kind must be 'call' or 'put', got {value!r}")


CALL = OptionKind.CALL
PUT = OptionKind.PUT


def _require_positive(name: str, value: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidContractTerms(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v) or v <= 0:
        raise InvalidContractTerms(f"{name} must be positive and finite, got {value!r}")
    return v


# ---------------------------------------------------------------------------
# Contract terms: what the caller wants priced
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ContractTerms:
    """Terms of a European weather-index option.

    Parameters
    ----------
    kind : OptionKind
        ``CALL`` or ``PUT`` (strings are coerced).
    strike : float
        Index level at which the payoff starts (e.g. mm of rainfall).
    expiry_days : int
        Calendar days to expiry.
    underlying : float
        Current index level.
    volatility : float
        Annualized volatility of the index.
    risk_free_rate : float, optional
        Continuously-compounded rate used for drift and discounting.  ``None``
        defers to the pricing configuration.
    """
    kind: OptionKind
    strike: float
    expiry_days: int
    underlying: float
    volatility: float
    risk_free_rate: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", OptionKind.parse(self.kind))
        object.__setattr__(self, "strike", _require_positive("strike", self.strike))
        object.__setattr__(self, "underlying", _require_positive("underlying", self.underlying))
        object.__setattr__(self, "volatility", _require_positive("volatility", self.volatility))

        days = _require_positive("expiry_days", self.expiry_days)
        if days != int(days):
            raise InvalidContractTerms(
                f"expiry_days must be a whole number of days, got {self.expiry_days!r}"
            )
        object.__setattr__(self, "expiry_days", int(days))

        if self.risk_free_rate is None:
            return
        try:
            rate = float(self.risk_free_rate)
        except (TypeError, ValueError):
            raise InvalidContractTerms(
                f"risk_free_rate must be a number, got {self.risk_free_rate!r}"
            ) from None
        if not math.isfinite(rate):
            raise InvalidContractTerms(f"risk_free_rate must be finite, got {rate!r}")
        object.__setattr__(self, "risk_free_rate", rate)

    @property
    def T(self) -> float:
        """Time to expiry in years."""
        return self.expiry_days / DAYS_PER_YEAR

    def with_volatility(self, volatility: float) -> "ContractTerms":
        return replace(self, volatility=volatility)

    def with_rate(self, risk_free_rate: float) -> "ContractTerms":
        return replace(self, risk_free_rate=risk_free_rate)

    def with_default_rate(self, risk_free_rate: float) -> "ContractTerms":
        """Fill in ``risk_free_rate`` when the terms do not carry one."""
        if self.risk_free_rate is not None:
            return self
        return replace(self, risk_free_rate=risk_free_rate)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Greeks:
    """Finite-difference sensitivities, each rounded to 4 decimal places.

    ``theta`` is per calendar day; ``vega`` is per unit of annualized vol.
    """
    delta: float
    gamma: float
    theta: float
    vega: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PricedOption:
    """Outcome of a single pricing call."""
    premium: float
    greeks: Greeks
    fair_value: float
    implied_volatility: float
    standard_error: float = 0.0
    simulations: int = 0

    def as_dict(self) -> dict:
        d = asdict(self)
        d["greeks"] = self.greeks.as_dict()
        return d


@dataclass(frozen=True)
class ProfitLoss:
    """Payoff extremes for the option buyer.  ``max_profit`` may be ``inf``."""
    max_profit: float
    max_loss: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)
