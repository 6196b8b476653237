# errors.py
# Exception hierarchy for the pricing engine.
# Every error is local to a single pricing call; callers treat any
# PricingError as "price unavailable" for that request.

from __future__ import annotations

__all__ = [
    "PricingError",
    "InvalidContractTerms",
    "InsufficientHistoricalData",
    "DomainError",
    "PricingTimeout",
]


class PricingError(ValueError):
    """Base class for all engine errors."""


class InvalidContractTerms(PricingError):
    """Contract terms or engine settings outside their valid domain."""


class InsufficientHistoricalData(PricingError):
    """Too few usable observations (raised only in ``strict`` mode)."""

    def __init__(self, needed: int, got: int, what: str = "observations"):
        self.needed = needed
        self.got = got
        super().__init__(f"need at least {needed} {what}, got {got}")


class DomainError(PricingError, ArithmeticError):
    """A numerical routine was evaluated outside its domain or produced NaN/inf."""


class PricingTimeout(PricingError, TimeoutError):
    """The Monte Carlo simulation exceeded its deadline."""
