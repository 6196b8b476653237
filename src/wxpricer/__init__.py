# wxpricer: weather option pricing & risk engine
# Public API

# Data model
from .core import OptionKind, CALL, PUT, ContractTerms, Greeks, PricedOption, ProfitLoss

# Configuration & errors
from .config import PricingConfig, DEFAULT_CONFIG
from .errors import (
    PricingError, InvalidContractTerms, InsufficientHistoricalData,
    DomainError, PricingTimeout,
)

# Pricing
from .pricing import price_option, price, try_price_option
from .monte_carlo import premium_mc
from .closed_form import approximate, erf, norm_cdf, intrinsic_value
from .greeks import greeks, greeks_for

# Risk statistics
from .risk import (
    implied_volatility, break_even, max_profit_loss, probability_of_profit,
    clamp_volatility,
)

# Paths
from .processes import gbm_paths, gbm_terminal, box_muller

# Model validation
from .validation import reference_price, cross_validate, convergence_analysis, stress_test

__all__ = [
    # Data model
    "OptionKind", "CALL", "PUT", "ContractTerms", "Greeks", "PricedOption", "ProfitLoss",
    # Configuration & errors
    "PricingConfig", "DEFAULT_CONFIG",
    "PricingError", "InvalidContractTerms", "InsufficientHistoricalData",
    "DomainError", "PricingTimeout",
    # Pricing
    "price_option", "price", "try_price_option", "premium_mc",
    "approximate", "erf", "norm_cdf", "intrinsic_value",
    "greeks", "greeks_for",
    # Risk
    "implied_volatility", "break_even", "max_profit_loss", "probability_of_profit",
    "clamp_volatility",
    # Paths
    "gbm_paths", "gbm_terminal", "box_muller",
    # Validation
    "reference_price", "cross_validate", "convergence_analysis", "stress_test",
]

__version__ = "0.1.0"
