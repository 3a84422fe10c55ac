"""
Closed-form Black-Scholes pricing of European options.

    d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)
    d2 = d1 - σ√T

    Call = S·Φ(d1) - K·e^(-rT)·Φ(d2)
    Put  = K·e^(-rT)·Φ(-d2) - S·Φ(-d1)

The raw float functions perform no validation: T = 0 or σ = 0 yields
NaN or inf rather than an exception. Use ``price_black_scholes`` with a
validated ``PricingParameters`` to stay clear of those inputs.

The numeric arguments broadcast: scalars give a float, arrays (for example
a strike sweep) give an ndarray.
"""

from typing import Tuple, Union

import numpy as np

from . import normal
from .normal import _as_output
from .params import OptionType, PricingParameters

ArrayLike = Union[float, np.ndarray]


def d1_d2(
    s: ArrayLike, k: ArrayLike, t: ArrayLike, r: ArrayLike, sigma: ArrayLike
) -> Tuple[ArrayLike, ArrayLike]:
    """Black-Scholes d1 and d2 terms."""
    s, k, t, r, sigma = (np.asarray(v, dtype=float) for v in (s, k, t, r, sigma))
    with np.errstate(divide="ignore", invalid="ignore"):
        vol_sqrt_t = sigma * np.sqrt(t)
        d1 = (np.log(s / k) + (r + 0.5 * sigma**2) * t) / vol_sqrt_t
        d2 = d1 - vol_sqrt_t
    return _as_output(d1), _as_output(d2)


def black_scholes_price(
    s: ArrayLike,
    k: ArrayLike,
    t: ArrayLike,
    r: ArrayLike,
    sigma: ArrayLike,
    option_type: Union[OptionType, str] = OptionType.CALL,
) -> ArrayLike:
    """
    Black-Scholes price of a European call or put.

    Args:
        s: Spot price
        k: Strike price
        t: Time to maturity (in years)
        r: Risk-free rate
        sigma: Volatility

    Returns:
        Option price (NaN/inf for degenerate inputs), float or ndarray
    """
    option_type = OptionType.coerce(option_type)
    s, k, t, r = (np.asarray(v, dtype=float) for v in (s, k, t, r))
    d1, d2 = d1_d2(s, k, t, r, sigma)
    with np.errstate(invalid="ignore", over="ignore"):
        discounted_strike = k * np.exp(-r * t)
        if option_type is OptionType.CALL:
            price = s * normal.cdf(d1) - discounted_strike * normal.cdf(d2)
        else:
            price = discounted_strike * normal.cdf(-d2) - s * normal.cdf(-d1)
    return _as_output(price)


def price_black_scholes(params: PricingParameters) -> float:
    """Black-Scholes price for a parameter set."""
    return black_scholes_price(
        params.spot,
        params.strike,
        params.maturity,
        params.rate,
        params.volatility,
        params.option_type,
    )
