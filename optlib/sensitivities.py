"""
Analytic Black-Scholes Greeks.

Outputs are scaled to practical units rather than raw derivatives:
vega and rho per one percentage point move, theta per calendar day.
"""

import math
from dataclasses import asdict, dataclass

from . import normal
from .black_scholes import d1_d2
from .config import DAYS_PER_YEAR, PERCENT
from .params import OptionType, PricingParameters


@dataclass(frozen=True)
class Greeks:
    """Sensitivities of an option price."""

    delta: float
    gamma: float
    vega: float  # per 1% volatility move
    theta: float  # per calendar day
    rho: float  # per 1% rate move

    def as_dict(self) -> dict:
        return asdict(self)


def _terms(params: PricingParameters):
    d1, d2 = d1_d2(
        params.spot, params.strike, params.maturity, params.rate, params.volatility
    )
    return d1, d2, normal.pdf(d1)


def delta(params: PricingParameters) -> float:
    d1, _, _ = _terms(params)
    if params.option_type is OptionType.CALL:
        return normal.cdf(d1)
    return normal.cdf(d1) - 1.0


def gamma(params: PricingParameters) -> float:
    _, _, pdf_d1 = _terms(params)
    return pdf_d1 / (params.spot * params.volatility * math.sqrt(params.maturity))


def vega(params: PricingParameters) -> float:
    _, _, pdf_d1 = _terms(params)
    return params.spot * pdf_d1 * math.sqrt(params.maturity) / PERCENT


def theta(params: PricingParameters) -> float:
    _, d2, pdf_d1 = _terms(params)
    s, k, t, r = params.spot, params.strike, params.maturity, params.rate
    decay = -s * pdf_d1 * params.volatility / (2.0 * math.sqrt(t))
    if params.option_type is OptionType.CALL:
        carry = -r * k * math.exp(-r * t) * normal.cdf(d2)
    else:
        carry = r * k * math.exp(-r * t) * normal.cdf(-d2)
    return (decay + carry) / DAYS_PER_YEAR


def rho(params: PricingParameters) -> float:
    _, d2, _ = _terms(params)
    k, t = params.strike, params.maturity
    if params.option_type is OptionType.CALL:
        return k * t * math.exp(-params.rate * t) * normal.cdf(d2) / PERCENT
    return -k * t * math.exp(-params.rate * t) * normal.cdf(-d2) / PERCENT


def greeks(params: PricingParameters) -> Greeks:
    """
    All five Greeks for a parameter set.

    Args:
        params: Validated pricing parameters

    Returns:
        Greeks with delta, gamma, vega (per 1%), theta (per day), rho (per 1%)
    """
    return Greeks(
        delta=delta(params),
        gamma=gamma(params),
        vega=vega(params),
        theta=theta(params),
        rho=rho(params),
    )
