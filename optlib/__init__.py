"""
Option Pricing Library

Black-Scholes pricing and Greeks, a Cox-Ross-Rubinstein binomial lattice
with early exercise, and Monte Carlo simulation of Geometric Brownian
Motion paths for vanilla and Asian payoffs.
"""

from .errors import InvalidParameterError
from .params import OptionType, PricingParameters
from .black_scholes import black_scholes_price, price_black_scholes
from .sensitivities import Greeks, greeks
from .binomial import Lattice, LatticeNode, binomial_price, build_binomial_lattice
from .gbm import GBMSimulator, PathSet, simulate_paths
from .payoffs import (
    AsianPayoff,
    Payoff,
    PayoffType,
    VanillaPayoff,
    asian_payoffs,
    convergence_series,
    terminal_payoffs,
)
from .pricing import MonteCarloEngine, PricingResult
from .surface import VolatilitySurfaceGrid, implied_vol_surface_mock

__all__ = [
    "InvalidParameterError",
    "OptionType",
    "PricingParameters",
    "black_scholes_price",
    "price_black_scholes",
    "Greeks",
    "greeks",
    "Lattice",
    "LatticeNode",
    "binomial_price",
    "build_binomial_lattice",
    "GBMSimulator",
    "PathSet",
    "simulate_paths",
    "Payoff",
    "PayoffType",
    "VanillaPayoff",
    "AsianPayoff",
    "terminal_payoffs",
    "asian_payoffs",
    "convergence_series",
    "MonteCarloEngine",
    "PricingResult",
    "VolatilitySurfaceGrid",
    "implied_vol_surface_mock",
]
