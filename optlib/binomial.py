"""
Cox-Ross-Rubinstein binomial lattice with optional early exercise.

    dt = T/N,   u = e^(σ√dt),   d = 1/u
    p  = (e^(r·dt) - d) / (u - d)          risk-neutral up-probability

Node i of level n (i up-moves) carries S·u^i·d^(n-i). Terminal values are
intrinsic; earlier levels take the discounted expectation of their two
successors, replaced by intrinsic value when an American holder would
exercise (strictly better than continuing).

``build_binomial_lattice`` keeps every level for inspection and display.
``binomial_price`` runs the same induction holding a single level and
returns only the root value.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Tuple

import numpy as np

from .errors import InvalidParameterError
from .params import PricingParameters
from .payoffs import intrinsic_value

logger = logging.getLogger(__name__)


class LatticeNode(NamedTuple):
    """A single node of the lattice."""

    underlying_price: float
    option_value: float
    exercised_early: bool


@dataclass(frozen=True)
class _TreeFactors:
    dt: float
    u: float
    d: float
    p: float
    discount: float


def _tree_factors(params: PricingParameters, steps: int) -> _TreeFactors:
    if steps < 1:
        raise InvalidParameterError(
            "steps", steps, f"Number of steps must be positive, got {steps}"
        )

    dt = params.maturity / steps
    u = math.exp(params.volatility * math.sqrt(dt))
    d = 1.0 / u
    p = (math.exp(params.rate * dt) - d) / (u - d)
    if not 0.0 <= p <= 1.0:
        logger.warning(
            "Risk-neutral probability %.6f outside [0, 1] for %d steps; "
            "increase steps so that σ√dt exceeds |r|·dt",
            p, steps,
        )
    return _TreeFactors(dt=dt, u=u, d=d, p=p, discount=math.exp(-params.rate * dt))


def _level_prices(spot: float, factors: _TreeFactors, n: int) -> np.ndarray:
    i = np.arange(n + 1)
    return spot * factors.u**i * factors.d ** (n - i)


def _step_back(
    values: np.ndarray,
    prices: np.ndarray,
    factors: _TreeFactors,
    params: PricingParameters,
    american: bool,
) -> Tuple[np.ndarray, np.ndarray]:
    """Roll option values one level back; returns (values, exercised mask)."""
    expected = factors.p * values[1:] + (1.0 - factors.p) * values[:-1]
    continuation = factors.discount * expected
    if not american:
        return continuation, np.zeros(continuation.shape, dtype=bool)
    intrinsic = intrinsic_value(prices, params.strike, params.option_type)
    exercised = intrinsic > continuation
    return np.where(exercised, intrinsic, continuation), exercised


class Lattice:
    """
    Fully retained binomial lattice.

    ``lattice[n][i]`` is the node at time step n after i up-moves; level n
    holds exactly n + 1 nodes and level 0 holds the root whose option value
    is the price.
    """

    def __init__(self, levels: List[Tuple[LatticeNode, ...]], american: bool):
        self._levels = levels
        self.american = american

    @property
    def steps(self) -> int:
        return len(self._levels) - 1

    @property
    def price(self) -> float:
        """Option value at the root node."""
        return self._levels[0][0].option_value

    def __len__(self) -> int:
        return len(self._levels)

    def __getitem__(self, n: int) -> Tuple[LatticeNode, ...]:
        return self._levels[n]

    def __iter__(self) -> Iterator[Tuple[LatticeNode, ...]]:
        return iter(self._levels)

    def underlying_prices(self, n: int) -> np.ndarray:
        return np.array([node.underlying_price for node in self._levels[n]])

    def option_values(self, n: int) -> np.ndarray:
        return np.array([node.option_value for node in self._levels[n]])

    def early_exercise_nodes(self) -> List[Tuple[int, int]]:
        """(level, index) of every node where early exercise is optimal."""
        return [
            (n, i)
            for n, level in enumerate(self._levels)
            for i, node in enumerate(level)
            if node.exercised_early
        ]

    def __repr__(self) -> str:
        return (
            f"Lattice(steps={self.steps}, american={self.american}, "
            f"price={self.price:.6f})"
        )


def _make_level(
    prices: np.ndarray, values: np.ndarray, exercised: np.ndarray
) -> Tuple[LatticeNode, ...]:
    return tuple(
        LatticeNode(float(s), float(v), bool(e))
        for s, v, e in zip(prices, values, exercised)
    )


def build_binomial_lattice(
    params: PricingParameters, steps: int, american: bool = False
) -> Lattice:
    """
    Build the full CRR lattice by backward induction.

    Args:
        params: Pricing parameters
        steps: Number of time steps N (N + 1 levels)
        american: Allow early exercise

    Returns:
        Lattice with every level retained; ``lattice.price`` is the value
    """
    factors = _tree_factors(params, steps)
    logger.debug(
        "Building %s lattice: steps=%d u=%.6f d=%.6f p=%.6f",
        "American" if american else "European", steps, factors.u, factors.d, factors.p,
    )

    levels: List[Tuple[LatticeNode, ...]] = [()] * (steps + 1)

    prices = _level_prices(params.spot, factors, steps)
    values = intrinsic_value(prices, params.strike, params.option_type)
    levels[steps] = _make_level(prices, values, np.zeros(steps + 1, dtype=bool))

    for n in range(steps - 1, -1, -1):
        prices = _level_prices(params.spot, factors, n)
        values, exercised = _step_back(values, prices, factors, params, american)
        levels[n] = _make_level(prices, values, exercised)

    return Lattice(levels, american)


def binomial_price(
    params: PricingParameters, steps: int, american: bool = False
) -> float:
    """CRR price keeping only the current level during backward induction."""
    factors = _tree_factors(params, steps)
    prices = _level_prices(params.spot, factors, steps)
    values = intrinsic_value(prices, params.strike, params.option_type)
    for n in range(steps - 1, -1, -1):
        prices = _level_prices(params.spot, factors, n) if american else None
        values, _ = _step_back(values, prices, factors, params, american)
    return float(values[0])
