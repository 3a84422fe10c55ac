"""
Payoff functions for vanilla and path-dependent options.

Two layers are provided:

* plain evaluators over a PathSet (``terminal_payoffs``, ``asian_payoffs``,
  ``convergence_series``) that return one value per path;
* Payoff objects consumed by ``MonteCarloEngine``. To add an exotic payoff,
  subclass Payoff and implement evaluate().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from .errors import InvalidParameterError
from .gbm import PathSet
from .params import OptionType

OptionTypeLike = Union[OptionType, str]


class PayoffType(Enum):
    """Type of payoff based on path dependency."""

    TERMINAL = "terminal"  # Payoff depends only on S(T)
    PATH_DEPENDENT = "path_dependent"  # Payoff depends on full path


def intrinsic_value(prices, strike: float, option_type: OptionTypeLike) -> np.ndarray:
    """max(S - K, 0) for calls, max(K - S, 0) for puts."""
    prices = np.asarray(prices, dtype=float)
    if OptionType.coerce(option_type) is OptionType.CALL:
        return np.maximum(prices - strike, 0.0)
    return np.maximum(strike - prices, 0.0)


def _as_array(paths: Union[PathSet, np.ndarray]) -> np.ndarray:
    if isinstance(paths, PathSet):
        return paths.values
    return np.asarray(paths, dtype=float)


def terminal_payoffs(
    path_set: PathSet, strike: float, option_type: OptionTypeLike
) -> np.ndarray:
    """Undiscounted vanilla payoff on the final price of every path."""
    return intrinsic_value(path_set.terminal, strike, option_type)


def asian_payoffs(
    path_set: PathSet,
    strike: float,
    r: float,
    t: float,
    option_type: OptionTypeLike,
) -> np.ndarray:
    """
    Discounted arithmetic average-price payoff of every path.

    The average runs over all steps + 1 points, initial spot included.
    """
    averages = np.mean(path_set.values, axis=1)
    return intrinsic_value(averages, strike, option_type) * np.exp(-r * t)


def convergence_series(terminal: np.ndarray, r: float, t: float) -> np.ndarray:
    """
    Running Monte Carlo estimate over the first i paths, i = 1..n.

    Args:
        terminal: Undiscounted terminal payoffs in path order
        r: Risk-free rate
        t: Time to maturity

    Returns:
        Array whose element i-1 is the mean of the first i discounted payoffs
    """
    discounted = np.asarray(terminal, dtype=float) * np.exp(-r * t)
    return np.cumsum(discounted) / np.arange(1, discounted.size + 1)


class Payoff(ABC):
    """
    Abstract base class for option payoffs.

    Attributes:
        payoff_type: Indicates whether payoff is terminal or path-dependent
    """

    payoff_type: PayoffType = PayoffType.TERMINAL

    @abstractmethod
    def evaluate(self, paths: Union[PathSet, np.ndarray]) -> np.ndarray:
        """
        Evaluate the payoff for given price paths.

        Args:
            paths: PathSet, or an array of shape (n_paths,) of terminal prices
                   or (n_paths, n_steps + 1) of full paths

        Returns:
            Array of undiscounted payoff values with shape (n_paths,)
        """


def _check_strike(strike: float) -> None:
    if strike < 0:
        raise InvalidParameterError("strike", strike, "Strike price cannot be negative")


@dataclass
class VanillaPayoff(Payoff):
    """
    European payoff on the terminal price: max(S(T) - K, 0) or max(K - S(T), 0).

    Attributes:
        strike: Strike price K
        option_type: Call or put
    """

    strike: float
    option_type: OptionType = OptionType.CALL
    payoff_type: PayoffType = PayoffType.TERMINAL

    def __post_init__(self):
        _check_strike(self.strike)
        self.option_type = OptionType.coerce(self.option_type)

    def evaluate(self, paths: Union[PathSet, np.ndarray]) -> np.ndarray:
        values = _as_array(paths)
        # Handle both terminal prices (1D) and full paths (2D)
        terminal_prices = values if values.ndim == 1 else values[:, -1]
        return intrinsic_value(terminal_prices, self.strike, self.option_type)


@dataclass
class AsianPayoff(Payoff):
    """
    Arithmetic average-price payoff: max(mean(S) - K, 0) or max(K - mean(S), 0).

    Attributes:
        strike: Strike price K
        option_type: Call or put
    """

    strike: float
    option_type: OptionType = OptionType.CALL
    payoff_type: PayoffType = PayoffType.PATH_DEPENDENT

    def __post_init__(self):
        _check_strike(self.strike)
        self.option_type = OptionType.coerce(self.option_type)

    def evaluate(self, paths: Union[PathSet, np.ndarray]) -> np.ndarray:
        values = _as_array(paths)
        if values.ndim != 2:
            raise InvalidParameterError(
                "paths", values.shape, "Asian payoff needs full paths (2D array)"
            )
        return intrinsic_value(np.mean(values, axis=1), self.strike, self.option_type)
