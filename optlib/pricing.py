"""
Monte Carlo pricing engine.

Prices options by computing the expected discounted payoff under the
risk-neutral measure using simulated GBM paths.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import CONFIDENCE_Z_95, DEFAULT_N_PATHS, DEFAULT_N_STEPS
from .errors import InvalidParameterError
from .gbm import SeedLike, fresh_seed_sequence, simulate_paths
from .params import PricingParameters
from .payoffs import Payoff, PayoffType

logger = logging.getLogger(__name__)


@dataclass
class PricingResult:
    """Result of Monte Carlo pricing."""

    price: float  # Estimated option price
    std_error: float  # Standard error of the estimate
    n_paths: int  # Number of simulation paths used
    confidence_interval_95: Tuple[float, float]  # 95% confidence interval

    def __str__(self) -> str:
        return (
            f"Price: {self.price:.6f} "
            f"(SE: {self.std_error:.6f}, "
            f"95% CI: [{self.confidence_interval_95[0]:.6f}, "
            f"{self.confidence_interval_95[1]:.6f}])"
        )


def _summarize(samples: np.ndarray, n_paths: int) -> PricingResult:
    price = np.mean(samples)
    std_error = np.std(samples, ddof=1) / np.sqrt(samples.size)
    return PricingResult(
        price=float(price),
        std_error=float(std_error),
        n_paths=n_paths,
        confidence_interval_95=(
            float(price - CONFIDENCE_Z_95 * std_error),
            float(price + CONFIDENCE_Z_95 * std_error),
        ),
    )


class MonteCarloEngine:
    """
    Monte Carlo engine for pricing options.

    Prices options by:
    1. Simulating price paths under the risk-neutral measure
    2. Evaluating the payoff for each path
    3. Discounting and averaging the payoffs

    The price estimate is: E[e^(-rT) * payoff(S)]

    Each call to ``price`` draws from the next stream of the engine's seed
    sequence, so an engine built with a fixed seed gives a reproducible
    sequence of estimates.
    """

    def __init__(
        self,
        params: PricingParameters,
        n_paths: int = DEFAULT_N_PATHS,
        n_steps: int = DEFAULT_N_STEPS,
        seed: SeedLike = None,
        workers: Optional[int] = None,
    ):
        """
        Initialize the Monte Carlo pricing engine.

        Args:
            params: Pricing parameters (spot, rate, volatility, maturity)
            n_paths: Number of Monte Carlo paths (default: 100,000)
            n_steps: Time steps for path-dependent options (default: 252)
            seed: Random seed for reproducibility
            workers: Threads used for path generation
        """
        self.params = params
        self.n_paths = n_paths
        self.n_steps = n_steps
        self.workers = workers
        # private copy: spawning must not advance a caller-owned sequence
        self._seed_seq = fresh_seed_sequence(seed)

    def _next_seed(self) -> np.random.SeedSequence:
        return self._seed_seq.spawn(1)[0]

    def price(
        self,
        payoff: Payoff,
        n_paths: Optional[int] = None,
        n_steps: Optional[int] = None,
    ) -> PricingResult:
        """
        Price an option using Monte Carlo simulation.

        Args:
            payoff: Payoff object defining the option
            n_paths: Number of paths (overrides default)
            n_steps: Number of time steps (overrides default, for path-dependent)

        Returns:
            PricingResult containing price, standard error and confidence interval

        Raises:
            InvalidParameterError: If fewer than 2 paths or no steps are requested
        """
        if n_paths is None:
            n_paths = self.n_paths
        if n_paths < 2:
            raise InvalidParameterError(
                "n_paths", n_paths, f"Pricing needs at least 2 paths, got {n_paths}"
            )
        if n_steps is None:
            n_steps = self.n_steps
        if n_steps < 1:
            raise InvalidParameterError(
                "n_steps", n_steps, f"Number of steps must be positive, got {n_steps}"
            )
        # Terminal payoffs only need S(T), which one exact step samples
        if payoff.payoff_type == PayoffType.TERMINAL:
            n_steps = 1

        logger.debug(
            "Pricing %s with %d paths x %d steps",
            type(payoff).__name__,
            n_paths,
            n_steps,
        )
        path_set = simulate_paths(
            self.params,
            n_steps,
            n_paths,
            seed=self._next_seed(),
            workers=self.workers,
        )

        discounted_payoffs = self.params.discount_factor * payoff.evaluate(path_set)
        return _summarize(discounted_payoffs, n_paths)

    def price_antithetic(
        self,
        payoff: Payoff,
        n_paths: Optional[int] = None,
    ) -> PricingResult:
        """
        Price a terminal payoff using antithetic variates.

        For each normal draw Z the terminal price is also evaluated at -Z,
        and the pair average is one sample of the estimator.

        Args:
            payoff: Terminal payoff object
            n_paths: Number of paths (overrides default, split into pairs)

        Returns:
            PricingResult with reduced variance estimate
        """
        if payoff.payoff_type != PayoffType.TERMINAL:
            raise InvalidParameterError(
                "payoff", payoff, "Antithetic pricing supports terminal payoffs only"
            )
        if n_paths is None:
            n_paths = self.n_paths
        half_paths = n_paths // 2
        if half_paths < 2:
            raise InvalidParameterError(
                "n_paths",
                n_paths,
                f"Antithetic pricing needs at least 4 paths, got {n_paths}",
            )

        p = self.params
        rng = np.random.default_rng(self._next_seed())
        z = rng.standard_normal(half_paths)

        drift_term = (p.rate - 0.5 * p.volatility**2) * p.maturity
        vol_term = p.volatility * np.sqrt(p.maturity)
        st_pos = p.spot * np.exp(drift_term + vol_term * z)
        st_neg = p.spot * np.exp(drift_term - vol_term * z)

        payoffs_pos = p.discount_factor * payoff.evaluate(st_pos)
        payoffs_neg = p.discount_factor * payoff.evaluate(st_neg)

        return _summarize(0.5 * (payoffs_pos + payoffs_neg), n_paths)
