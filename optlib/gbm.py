"""
Geometric Brownian Motion (GBM) path simulation under the risk-neutral measure.

The GBM model assumes the underlying follows:
    dS = rS dt + σS dW

Paths are generated on a uniform grid dt = T/steps with the exact
log-normal step:
    S_j = S_{j-1} · exp((r - σ²/2)dt + σ√dt · Z_j),   Z_j ~ N(0, 1)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Union

import numpy as np

from .config import PATH_CHUNK_SIZE
from .errors import InvalidParameterError
from .params import PricingParameters

logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.SeedSequence, None]


class PathSet:
    """
    Immutable collection of simulated price paths.

    Wraps an array of shape (n_paths, n_steps + 1); row i is path i and
    column 0 holds the initial spot.
    """

    def __init__(self, paths: np.ndarray, maturity: float):
        paths = np.asarray(paths, dtype=float).view()
        if paths.ndim != 2:
            raise InvalidParameterError(
                "paths",
                paths.shape,
                f"Paths must be a 2D array, got shape {paths.shape}",
            )
        paths.setflags(write=False)
        self._paths = paths
        self.maturity = maturity

    @property
    def values(self) -> np.ndarray:
        """Read-only (n_paths, n_steps + 1) array."""
        return self._paths

    @property
    def n_paths(self) -> int:
        return self._paths.shape[0]

    @property
    def n_steps(self) -> int:
        return self._paths.shape[1] - 1

    @property
    def terminal(self) -> np.ndarray:
        """Final price of every path."""
        return self._paths[:, -1]

    def time_grid(self) -> np.ndarray:
        """Time points of the path columns, shape (n_steps + 1,)."""
        return np.linspace(0.0, self.maturity, self.n_steps + 1)

    def __len__(self) -> int:
        return self.n_paths

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._paths)

    def __getitem__(self, index):
        return self._paths[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathSet):
            return NotImplemented
        return self.maturity == other.maturity and np.array_equal(
            self._paths, other._paths
        )

    def __repr__(self) -> str:
        return (
            f"PathSet(n_paths={self.n_paths}, n_steps={self.n_steps}, "
            f"maturity={self.maturity})"
        )


def _check_counts(steps: int, paths: int) -> None:
    if steps < 1:
        raise InvalidParameterError(
            "steps", steps, f"Number of steps must be positive, got {steps}"
        )
    if paths < 1:
        raise InvalidParameterError(
            "paths", paths, f"Number of paths must be positive, got {paths}"
        )


def fresh_seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    """
    Return a SeedSequence that is safe to spawn from.

    A SeedSequence passed in is rebuilt from its entropy and spawn key rather
    than used directly, since spawning advances ``n_children_spawned`` and
    would change the streams of the caller's next use.
    """
    if isinstance(seed, np.random.SeedSequence):
        return np.random.SeedSequence(
            seed.entropy, spawn_key=seed.spawn_key, pool_size=seed.pool_size
        )
    return np.random.SeedSequence(seed)


def _log_increments(
    params: PricingParameters, dt: float, z: np.ndarray
) -> np.ndarray:
    sigma = params.volatility
    return (params.rate - 0.5 * sigma**2) * dt + sigma * np.sqrt(dt) * z


def _paths_from_normals(
    params: PricingParameters, steps: int, z: np.ndarray
) -> np.ndarray:
    """Turn a (n, steps) block of normal draws into (n, steps + 1) price paths."""
    dt = params.maturity / steps
    log_paths = np.cumsum(_log_increments(params, dt, z), axis=1)
    paths = np.empty((z.shape[0], steps + 1))
    paths[:, 0] = params.spot
    paths[:, 1:] = params.spot * np.exp(log_paths)
    return paths


def _simulate_chunk(
    params: PricingParameters, steps: int, n_paths: int, seed: np.random.SeedSequence
) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return _paths_from_normals(params, steps, rng.standard_normal((n_paths, steps)))


def simulate_paths(
    params: PricingParameters,
    steps: int,
    paths: int,
    seed: SeedLike = None,
    workers: Optional[int] = None,
) -> PathSet:
    """
    Simulate independent GBM price paths.

    Paths are produced in chunks of ``PATH_CHUNK_SIZE``, each driven by its
    own stream spawned from ``SeedSequence(seed)``. The result depends only
    on the seed, not on how many workers generated the chunks.

    Args:
        params: Pricing parameters (spot, rate, volatility, maturity)
        steps: Number of time steps per path
        paths: Number of paths
        seed: Integer seed or SeedSequence (None draws fresh entropy)
        workers: Number of threads used to generate chunks (default: serial)

    Returns:
        PathSet with shape (paths, steps + 1)
    """
    _check_counts(steps, paths)

    seed_seq = fresh_seed_sequence(seed)
    sizes = [
        min(PATH_CHUNK_SIZE, paths - start)
        for start in range(0, paths, PATH_CHUNK_SIZE)
    ]
    chunk_seeds = seed_seq.spawn(len(sizes))

    logger.debug(
        "Simulating %d paths x %d steps in %d chunk(s), workers=%s, entropy=%s",
        paths, steps, len(sizes), workers, seed_seq.entropy,
    )

    if workers is not None and workers > 1 and len(sizes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            blocks: List[np.ndarray] = list(
                pool.map(
                    lambda job: _simulate_chunk(params, steps, job[0], job[1]),
                    zip(sizes, chunk_seeds),
                )
            )
    else:
        blocks = [
            _simulate_chunk(params, steps, size, chunk_seed)
            for size, chunk_seed in zip(sizes, chunk_seeds)
        ]

    return PathSet(np.vstack(blocks), params.maturity)


class GBMSimulator:
    """
    Stateful simulator holding a single random stream.

    Successive calls advance the same generator, so a simulator seeded once
    produces a reproducible sequence of draws. For one-shot reproducible
    path sets prefer ``simulate_paths``.
    """

    def __init__(self, params: PricingParameters, seed: SeedLike = None):
        """
        Initialize the GBM simulator.

        Args:
            params: Pricing parameters (spot, rate, volatility, maturity)
            seed: Random seed for reproducibility
        """
        self.params = params
        self.rng = np.random.default_rng(seed)

    def simulate_terminal(self, n_paths: int) -> np.ndarray:
        """
        Sample terminal prices S(T) directly with one exact log-normal step.

        Returns:
            Array of terminal prices with shape (n_paths,)
        """
        _check_counts(1, n_paths)
        z = self.rng.standard_normal(n_paths)
        log_returns = _log_increments(self.params, self.params.maturity, z)
        return self.params.spot * np.exp(log_returns)

    def simulate_paths(self, n_steps: int, n_paths: int) -> PathSet:
        """
        Simulate full price paths from time 0 to maturity.

        Returns:
            PathSet with shape (n_paths, n_steps + 1)
        """
        _check_counts(n_steps, n_paths)
        z = self.rng.standard_normal((n_paths, n_steps))
        paths = _paths_from_normals(self.params, n_steps, z)
        return PathSet(paths, self.params.maturity)

    def get_time_grid(self, n_steps: int) -> np.ndarray:
        """Time points of an n_steps simulation, shape (n_steps + 1,)."""
        return np.linspace(0.0, self.params.maturity, n_steps + 1)
