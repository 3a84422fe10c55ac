"""Unit tests for the GBM simulation engine."""

import numpy as np
import pytest

from optlib import (
    GBMSimulator,
    InvalidParameterError,
    PathSet,
    PricingParameters,
    simulate_paths,
)
from optlib.config import PATH_CHUNK_SIZE


@pytest.fixture
def params():
    return PricingParameters(
        spot=100, strike=100, maturity=1.0, rate=0.05, volatility=0.2
    )


class TestSimulatePaths:
    """Tests for the seeded, chunked path generator."""

    def test_shape(self, params):
        path_set = simulate_paths(params, steps=252, paths=100, seed=42)
        assert isinstance(path_set, PathSet)
        assert path_set.values.shape == (100, 253)  # paths x (steps + 1)
        assert len(path_set) == 100
        assert path_set.n_steps == 252

    def test_initial_price(self, params):
        path_set = simulate_paths(params, steps=50, paths=100, seed=42)
        np.testing.assert_array_equal(path_set.values[:, 0], params.spot)

    def test_positive_prices(self, params):
        path_set = simulate_paths(params, steps=252, paths=1000, seed=42)
        assert np.all(path_set.values > 0)

    def test_reproducibility_with_seed(self, params):
        first = simulate_paths(params, steps=20, paths=500, seed=123)
        second = simulate_paths(params, steps=20, paths=500, seed=123)
        np.testing.assert_array_equal(first.values, second.values)
        assert first == second

    def test_different_seeds_different_results(self, params):
        first = simulate_paths(params, steps=20, paths=100, seed=123)
        second = simulate_paths(params, steps=20, paths=100, seed=456)
        assert not np.allclose(first.values, second.values)

    def test_seed_sequence_accepted(self, params):
        seed_seq = np.random.SeedSequence(7)
        first = simulate_paths(params, steps=5, paths=10, seed=seed_seq)
        second = simulate_paths(params, steps=5, paths=10, seed=7)
        np.testing.assert_array_equal(first.values, second.values)

    def test_same_seed_sequence_object_reused(self, params):
        """Reusing one SeedSequence gives the same paths and leaves it unspawned."""
        seed_seq = np.random.SeedSequence(7)
        first = simulate_paths(params, steps=5, paths=10, seed=seed_seq)
        second = simulate_paths(params, steps=5, paths=10, seed=seed_seq)
        assert first == second
        assert seed_seq.n_children_spawned == 0

    def test_spawned_child_seed_sequence_reused(self, params):
        child = np.random.SeedSequence(7).spawn(2)[1]
        first = simulate_paths(params, steps=3, paths=2 * PATH_CHUNK_SIZE, seed=child)
        second = simulate_paths(params, steps=3, paths=2 * PATH_CHUNK_SIZE, seed=child)
        np.testing.assert_array_equal(first.values, second.values)
        assert child.n_children_spawned == 0

    def test_workers_do_not_change_result(self, params):
        paths = 2 * PATH_CHUNK_SIZE + 17
        serial = simulate_paths(params, steps=4, paths=paths, seed=2024)
        threaded = simulate_paths(params, steps=4, paths=paths, seed=2024, workers=4)
        assert threaded.n_paths == paths
        np.testing.assert_array_equal(serial.values, threaded.values)

    def test_chunks_are_independent(self, params):
        path_set = simulate_paths(params, steps=1, paths=2 * PATH_CHUNK_SIZE, seed=1)
        first = path_set.terminal[:PATH_CHUNK_SIZE]
        second = path_set.terminal[PATH_CHUNK_SIZE:]
        assert not np.array_equal(first, second)

    def test_terminal_mean_risk_neutral(self, params):
        """Under risk-neutral measure, E[S(T)] = S(0) * exp(r*T)."""
        path_set = simulate_paths(params, steps=10, paths=100_000, seed=42)
        expected_mean = params.spot * np.exp(params.rate * params.maturity)
        actual_mean = np.mean(path_set.terminal)
        # Allow 1% relative error due to Monte Carlo variance
        assert abs(actual_mean - expected_mean) / expected_mean < 0.01

    def test_log_return_variance(self, params):
        path_set = simulate_paths(params, steps=10, paths=50_000, seed=3)
        log_returns = np.log(path_set.terminal / params.spot)
        expected = params.volatility**2 * params.maturity
        assert np.var(log_returns) == pytest.approx(expected, rel=0.03)

    def test_time_grid(self, params):
        path_set = simulate_paths(params, steps=12, paths=3, seed=0)
        time_grid = path_set.time_grid()
        assert len(time_grid) == 13  # steps + 1
        assert time_grid[0] == 0.0
        assert time_grid[-1] == 1.0
        np.testing.assert_array_almost_equal(time_grid, np.linspace(0, 1, 13))

    def test_read_only(self, params):
        path_set = simulate_paths(params, steps=3, paths=3, seed=0)
        with pytest.raises(ValueError):
            path_set.values[0, 0] = 1.0

    def test_iterates_paths(self, params):
        path_set = simulate_paths(params, steps=3, paths=4, seed=0)
        rows = list(path_set)
        assert len(rows) == 4
        np.testing.assert_array_equal(rows[2], path_set[2])

    @pytest.mark.parametrize("steps, paths", [(0, 10), (10, 0), (-1, 10)])
    def test_non_positive_counts_raise(self, params, steps, paths):
        with pytest.raises(InvalidParameterError, match="must be positive"):
            simulate_paths(params, steps=steps, paths=paths, seed=0)


class TestGBMSimulator:
    """Tests for the stateful GBMSimulator."""

    @pytest.fixture
    def simulator(self, params):
        return GBMSimulator(params, seed=42)

    def test_reproducibility_with_seed(self, params):
        sim1 = GBMSimulator(params, seed=123)
        sim2 = GBMSimulator(params, seed=123)

        result1 = sim1.simulate_terminal(n_paths=100)
        result2 = sim2.simulate_terminal(n_paths=100)

        np.testing.assert_array_equal(result1, result2)

    def test_stream_advances(self, simulator):
        first = simulator.simulate_terminal(n_paths=100)
        second = simulator.simulate_terminal(n_paths=100)
        assert not np.allclose(first, second)

    def test_simulate_terminal_shape(self, simulator):
        assert simulator.simulate_terminal(n_paths=1000).shape == (1000,)

    def test_simulate_terminal_mean(self, params):
        simulator = GBMSimulator(params, seed=42)
        result = simulator.simulate_terminal(n_paths=100000)
        expected_mean = params.spot * np.exp(params.rate * params.maturity)
        assert abs(np.mean(result) - expected_mean) / expected_mean < 0.01

    def test_simulate_paths_shape(self, simulator):
        path_set = simulator.simulate_paths(n_steps=252, n_paths=100)
        assert path_set.values.shape == (100, 253)

    def test_terminal_matches_one_step_paths(self, params):
        """With the same seed and 1 step, terminal sampling and paths agree."""
        sim1 = GBMSimulator(params, seed=42)
        sim2 = GBMSimulator(params, seed=42)

        terminal_direct = sim1.simulate_terminal(n_paths=10000)
        terminal_from_path = sim2.simulate_paths(n_steps=1, n_paths=10000).terminal

        np.testing.assert_array_almost_equal(terminal_direct, terminal_from_path)

    def test_get_time_grid(self, simulator):
        time_grid = simulator.get_time_grid(n_steps=12)
        np.testing.assert_array_almost_equal(time_grid, np.linspace(0, 1, 13))

    def test_longer_maturity_higher_variance(self, params):
        """Longer maturity should result in higher variance of terminal prices."""
        short_sim = GBMSimulator(params.replace(maturity=0.25), seed=42)
        long_sim = GBMSimulator(params.replace(maturity=1.0), seed=42)
        short = short_sim.simulate_terminal(10000)
        long = long_sim.simulate_terminal(10000)
        assert np.var(long) > np.var(short)
