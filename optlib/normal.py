"""
Standard normal distribution primitives.

The CDF is built on the Abramowitz-Stegun 7.1.26 rational approximation of
the error function (maximum absolute error about 1.5e-7). Pass
``exact=True`` to ``cdf`` for scipy's double-precision implementation.

All functions accept scalars or numpy arrays; a scalar input returns a float.
"""

import numpy as np
from scipy.stats import norm

_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

_INV_SQRT_2PI = 1.0 / np.sqrt(2.0 * np.pi)


def _as_output(values: np.ndarray):
    return float(values) if np.ndim(values) == 0 else values


def erf(x):
    """Abramowitz-Stegun approximation of the error function (odd in x)."""
    x = np.asarray(x, dtype=float)
    sign = np.sign(x)
    ax = np.abs(x)
    t = 1.0 / (1.0 + _P * ax)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    y = 1.0 - poly * np.exp(-ax * ax)
    return _as_output(sign * y)


def pdf(x):
    """Standard normal density exp(-x²/2) / √(2π)."""
    x = np.asarray(x, dtype=float)
    return _as_output(_INV_SQRT_2PI * np.exp(-0.5 * x * x))


def cdf(x, exact: bool = False):
    """
    Standard normal cumulative distribution Φ(x) = (1 + erf(x/√2)) / 2.

    Args:
        x: Scalar or array
        exact: Use scipy.stats.norm instead of the rational erf approximation

    Returns:
        Φ(x), same shape as x
    """
    x = np.asarray(x, dtype=float)
    if exact:
        return _as_output(norm.cdf(x))
    return _as_output(0.5 * (1.0 + np.asarray(erf(x / np.sqrt(2.0)))))
