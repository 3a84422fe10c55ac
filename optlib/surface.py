"""
Synthetic implied volatility surface.

No market data is involved: the surface is a smile centred on strike 100
plus a linear term-structure slope,

    σ(K, t) = 0.2 + 0.1·exp(-(K - 100)²/1000) + 0.05·t
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .errors import InvalidParameterError

DEFAULT_STRIKES = 80.0 + 5.0 * np.arange(20)  # 80, 85, ..., 175
DEFAULT_MATURITIES = 0.1 + 0.2 * np.arange(20)  # 0.1, 0.3, ..., 3.9
DEFAULT_STRIKES.setflags(write=False)
DEFAULT_MATURITIES.setflags(write=False)


@dataclass(frozen=True, eq=False)
class VolatilitySurfaceGrid:
    """
    Implied volatilities on a strike x maturity grid.

    Attributes:
        strikes: Increasing strikes, shape (n_strikes,)
        maturities: Increasing maturities in years, shape (n_maturities,)
        vols: Volatilities indexed [maturity_index, strike_index]
    """

    strikes: np.ndarray
    maturities: np.ndarray
    vols: np.ndarray

    def __post_init__(self):
        # owned, read-only copies; callers' arrays are never aliased
        strikes = np.array(self.strikes, dtype=float)
        maturities = np.array(self.maturities, dtype=float)
        vols = np.array(self.vols, dtype=float)
        if vols.shape != (maturities.size, strikes.size):
            raise InvalidParameterError(
                "vols",
                vols.shape,
                f"Surface shape {vols.shape} does not match "
                f"{maturities.size} maturities x {strikes.size} strikes",
            )
        for name, axis in (("strikes", strikes), ("maturities", maturities)):
            if np.any(np.diff(axis) <= 0):
                raise InvalidParameterError(
                    name, axis, f"{name} must be strictly increasing"
                )
        for name, array in (
            ("strikes", strikes),
            ("maturities", maturities),
            ("vols", vols),
        ):
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    @property
    def shape(self):
        return self.vols.shape

    def smile(self, maturity_index: int) -> np.ndarray:
        """Volatilities across strikes at one maturity."""
        return self.vols[maturity_index]

    def term_structure(self, strike_index: int) -> np.ndarray:
        """Volatilities across maturities at one strike."""
        return self.vols[:, strike_index]

    def vol_at(self, strike: float, maturity: float) -> float:
        """
        Bilinear interpolation of the surface, flat beyond the grid edges.
        """
        along_strike = np.array(
            [np.interp(strike, self.strikes, row) for row in self.vols]
        )
        return float(np.interp(maturity, self.maturities, along_strike))


def _mock_vol(strikes: np.ndarray, maturities: np.ndarray) -> np.ndarray:
    k = strikes[np.newaxis, :]
    t = maturities[:, np.newaxis]
    return 0.2 + 0.1 * np.exp(-((k - 100.0) ** 2) / 1000.0) + 0.05 * t


def implied_vol_surface_mock(
    strikes: Optional[Sequence[float]] = None,
    maturities: Optional[Sequence[float]] = None,
) -> VolatilitySurfaceGrid:
    """
    Build the synthetic surface on the given (or default 20 x 20) grid.

    Args:
        strikes: Strike grid (default 80 to 175 step 5)
        maturities: Maturity grid in years (default 0.1 to 3.9 step 0.2)

    Returns:
        VolatilitySurfaceGrid with vols of shape (len(maturities), len(strikes))
    """
    if strikes is None:
        strikes = DEFAULT_STRIKES
    if maturities is None:
        maturities = DEFAULT_MATURITIES
    strikes = np.asarray(strikes, dtype=float)
    maturities = np.asarray(maturities, dtype=float)
    return VolatilitySurfaceGrid(strikes, maturities, _mock_vol(strikes, maturities))
