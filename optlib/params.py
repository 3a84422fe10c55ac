"""
Option contract and market parameters shared by every pricer.
"""

import math
from dataclasses import dataclass, replace as _replace
from enum import Enum
from typing import Union

from .errors import InvalidParameterError


class OptionType(Enum):
    """Exercise right of a vanilla option."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def coerce(cls, value: Union["OptionType", str]) -> "OptionType":
        """Accept an OptionType or its string value ('call' / 'put')."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(
                "option_type",
                value,
                f"Option type must be 'call' or 'put', got {value!r}",
            ) from None


def _require_positive(name: str, label: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(
            name, value, f"{label} must be positive, got {value}"
        )


@dataclass(frozen=True)
class PricingParameters:
    """
    Inputs of a single pricing call.

    Attributes:
        spot: Current underlying price S
        strike: Strike price K
        maturity: Time to maturity T (in years)
        rate: Continuously compounded risk-free rate r
        volatility: Annualized volatility sigma
        option_type: Call or put (strings are coerced)
    """

    spot: float
    strike: float
    maturity: float
    rate: float
    volatility: float
    option_type: OptionType = OptionType.CALL

    def __post_init__(self):
        object.__setattr__(self, "option_type", OptionType.coerce(self.option_type))
        _require_positive("spot", "Spot price", self.spot)
        _require_positive("strike", "Strike price", self.strike)
        _require_positive("maturity", "Maturity", self.maturity)
        _require_positive("volatility", "Volatility", self.volatility)
        if not math.isfinite(self.rate):
            raise InvalidParameterError(
                "rate", self.rate, f"Risk-free rate must be finite, got {self.rate}"
            )

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL

    @property
    def discount_factor(self) -> float:
        """e^(-rT)"""
        return math.exp(-self.rate * self.maturity)

    def replace(self, **changes) -> "PricingParameters":
        """Return a validated copy with the given fields changed."""
        return _replace(self, **changes)
