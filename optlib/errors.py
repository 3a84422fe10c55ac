"""
Exceptions raised by the pricing library.

Pricing formulas favour numeric degeneracy over exceptions: NaN and inf
propagate out of the raw formulas. Errors are raised only where inputs
enter the library (parameter sets, step and path counts, payoff strikes).
"""


class InvalidParameterError(ValueError):
    """Raised when a pricing input fails boundary validation."""

    def __init__(self, name: str, value, message: str):
        self.name = name
        self.value = value
        super().__init__(message)
