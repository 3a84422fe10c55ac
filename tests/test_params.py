"""Unit tests for pricing parameters and option types."""

import math

import pytest

from optlib import InvalidParameterError, OptionType, PricingParameters


class TestOptionType:
    """Tests for OptionType coercion."""

    def test_enum_passthrough(self):
        assert OptionType.coerce(OptionType.PUT) is OptionType.PUT

    def test_string_coercion(self):
        assert OptionType.coerce("call") is OptionType.CALL
        assert OptionType.coerce("PUT") is OptionType.PUT

    def test_unknown_raises(self):
        with pytest.raises(InvalidParameterError, match="must be 'call' or 'put'"):
            OptionType.coerce("straddle")


class TestPricingParameters:
    """Tests for PricingParameters validation."""

    def test_valid_parameters(self):
        params = PricingParameters(
            spot=100, strike=105, maturity=1.0, rate=0.05, volatility=0.2
        )
        assert params.spot == 100
        assert params.strike == 105
        assert params.option_type is OptionType.CALL
        assert params.is_call

    def test_string_option_type(self):
        params = PricingParameters(100, 100, 1.0, 0.05, 0.2, "put")
        assert params.option_type is OptionType.PUT
        assert not params.is_call

    def test_negative_rate_allowed(self):
        params = PricingParameters(100, 100, 1.0, -0.01, 0.2)
        assert params.rate == -0.01

    def test_discount_factor(self):
        params = PricingParameters(100, 100, 2.0, 0.05, 0.2)
        assert params.discount_factor == pytest.approx(math.exp(-0.1))

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("spot", 0.0, "Spot price must be positive"),
            ("spot", -100.0, "Spot price must be positive"),
            ("strike", 0.0, "Strike price must be positive"),
            ("maturity", 0.0, "Maturity must be positive"),
            ("volatility", 0.0, "Volatility must be positive"),
            ("volatility", float("nan"), "Volatility must be positive"),
            ("rate", float("inf"), "Risk-free rate must be finite"),
        ],
    )
    def test_invalid_values_raise(self, field, value, message):
        kwargs = dict(spot=100.0, strike=100.0, maturity=1.0, rate=0.05, volatility=0.2)
        kwargs[field] = value
        with pytest.raises(InvalidParameterError, match=message) as excinfo:
            PricingParameters(**kwargs)
        assert excinfo.value.name == field

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            PricingParameters(100, -1, 1.0, 0.05, 0.2)

    def test_frozen(self):
        params = PricingParameters(100, 100, 1.0, 0.05, 0.2)
        with pytest.raises(AttributeError):
            params.spot = 110

    def test_replace_returns_validated_copy(self):
        params = PricingParameters(100, 100, 1.0, 0.05, 0.2)
        bumped = params.replace(spot=101.0)
        assert bumped.spot == 101.0
        assert params.spot == 100
        with pytest.raises(InvalidParameterError):
            params.replace(volatility=-0.1)
