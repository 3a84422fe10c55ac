#!/usr/bin/env python3
"""
Example usage of the option pricing library.

Prices a European option with Black-Scholes, the binomial lattice and Monte
Carlo simulation, prints its Greeks, compares American and European
exercise, prices an Asian call, and samples the synthetic volatility surface.
"""

import logging

import numpy as np

from optlib import (
    AsianPayoff,
    MonteCarloEngine,
    OptionType,
    PricingParameters,
    VanillaPayoff,
    asian_payoffs,
    binomial_price,
    build_binomial_lattice,
    convergence_series,
    greeks,
    implied_vol_surface_mock,
    price_black_scholes,
    simulate_paths,
    terminal_payoffs,
)


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )

    # Market parameters
    params = PricingParameters(
        spot=100.0,  # Initial stock price
        strike=100.0,  # Strike price
        maturity=1.0,  # Time to maturity (1 year)
        rate=0.05,  # Risk-free rate (5%)
        volatility=0.2,  # Volatility (20%)
        option_type=OptionType.CALL,
    )
    put_params = params.replace(option_type=OptionType.PUT)

    print("=" * 60)
    print("Option Pricing")
    print("=" * 60)
    print(f"\nMarket Parameters:")
    print(f"  Spot price (S):     ${params.spot:.2f}")
    print(f"  Strike price (K):   ${params.strike:.2f}")
    print(f"  Time to maturity:   {params.maturity:.2f} years")
    print(f"  Risk-free rate:     {params.rate:.1%}")
    print(f"  Volatility:         {params.volatility:.1%}")

    # Black-Scholes and Greeks
    print("\n" + "-" * 60)
    print("Black-Scholes")
    print("-" * 60)
    bs_call = price_black_scholes(params)
    bs_put = price_black_scholes(put_params)
    print(f"  Call: {bs_call:.6f}")
    print(f"  Put:  {bs_put:.6f}")
    for name, value in greeks(params).as_dict().items():
        print(f"  {name:<6} {value: .6f}")

    # Put-call parity: C - P = S - K*exp(-rT)
    parity_rhs = params.spot - params.strike * params.discount_factor
    print(f"  C - P = {bs_call - bs_put:.6f}, S - K*exp(-rT) = {parity_rhs:.6f}")

    # Binomial lattice
    print("\n" + "-" * 60)
    print("Binomial Lattice (CRR)")
    print("-" * 60)
    european_put = binomial_price(put_params, steps=500)
    american_put = build_binomial_lattice(put_params, steps=200, american=True)
    print(f"  European call (500 steps): {binomial_price(params, steps=500):.6f}")
    print(f"  European put  (500 steps): {european_put:.6f}")
    print(f"  American put  (200 steps): {american_put.price:.6f}")
    print(f"  Early-exercise nodes:      {len(american_put.early_exercise_nodes())}")

    # Monte Carlo
    print("\n" + "-" * 60)
    print("Monte Carlo")
    print("-" * 60)
    engine = MonteCarloEngine(params, n_paths=100_000, n_steps=52, seed=42, workers=4)
    call_payoff = VanillaPayoff(strike=params.strike, option_type=OptionType.CALL)
    print(f"  European call:            {engine.price(call_payoff)}")
    print(f"  With antithetic variates: {engine.price_antithetic(call_payoff)}")
    asian_payoff = AsianPayoff(strike=params.strike)
    print(f"  Asian call:               {engine.price(asian_payoff)}")

    path_set = simulate_paths(params, steps=52, paths=10_000, seed=123)
    vanilla = terminal_payoffs(path_set, params.strike, OptionType.CALL)
    running = convergence_series(vanilla, params.rate, params.maturity)
    checkpoints = [9, 99, 999, 9_999]
    print(
        f"  Running estimate at {[c + 1 for c in checkpoints]} paths: "
        f"{running[checkpoints].round(4)}"
    )
    asian = asian_payoffs(
        path_set, params.strike, params.rate, params.maturity, OptionType.CALL
    )
    print(f"  Asian call (weekly averaging, 10,000 paths): {np.mean(asian):.6f}")

    # Volatility surface
    print("\n" + "-" * 60)
    print("Synthetic Implied Volatility Surface")
    print("-" * 60)
    surface = implied_vol_surface_mock()
    print(f"  Grid: {surface.shape[0]} maturities x {surface.shape[1]} strikes")
    smile = " / ".join(f"{surface.vol_at(k, 1.0):.4f}" for k in (80, 100, 120))
    print(f"  1y smile at K=80/100/120: {smile}")
    smile_params = params.replace(strike=120.0, volatility=surface.vol_at(120.0, 1.0))
    print(f"  K=120 call at surface vol: {price_black_scholes(smile_params):.6f}")

    print("\n" + "=" * 60)
    print("Pricing complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
