"""Engine defaults and output scaling constants."""

# Monte Carlo defaults
DEFAULT_N_PATHS = 100_000
DEFAULT_N_STEPS = 252

# Paths per independently seeded simulation chunk
PATH_CHUNK_SIZE = 10_000

# Greeks are reported per calendar day (theta) and per percentage point
# (vega, rho)
DAYS_PER_YEAR = 365
PERCENT = 100.0

# Two-sided 95% normal quantile
CONFIDENCE_Z_95 = 1.96
