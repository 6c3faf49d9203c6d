"""Fixed-point scales and protocol defaults."""

# Fixed point scale factors
WAD = 10**18  # 18 decimals for amounts and normalized prices
PRICE_DECIMALS = 18
PERCENT = 100
BPS_SCALE = 10_000  # Basis points (100% = 10000)
UINT256_MAX = 2**256 - 1

# Partial liquidation may cover at most debt // CLOSE_FACTOR_DIVISOR per call
CLOSE_FACTOR_DIVISOR = 2

# Ratio defaults
DEFAULT_MINTING_RATIO = 150       # 150%
DEFAULT_LIQUIDATION_RATIO = 125   # 125%
DEFAULT_LIQ_PENALTY_BPS = 500     # 5% in bps
