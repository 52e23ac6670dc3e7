"""Asset identifiers, time units and engine constants."""

# Asset symbols
WETH = "WETH"
USDC = "USDC"

# Base mainnet token addresses
WETH_BASE_ADDRESS = "0x4200000000000000000000000000000000000006"
USDC_BASE_ADDRESS = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

# Decimals
WETH_DECIMALS = 18
USDC_DECIMALS = 6

# Supported venue
PROTOCOL_MORPHO_BLUE = "morpho-blue"
CHAIN_BASE = "base"

# Time: interest accrues over a 365-day year
SECONDS_PER_DAY = 86_400
SECONDS_PER_YEAR = 31_536_000
DAYS_PER_YEAR = 365

BPS_DENOMINATOR = 10_000

# Policy defaults
DEFAULT_MAX_LOOPS = 10
DEFAULT_HORIZON_DAYS = 30
MAX_HORIZON_DAYS = 365

# Bump whenever the computation semantics change; embedded in provenance.
SIM_ENGINE_VERSION = "0.2.0"
