"""Protocol constants for the launchpad.

Centralizes the default curve parameters and well-known addresses.
"""

from launchpad.models.types import is_valid_address

# 18-decimal fixed point: every amount is an integer count of 1e-18 units
ONE_ETHER = 10**18

# Asset ledgers use the same scale as the native value
TOKEN_DECIMALS = 18


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Default curve seed for newly launched assets
# virtual primary = 0.015 ether, virtual secondary = 1.073B tokens
DEFAULT_VIRTUAL_RESERVE_PRIMARY = 15 * ONE_ETHER // 1000
DEFAULT_VIRTUAL_RESERVE_SECONDARY = 1_073_000_000 * ONE_ETHER
# Issuable supply backing the curve (793.1M tokens)
DEFAULT_REAL_RESERVE_SECONDARY = 793_100_000 * ONE_ETHER

# Trade fee as a ratio: 100 / 10_000 = 1% (basis points)
DEFAULT_FEE_NUMERATOR = 100
BPS_DENOMINATOR = 10_000

# Flat fee retained when an asset's liquidity moves to an external venue (0.018 ether)
DEFAULT_MIGRATION_FEE = 18 * ONE_ETHER // 1000

# Starter allocation minted to the creator of every asset (1 token)
INITIAL_CREATOR_MINT = ONE_ETHER

# Mint/burn counterparty in ledger Transfer notifications
ZERO_ADDRESS = _validate_address("zero", "0x0000000000000000000000000000000000000000")

# Default address of the registry itself (holds native reserves and sold-back tokens)
DEFAULT_REGISTRY_ADDRESS = _validate_address(
    "registry", "0x000000000000000000000000000000000000c0de"
)
