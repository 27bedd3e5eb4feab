"""Configuration for the launchpad core."""

import os
from dataclasses import dataclass, fields

from launchpad.constants import (
    BPS_DENOMINATOR,
    DEFAULT_FEE_NUMERATOR,
    DEFAULT_MIGRATION_FEE,
    DEFAULT_REAL_RESERVE_SECONDARY,
    DEFAULT_VIRTUAL_RESERVE_PRIMARY,
    DEFAULT_VIRTUAL_RESERVE_SECONDARY,
    INITIAL_CREATOR_MINT,
)

ENV_PREFIX = "LAUNCHPAD_"


@dataclass(frozen=True)
class LaunchpadConfig:
    """Initial global parameters for a registry.

    Attributes:
        virtual_reserve_primary: Virtual native reserve seeded into new assets
        virtual_reserve_secondary: Virtual token reserve seeded into new assets
        real_reserve_secondary: Issuable token supply seeded into new assets
        fee_numerator: Trade fee numerator (default: 100)
        fee_denominator: Trade fee denominator (default: 10,000)
        migration_fee: Flat fee kept when liquidity migrates (default: 0.018 ether)
        initial_creator_mint: Tokens minted to the creator at launch (default: 1 token)
    """

    virtual_reserve_primary: int = DEFAULT_VIRTUAL_RESERVE_PRIMARY
    virtual_reserve_secondary: int = DEFAULT_VIRTUAL_RESERVE_SECONDARY
    real_reserve_secondary: int = DEFAULT_REAL_RESERVE_SECONDARY
    fee_numerator: int = DEFAULT_FEE_NUMERATOR
    fee_denominator: int = BPS_DENOMINATOR
    migration_fee: int = DEFAULT_MIGRATION_FEE
    initial_creator_mint: int = INITIAL_CREATOR_MINT

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "LaunchpadConfig":
        """Build a config, overriding defaults from LAUNCHPAD_* variables.

        Each field maps to its upper-cased name, e.g. LAUNCHPAD_FEE_NUMERATOR.
        Values are integers in the smallest unit.

        Raises:
            ValueError: If a variable is set but is not an integer
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, int] = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None or raw == "":
                continue
            try:
                overrides[f.name] = int(raw)
            except ValueError as err:
                raise ValueError(f"{key} must be an integer, got '{raw}'") from err
        return cls(**overrides)


# Default configuration instance
DEFAULT_CONFIG = LaunchpadConfig()
