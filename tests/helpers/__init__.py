"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Account addresses and common amounts
- factories: Launchpad factory and independent reference curve math
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    ETHER,
    MALLORY,
    OWNER,
    REGISTRY,
    STARTING_BALANCE,
)
from tests.helpers.factories import (
    make_launchpad,
    native_balances,
    reference_buy,
    reference_sell,
    registry_backing,
)

__all__ = [
    # Constants
    "OWNER",
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "REGISTRY",
    "ETHER",
    "STARTING_BALANCE",
    # Factories
    "make_launchpad",
    "reference_buy",
    "reference_sell",
    "registry_backing",
    "native_balances",
]
