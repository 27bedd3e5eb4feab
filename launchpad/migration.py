"""Reserved hook for moving an asset's liquidity off the curve.

No external venue is wired in by default. A LiquidityMigrator can be passed
to the Registry; until then migrate_liquidity raises NotImplementedError and
every asset stays Active.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from launchpad.registry import AssetRecord


class AssetState(str, Enum):
    """Trading state of an asset. MIGRATED is terminal."""

    ACTIVE = "active"
    MIGRATED = "migrated"


def asset_state(record: AssetRecord) -> AssetState:
    return AssetState.MIGRATED if record.migrated else AssetState.ACTIVE


def is_tradable(record: AssetRecord) -> bool:
    """True while the asset still trades against its bonding curve."""
    return asset_state(record) is AssetState.ACTIVE


@runtime_checkable
class LiquidityMigrator(Protocol):
    """External venue that takes over an asset's real reserves."""

    @property
    def address(self) -> str:
        """Account that receives the migrated native value."""
        ...

    def migrate_liquidity(self, record: AssetRecord, value: int) -> None:
        """Seed the external venue.

        Called after value has been paid to self.address; raising aborts
        the whole migration.

        Args:
            record: Copy of the asset record before migration
            value: Native value handed over (real reserve minus migration fee)
        """
        ...
