"""Notifications published by the launchpad core.

The core never writes to a transport directly: it hands event objects to the
execution environment, which forwards committed events to an EventSink.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import asdict, dataclass
from typing import ClassVar, Protocol, TypeVar, runtime_checkable

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class Event:
    """Base class for all notifications."""

    name: ClassVar[str] = "event"

    def payload(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class AssetLaunched(Event):
    name: ClassVar[str] = "asset_launched"

    asset_id: str
    asset_name: str
    symbol: str
    creator: str


@dataclass(frozen=True)
class AssetPurchased(Event):
    name: ClassVar[str] = "asset_purchased"

    asset_id: str
    buyer: str
    out_amount: int
    value_in: int


@dataclass(frozen=True)
class AssetSold(Event):
    name: ClassVar[str] = "asset_sold"

    asset_id: str
    seller: str
    amount: int
    net_out: int


@dataclass(frozen=True)
class FeesClaimed(Event):
    name: ClassVar[str] = "fees_claimed"

    recipient: str
    amount: int


@dataclass(frozen=True)
class GlobalReservesUpdated(Event):
    name: ClassVar[str] = "global_reserves_updated"

    virtual_reserve_primary: int
    virtual_reserve_secondary: int
    real_reserve_secondary: int


@dataclass(frozen=True)
class FeeRateUpdated(Event):
    name: ClassVar[str] = "fee_rate_updated"

    fee_numerator: int
    fee_denominator: int


@dataclass(frozen=True)
class MigrationFeeUpdated(Event):
    name: ClassVar[str] = "migration_fee_updated"

    migration_fee: int


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    name: ClassVar[str] = "ownership_transferred"

    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class LiquidityMigrated(Event):
    name: ClassVar[str] = "liquidity_migrated"

    asset_id: str
    migrator: str
    value: int
    fee: int


@dataclass(frozen=True)
class Transfer(Event):
    """Ledger balance movement (sender is the zero address for mints)."""

    name: ClassVar[str] = "transfer"

    asset_id: str
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval(Event):
    name: ClassVar[str] = "approval"

    asset_id: str
    owner: str
    spender: str
    amount: int


E = TypeVar("E", bound=Event)


@runtime_checkable
class EventSink(Protocol):
    """Destination for committed notifications."""

    def publish(self, event: Event) -> None:
        """Deliver one committed event."""
        ...


class InMemoryEventLog:
    """Append-only in-process notification log."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def publish(self, event: Event) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Return the committed events of one type, oldest first."""
        return [e for e in self._events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))


class StructlogEventSink:
    """Publish every notification as a structured log line."""

    def publish(self, event: Event) -> None:
        logger.info(event.name, **event.payload())


class CompositeEventSink:
    """Fan a notification out to several sinks in order."""

    def __init__(self, sinks: Sequence[EventSink]) -> None:
        self._sinks = list(sinks)

    def publish(self, event: Event) -> None:
        for sink in self._sinks:
            sink.publish(event)
