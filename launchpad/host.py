"""In-process execution environment for the launchpad core.

The core relies on its host for four things, provided here:
- NativeBank: native-value balances and transfers (with receiver hooks,
  so a recipient can run code when paid)
- ExecutionEnvironment.atomic(): all-or-nothing commit over every write
  recorded in the environment's Journal
- ExecutionEnvironment.emit(): notifications buffered until commit
- ReentrancyGuard: one flag per contract, raised around external calls
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

import structlog

from launchpad.errors import (
    InsufficientBalance,
    LaunchpadError,
    ReentrancyError,
    TransferError,
    ValidationError,
)
from launchpad.events import Event, EventSink, InMemoryEventLog
from launchpad.models.types import normalize_address
from launchpad.safe_int import S

logger = structlog.get_logger()

# Called after a native credit lands: hook(sender, amount)
ReceiveHook = Callable[[str, int], None]

Undo = Callable[[], None]

_MISSING = object()


class Journal:
    """Undo log for writes made while a transaction is open.

    State holders route every write through set_item / set_attr. Outside a
    transaction the write just happens. Inside one, the previous value is
    recorded first and rollback replays the records newest-first.
    """

    def __init__(self) -> None:
        self._frames: list[list[Undo]] = []

    def __len__(self) -> int:
        """Writes recorded across all open frames."""
        return sum(len(frame) for frame in self._frames)

    @property
    def active(self) -> bool:
        return bool(self._frames)

    def set_item(self, mapping: MutableMapping[Any, Any], key: Any, value: Any) -> None:
        if self._frames:
            previous = mapping.get(key, _MISSING)
            if previous is _MISSING:
                self._frames[-1].append(lambda: mapping.pop(key, None))
            else:
                self._frames[-1].append(lambda: mapping.__setitem__(key, previous))
        mapping[key] = value

    def set_attr(self, obj: object, name: str, value: Any) -> None:
        if self._frames:
            previous = getattr(obj, name)
            self._frames[-1].append(lambda: setattr(obj, name, previous))
        setattr(obj, name, value)

    def begin(self) -> None:
        self._frames.append([])

    def commit(self) -> None:
        """Close the innermost frame, folding its writes into the enclosing one."""
        frame = self._frames.pop()
        if self._frames:
            self._frames[-1].extend(frame)

    def rollback(self) -> int:
        """Undo the innermost frame's writes, newest first.

        Returns:
            Number of writes undone
        """
        frame = self._frames.pop()
        for undo in reversed(frame):
            undo()
        return len(frame)


class NativeBank:
    """Native-value balances keyed by normalized address."""

    def __init__(self, journal: Journal | None = None) -> None:
        self.journal = journal if journal is not None else Journal()
        self._balances: dict[str, int] = {}
        self._hooks: dict[str, ReceiveHook] = {}

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def deposit(self, address: str, amount: int) -> None:
        """Credit new native value to an account (host funding, not a transfer)."""
        if amount < 0:
            raise ValidationError(f"Deposit cannot be negative: {amount}")
        addr = normalize_address(address)
        self.journal.set_item(
            self._balances, addr, (S(self._balances.get(addr, 0)) + amount).to_uint256()
        )
        logger.debug("native_deposit", address=addr, amount=amount)

    def on_receive(self, address: str, hook: ReceiveHook | None) -> None:
        """Install (or clear with None) the code run when address is paid."""
        addr = normalize_address(address)
        if hook is None:
            self._hooks.pop(addr, None)
        else:
            self._hooks[addr] = hook

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move native value, then run the recipient's receive hook.

        Raises:
            InsufficientBalance: If sender holds less than amount
            TransferError: If the recipient's hook rejects the payment
        """
        if amount < 0:
            raise ValidationError(f"Transfer amount cannot be negative: {amount}")
        src = normalize_address(sender)
        dst = normalize_address(recipient)
        balance = self._balances.get(src, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Insufficient native balance: {src} has {balance}, needs {amount}"
            )
        self.journal.set_item(self._balances, src, (S(balance) - amount).value)
        self.journal.set_item(
            self._balances, dst, (S(self._balances.get(dst, 0)) + amount).to_uint256()
        )

        hook = self._hooks.get(dst)
        if hook is not None:
            try:
                hook(src, amount)
            except LaunchpadError as err:
                logger.warning(
                    "native_receive_rejected",
                    sender=src,
                    recipient=dst,
                    amount=amount,
                    error=str(err),
                )
                raise TransferError(f"Native transfer to {dst} failed") from err


class ReentrancyGuard:
    """Mutual-exclusion flag shared by a contract's guarded operations."""

    def __init__(self) -> None:
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def guard(self, operation: str) -> Iterator[None]:
        """Hold the flag for the duration of operation.

        Raises:
            ReentrancyError: If a guarded operation is already running
        """
        if self._entered:
            logger.warning("reentrant_call_blocked", operation=operation)
            raise ReentrancyError(f"Reentrant call to {operation}")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False


class ExecutionEnvironment:
    """Atomic commit, native value and notification log for the core.

    State holders share the environment's journal. atomic() opens a journal
    frame and undoes the frame's writes if the block raises. Events emitted
    inside a block reach the sink only when the outermost block commits.
    """

    def __init__(self, sink: EventSink | None = None) -> None:
        self.journal = Journal()
        self.bank = NativeBank(self.journal)
        self.sink: EventSink = sink if sink is not None else InMemoryEventLog()
        self._frames: list[list[Event]] = []

    @property
    def in_transaction(self) -> bool:
        return bool(self._frames)

    def emit(self, event: Event) -> None:
        if self._frames:
            self._frames[-1].append(event)
        else:
            self.sink.publish(event)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block with all-or-nothing semantics."""
        pending: list[Event] = []
        self._frames.append(pending)
        self.journal.begin()
        try:
            yield
        except BaseException:
            self._frames.pop()
            undone = self.journal.rollback()
            logger.debug(
                "transaction_rolled_back", undone_writes=undone, discarded_events=len(pending)
            )
            raise
        self._frames.pop()
        self.journal.commit()
        if self._frames:
            self._frames[-1].extend(pending)
        else:
            for event in pending:
                self.sink.publish(event)
