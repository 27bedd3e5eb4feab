"""Per-asset fungible token ledger.

Each launched asset gets its own AssetLedger. Only the minter (the registry)
may create supply; everybody else moves balances with transfer, approve and
transfer_from. Allowances are overwritten by approve, never added to.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from launchpad.constants import TOKEN_DECIMALS, ZERO_ADDRESS
from launchpad.errors import (
    AuthorizationError,
    InsufficientAllowance,
    InsufficientBalance,
    ValidationError,
)
from launchpad.events import Approval, Event, Transfer
from launchpad.host import Journal
from launchpad.models.types import normalize_address
from launchpad.safe_int import S

logger = structlog.get_logger()

Emit = Callable[[Event], None]


@dataclass
class _LedgerState:
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0


def _require_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise ValidationError(f"Invalid amount: {amount!r}")


class AssetLedger:
    """Balances and allowances for a single asset."""

    def __init__(
        self,
        name: str,
        symbol: str,
        address: str,
        minter: str,
        emit: Emit | None = None,
        journal: Journal | None = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.address = normalize_address(address)
        self.minter = normalize_address(minter)
        self.decimals = TOKEN_DECIMALS
        self._emit = emit
        self._journal = journal if journal is not None else Journal()
        self._state = _LedgerState()

    # --- Queries ---

    @property
    def total_supply(self) -> int:
        return self._state.total_supply

    def balance_of(self, holder: str) -> int:
        return self._state.balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (normalize_address(owner), normalize_address(spender))
        return self._state.allowances.get(key, 0)

    # --- Mutations ---

    def mint(self, caller: str, to: str, amount: int) -> None:
        """Create amount new tokens for to.

        Raises:
            AuthorizationError: If caller is not the minter
        """
        caller_norm = normalize_address(caller)
        if caller_norm != self.minter:
            raise AuthorizationError(caller_norm, f"Only the minter can mint: {caller_norm}")
        _require_amount(amount)

        recipient = normalize_address(to)
        self._credit(recipient, amount)
        self._journal.set_attr(
            self._state, "total_supply", (S(self._state.total_supply) + amount).to_uint256()
        )
        self._notify(Transfer(self.address, ZERO_ADDRESS, recipient, amount))

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move amount from sender to to.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        _require_amount(amount)
        self._move(normalize_address(sender), normalize_address(to), amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set (overwrite) spender's allowance over owner's balance."""
        _require_amount(amount)
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)
        self._journal.set_item(self._state.allowances, (owner_norm, spender_norm), amount)
        self._notify(Approval(self.address, owner_norm, spender_norm, amount))

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """Move amount out of owner's balance using spender's allowance.

        Both checks run before anything changes.

        Raises:
            InsufficientAllowance: If the allowance is lower than amount
            InsufficientBalance: If owner holds less than amount
        """
        _require_amount(amount)
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)
        key = (owner_norm, spender_norm)
        allowed = self._state.allowances.get(key, 0)
        if allowed < amount:
            raise InsufficientAllowance(
                f"Insufficient allowance: {spender_norm} may move {allowed} of "
                f"{owner_norm}'s {self.symbol}, needs {amount}"
            )
        if self.balance_of(owner_norm) < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {owner_norm} has {self.balance_of(owner_norm)} "
                f"{self.symbol}, needs {amount}"
            )
        self._journal.set_item(self._state.allowances, key, (S(allowed) - amount).value)
        self._move(owner_norm, normalize_address(to), amount)

    # --- Internals ---

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        balance = self._state.balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {sender} has {balance} {self.symbol}, needs {amount}"
            )
        self._journal.set_item(self._state.balances, sender, (S(balance) - amount).value)
        self._credit(recipient, amount)
        self._notify(Transfer(self.address, sender, recipient, amount))

    def _credit(self, holder: str, amount: int) -> None:
        current = self._state.balances.get(holder, 0)
        self._journal.set_item(self._state.balances, holder, (S(current) + amount).to_uint256())

    def _notify(self, event: Event) -> None:
        logger.debug(event.name, **event.payload())
        if self._emit is not None:
            self._emit(event)


# Signature the registry uses to create a ledger for each new asset
LedgerFactory = Callable[[str, str, str, str, Emit | None, Journal | None], AssetLedger]
