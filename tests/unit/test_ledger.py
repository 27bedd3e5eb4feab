"""Tests for AssetLedger."""

import pytest

from launchpad.constants import ZERO_ADDRESS
from launchpad.errors import (
    AuthorizationError,
    InsufficientAllowance,
    InsufficientBalance,
    TransferError,
    ValidationError,
)
from launchpad.events import Approval, Event, Transfer
from launchpad.host import Journal
from launchpad.ledger import AssetLedger
from tests.helpers import ALICE, BOB, CAROL, REGISTRY

ASSET = "0x" + "ab" * 20


@pytest.fixture
def emitted() -> list[Event]:
    return []


@pytest.fixture
def ledger(emitted) -> AssetLedger:
    """A ledger minted by REGISTRY; ALICE holds 1000."""
    ledger = AssetLedger("Alpha", "ALP", ASSET, REGISTRY, emitted.append)
    ledger.mint(REGISTRY, ALICE, 1000)
    emitted.clear()
    return ledger


class TestMint:
    """Tests for minting."""

    def test_mint_credits_and_grows_supply(self, ledger):
        """Minting credits the holder and total supply."""
        ledger.mint(REGISTRY, BOB, 500)
        assert ledger.balance_of(BOB) == 500
        assert ledger.total_supply == 1500

    def test_mint_emits_transfer_from_zero(self, ledger, emitted):
        """A mint is a Transfer from the zero address."""
        ledger.mint(REGISTRY, BOB, 5)
        assert emitted == [Transfer(ASSET, ZERO_ADDRESS, BOB, 5)]

    def test_only_minter_can_mint(self, ledger):
        """Anyone but the minter is rejected."""
        with pytest.raises(AuthorizationError) as exc_info:
            ledger.mint(ALICE, ALICE, 1)
        assert exc_info.value.account == ALICE
        assert ledger.total_supply == 1000

    def test_mint_normalizes_caller(self, ledger):
        """Minter check is case-insensitive."""
        ledger.mint(REGISTRY.upper().replace("0X", "0x"), BOB, 1)
        assert ledger.balance_of(BOB) == 1

    def test_metadata(self, ledger):
        """Ledgers carry 18 decimals and their name/symbol."""
        assert ledger.decimals == 18
        assert ledger.name == "Alpha"
        assert ledger.symbol == "ALP"


class TestTransfer:
    """Tests for direct transfers."""

    def test_transfer_moves_balance(self, ledger, emitted):
        """transfer moves tokens and emits Transfer."""
        ledger.transfer(ALICE, BOB, 300)
        assert ledger.balance_of(ALICE) == 700
        assert ledger.balance_of(BOB) == 300
        assert emitted == [Transfer(ASSET, ALICE, BOB, 300)]

    def test_transfer_insufficient_balance(self, ledger):
        """Moving more than the balance raises and changes nothing."""
        with pytest.raises(InsufficientBalance):
            ledger.transfer(ALICE, BOB, 1001)
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(BOB) == 0

    def test_insufficient_balance_is_transfer_error(self):
        """Ledger failures share the TransferError base."""
        assert issubclass(InsufficientBalance, TransferError)
        assert issubclass(InsufficientAllowance, TransferError)

    @pytest.mark.parametrize("amount", [-1, True, 1.5])
    def test_invalid_amount(self, ledger, amount):
        """Negative, boolean and non-integer amounts are rejected."""
        with pytest.raises(ValidationError):
            ledger.transfer(ALICE, BOB, amount)


class TestAllowance:
    """Tests for approve and transfer_from."""

    def test_approve_overwrites(self, ledger, emitted):
        """approve sets, never adds."""
        ledger.approve(ALICE, BOB, 100)
        ledger.approve(ALICE, BOB, 40)
        assert ledger.allowance(ALICE, BOB) == 40
        assert emitted[-1] == Approval(ASSET, ALICE, BOB, 40)

    def test_transfer_from_spends_allowance(self, ledger):
        """transfer_from decrements the allowance by the amount moved."""
        ledger.approve(ALICE, BOB, 100)
        ledger.transfer_from(BOB, ALICE, CAROL, 60)

        assert ledger.allowance(ALICE, BOB) == 40
        assert ledger.balance_of(ALICE) == 940
        assert ledger.balance_of(CAROL) == 60

    def test_transfer_from_insufficient_allowance(self, ledger):
        """Allowance below amount raises before anything moves."""
        ledger.approve(ALICE, BOB, 10)
        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from(BOB, ALICE, CAROL, 11)
        assert ledger.allowance(ALICE, BOB) == 10
        assert ledger.balance_of(ALICE) == 1000

    def test_transfer_from_insufficient_balance(self, ledger):
        """Balance below amount raises and keeps the allowance."""
        ledger.approve(ALICE, BOB, 5000)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_from(BOB, ALICE, CAROL, 2000)
        assert ledger.allowance(ALICE, BOB) == 5000

    def test_allowance_is_per_spender(self, ledger):
        """An allowance for one spender is not usable by another."""
        ledger.approve(ALICE, BOB, 100)
        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from(CAROL, ALICE, CAROL, 1)


class TestJournaling:
    """Tests for rollback through a shared journal."""

    def test_rollback_reverts_everything(self):
        """Balances, allowances and supply come back as they were."""
        journal = Journal()
        ledger = AssetLedger("Alpha", "ALP", ASSET, REGISTRY, journal=journal)
        ledger.mint(REGISTRY, ALICE, 1000)

        journal.begin()
        ledger.transfer(ALICE, BOB, 10)
        ledger.approve(ALICE, BOB, 10)
        ledger.mint(REGISTRY, CAROL, 10)
        journal.rollback()

        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(BOB) == 0
        assert ledger.balance_of(CAROL) == 0
        assert ledger.allowance(ALICE, BOB) == 0
        assert ledger.total_supply == 1000

    def test_writes_recorded_per_holder(self):
        """A transfer records the two balances it touches, not the whole ledger."""
        journal = Journal()
        ledger = AssetLedger("Alpha", "ALP", ASSET, REGISTRY, journal=journal)
        for holder in (ALICE, BOB, CAROL):
            ledger.mint(REGISTRY, holder, 1000)

        journal.begin()
        ledger.transfer(ALICE, BOB, 10)

        assert len(journal) == 2
