"""Launchpad error classes.

Every operation either commits in full or raises one of these; the message
is the reason surfaced to the caller.
"""


class LaunchpadError(Exception):
    """Base error for launchpad operations."""

    @property
    def reason(self) -> str:
        return str(self)


class ValidationError(LaunchpadError):
    """Unknown asset, non-positive amount or malformed parameter."""

    pass


class StateError(LaunchpadError):
    """Operation not permitted in the asset's current state (e.g. migrated)."""

    pass


class ReentrancyError(StateError):
    """A guarded operation was entered again before it finished."""

    pass


class LiquidityError(LaunchpadError):
    """Payout would exceed the native value held against the asset."""

    pass


class TransferError(LaunchpadError):
    """Ledger mint/transfer/allowance or native payout failure."""

    pass


class InsufficientBalance(TransferError):
    """Holder balance is lower than the amount moved."""

    pass


class InsufficientAllowance(TransferError):
    """Spender allowance is lower than the amount moved."""

    pass


class AuthorizationError(LaunchpadError):
    """Caller is not allowed to run a restricted operation."""

    def __init__(self, account: str, message: str | None = None) -> None:
        self.account = account
        super().__init__(message or f"Unauthorized account: {account}")
