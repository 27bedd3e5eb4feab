"""Asset registry: launches assets and trades them along their bonding curves.

The Registry exclusively owns the global parameters, the fee accumulator and
every AssetRecord. Each operation runs inside ExecutionEnvironment.atomic(),
so a rejection at any step leaves balances, records and the notification log
exactly as they were.

Value flow per asset:
- buy:  buyer --value_in--> registry; fee accrues, net_in backs the asset,
        out_amount tokens are minted to the buyer
- sell: seller --amount tokens--> registry; gross_out leaves the asset's
        backing, fee accrues, net_out is paid to the seller
so the registry's native balance always equals the sum of
real_reserve_primary over all assets plus accumulated_fees.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import structlog
from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import keccak

from launchpad.config import DEFAULT_CONFIG, LaunchpadConfig
from launchpad.constants import DEFAULT_REGISTRY_ADDRESS
from launchpad.curve import BuyQuote, SellQuote, compute_buy, compute_sell
from launchpad.errors import (
    AuthorizationError,
    LaunchpadError,
    LiquidityError,
    StateError,
    TransferError,
    ValidationError,
)
from launchpad.events import AssetLaunched, AssetPurchased, AssetSold, LiquidityMigrated
from launchpad.host import ExecutionEnvironment, ReentrancyGuard
from launchpad.ledger import AssetLedger, LedgerFactory
from launchpad.migration import LiquidityMigrator, is_tradable
from launchpad.models.types import normalize_address
from launchpad.safe_int import S

logger = structlog.get_logger()

# Rejection reasons surfaced to callers
INVALID_TOKEN = "Invalid token"
AMOUNT_NOT_POSITIVE = "Amount must be greater than 0"
TRADING_MIGRATED = "Trading moved to Uniswap"
INSUFFICIENT_LIQUIDITY = "Insufficient ETH in contract"
CURVE_EXHAUSTED = "Insufficient tokens in curve"
TRANSFER_FAILED = "Transfer failed"


@dataclass(frozen=True)
class GlobalParameters:
    """Defaults copied into every asset at launch."""

    virtual_reserve_primary: int
    virtual_reserve_secondary: int
    real_reserve_secondary: int
    fee_numerator: int
    fee_denominator: int
    migration_fee: int

    @classmethod
    def from_config(cls, config: LaunchpadConfig) -> GlobalParameters:
        return cls(
            virtual_reserve_primary=config.virtual_reserve_primary,
            virtual_reserve_secondary=config.virtual_reserve_secondary,
            real_reserve_secondary=config.real_reserve_secondary,
            fee_numerator=config.fee_numerator,
            fee_denominator=config.fee_denominator,
            migration_fee=config.migration_fee,
        )


@dataclass
class AssetRecord:
    """Curve and accounting state of one launched asset.

    real_reserve_secondary is signed: it starts at the issuable supply,
    drops on buys and rises on sells, and is reported as-is even below zero.
    """

    asset_id: str
    creator: str
    name: str
    symbol: str
    virtual_reserve_primary: int
    virtual_reserve_secondary: int
    real_reserve_primary: int
    real_reserve_secondary: int
    fee_numerator: int
    fee_denominator: int
    migrated: bool = False


@dataclass
class _RegistryState:
    owner: str
    parameters: GlobalParameters
    accumulated_fees: int = 0
    nonce: int = 0
    assets: dict[str, AssetRecord] = field(default_factory=dict)
    ledgers: dict[str, AssetLedger] = field(default_factory=dict)


def derive_asset_id(registry_address: str, nonce: int) -> str:
    """Deterministic asset address: last 20 bytes of keccak(abi.encode(registry, nonce))."""
    registry_bytes = bytes.fromhex(normalize_address(registry_address)[2:])
    digest = keccak(encode(["address", "uint256"], [registry_bytes, nonce]))
    return "0x" + digest[-20:].hex()


def reject(error: LaunchpadError, operation: str, **context: object) -> LaunchpadError:
    """Log a rejected operation and hand the error back for raising."""
    logger.warning(
        "operation_rejected",
        operation=operation,
        error=type(error).__name__,
        reason=str(error),
        **context,
    )
    return error


class Registry:
    """Factory and market for bonding-curve assets.

    Args:
        env: Host environment (atomic commit, native value, notifications)
        owner: Identity allowed to run admin operations
        config: Initial global parameters (default: DEFAULT_CONFIG)
        address: The registry's own account
        ledger_factory: Creates the AssetLedger of each new asset
        migrator: External liquidity venue; None keeps migration disabled
    """

    def __init__(
        self,
        env: ExecutionEnvironment,
        owner: str,
        config: LaunchpadConfig = DEFAULT_CONFIG,
        address: str = DEFAULT_REGISTRY_ADDRESS,
        ledger_factory: LedgerFactory = AssetLedger,
        migrator: LiquidityMigrator | None = None,
    ) -> None:
        self.env = env
        self.address = normalize_address(address, validate=True)
        self.guard = ReentrancyGuard()
        self._initial_mint = config.initial_creator_mint
        self._ledger_factory = ledger_factory
        self._migrator = migrator
        self._state = _RegistryState(
            owner=normalize_address(owner, validate=True),
            parameters=GlobalParameters.from_config(config),
        )

    # --- Queries ---

    @property
    def owner(self) -> str:
        return self._state.owner

    @property
    def parameters(self) -> GlobalParameters:
        return self._state.parameters

    @property
    def accumulated_fees(self) -> int:
        return self._state.accumulated_fees

    @property
    def initial_creator_mint(self) -> int:
        return self._initial_mint

    def get_asset(self, asset_id: str) -> AssetRecord:
        """Return a copy of an asset record.

        Raises:
            ValidationError: If the asset does not exist
        """
        return replace(self._require_record(asset_id))

    def has_asset(self, asset_id: str) -> bool:
        return normalize_address(asset_id) in self._state.assets

    def assets(self) -> list[AssetRecord]:
        """Copies of every record, in launch order."""
        return [replace(r) for r in self._state.assets.values()]

    def ledger(self, asset_id: str) -> AssetLedger:
        self._require_record(asset_id)
        return self._state.ledgers[normalize_address(asset_id)]

    def quote_buy(self, asset_id: str, value_in: int) -> BuyQuote:
        """Preview a buy against the asset's current curve."""
        record = self._require_record(asset_id)
        return compute_buy(
            record.virtual_reserve_primary,
            record.virtual_reserve_secondary,
            value_in,
            record.fee_numerator,
            record.fee_denominator,
        )

    def quote_sell(self, asset_id: str, amount: int) -> SellQuote:
        """Preview a sell against the asset's current curve (no liquidity check)."""
        record = self._require_record(asset_id)
        return compute_sell(
            record.virtual_reserve_primary,
            record.virtual_reserve_secondary,
            amount,
            record.fee_numerator,
            record.fee_denominator,
        )

    def require_owner(self, caller: str) -> None:
        """Raises AuthorizationError unless caller is the owner."""
        caller_norm = normalize_address(caller)
        if caller_norm != self._state.owner:
            raise reject(AuthorizationError(caller_norm), "require_owner")

    # --- Trading ---

    def launch(self, name: str, symbol: str, creator: str, value_in: int = 0) -> str:
        """Create a new asset and optionally buy into it in the same operation.

        A zero value_in skips the buy; it is not an error.

        Returns:
            The new asset id

        Raises:
            ValidationError: If name or symbol is empty or value_in is negative
            TransferError: If the creator cannot pay value_in
            LiquidityError: If the initial buy would drain the curve
        """
        creator_norm = normalize_address(creator)
        if not name.strip() or not symbol.strip():
            raise reject(ValidationError("Name and symbol are required"), "launch")
        if value_in < 0:
            raise reject(ValidationError(f"Value cannot be negative: {value_in}"), "launch")

        quote: BuyQuote | None = None
        with self.env.atomic():
            journal = self.env.journal
            journal.set_attr(self._state, "nonce", self._state.nonce + 1)
            asset_id = derive_asset_id(self.address, self._state.nonce)
            params = self._state.parameters

            ledger = self._ledger_factory(
                name, symbol, asset_id, self.address, self.env.emit, journal
            )
            record = AssetRecord(
                asset_id=asset_id,
                creator=creator_norm,
                name=name,
                symbol=symbol,
                virtual_reserve_primary=params.virtual_reserve_primary,
                virtual_reserve_secondary=params.virtual_reserve_secondary,
                real_reserve_primary=0,
                real_reserve_secondary=params.real_reserve_secondary,
                fee_numerator=params.fee_numerator,
                fee_denominator=params.fee_denominator,
            )
            journal.set_item(self._state.assets, asset_id, record)
            journal.set_item(self._state.ledgers, asset_id, ledger)

            ledger.mint(self.address, creator_norm, self._initial_mint)
            self.env.emit(AssetLaunched(asset_id, name, symbol, creator_norm))

            if value_in > 0:
                quote = self._execute_buy(record, creator_norm, value_in)

        logger.info(
            "asset_launched",
            asset_id=asset_id,
            symbol=symbol,
            creator=creator_norm,
            initial_buy=value_in,
        )
        if quote is not None:
            self._log_purchase(asset_id, creator_norm, value_in, quote)
        return asset_id

    def buy(self, asset_id: str, value_in: int, buyer: str) -> int:
        """Buy tokens of an existing asset with value_in native units.

        Returns:
            Tokens minted to the buyer

        Raises:
            ValidationError: Unknown asset or value_in <= 0
            StateError: Asset has migrated
            LiquidityError: The buy would drain the curve's secondary reserve
            TransferError: Buyer cannot pay value_in
        """
        buyer_norm = normalize_address(buyer)
        with self.env.atomic():
            record = self._require_record(asset_id)
            if not is_tradable(record):
                raise reject(StateError(TRADING_MIGRATED), "buy", asset_id=record.asset_id)
            if value_in <= 0:
                raise reject(ValidationError(AMOUNT_NOT_POSITIVE), "buy", asset_id=record.asset_id)
            quote = self._execute_buy(record, buyer_norm, value_in)

        self._log_purchase(record.asset_id, buyer_norm, value_in, quote)
        return quote.out_amount

    def sell(self, asset_id: str, amount: int, seller: str) -> int:
        """Sell amount tokens back into the curve.

        The tokens are pulled with transfer_from, so the seller must first
        approve the registry for at least amount.

        Returns:
            Native value paid to the seller (after fee)

        Raises:
            ValidationError: Unknown asset or amount <= 0
            StateError: Asset has migrated, or a guarded operation is running
            LiquidityError: Payout is zero or exceeds the asset's real reserve
            TransferError: Token pull or native payout failed
        """
        seller_norm = normalize_address(seller)
        with self.env.atomic(), self.guard.guard("sell"):
            record = self._require_record(asset_id)
            if amount <= 0:
                raise reject(ValidationError(AMOUNT_NOT_POSITIVE), "sell", asset_id=record.asset_id)
            if not is_tradable(record):
                raise reject(StateError(TRADING_MIGRATED), "sell", asset_id=record.asset_id)

            quote = compute_sell(
                record.virtual_reserve_primary,
                record.virtual_reserve_secondary,
                amount,
                record.fee_numerator,
                record.fee_denominator,
            )
            if quote.gross_out == 0 or quote.gross_out > record.real_reserve_primary:
                raise reject(
                    LiquidityError(INSUFFICIENT_LIQUIDITY),
                    "sell",
                    asset_id=record.asset_id,
                    gross_out=quote.gross_out,
                    real_reserve_primary=record.real_reserve_primary,
                )

            ledger = self._state.ledgers[record.asset_id]
            try:
                ledger.transfer_from(self.address, seller_norm, self.address, amount)
            except LaunchpadError as err:
                logger.warning(
                    "sell_token_pull_failed",
                    asset_id=record.asset_id,
                    seller=seller_norm,
                    amount=amount,
                    error=str(err),
                )
                raise TransferError(TRANSFER_FAILED) from err

            self._update(
                record,
                virtual_reserve_primary=quote.new_reserve_a,
                virtual_reserve_secondary=quote.new_reserve_b,
                real_reserve_primary=(S(record.real_reserve_primary) - quote.gross_out).value,
                real_reserve_secondary=record.real_reserve_secondary + amount,
            )
            self.env.bank.transfer(self.address, seller_norm, quote.net_out)
            self._accrue_fee(quote.fee)
            self.env.emit(AssetSold(record.asset_id, seller_norm, amount, quote.net_out))

        logger.info(
            "asset_sold",
            asset_id=record.asset_id,
            seller=seller_norm,
            amount=amount,
            gross_out=quote.gross_out,
            net_out=quote.net_out,
            fee=quote.fee,
        )
        return quote.net_out

    def migrate_liquidity(self, asset_id: str, *, caller: str) -> int:
        """Hand an asset's real native reserve to the external venue.

        The migration fee (capped at the reserve) is kept as protocol fee and
        the asset becomes permanently untradable on the curve.

        Returns:
            Native value handed to the migrator

        Raises:
            AuthorizationError: Caller is not the owner
            ValidationError: Unknown asset
            StateError: Asset already migrated
            NotImplementedError: No migrator is wired in
        """
        with self.env.atomic(), self.guard.guard("migrate_liquidity"):
            self.require_owner(caller)
            record = self._require_record(asset_id)
            if not is_tradable(record):
                raise reject(StateError(TRADING_MIGRATED), "migrate_liquidity", asset_id=record.asset_id)
            if self._migrator is None:
                raise NotImplementedError("Liquidity migration is not available")

            fee = min(self._state.parameters.migration_fee, record.real_reserve_primary)
            value = (S(record.real_reserve_primary) - fee).value
            before = replace(record)
            self._update(record, real_reserve_primary=0, migrated=True)
            self._accrue_fee(fee)

            migrator_address = normalize_address(self._migrator.address)
            self.env.bank.transfer(self.address, migrator_address, value)
            self._migrator.migrate_liquidity(before, value)
            self.env.emit(LiquidityMigrated(record.asset_id, migrator_address, value, fee))

        logger.info("liquidity_migrated", asset_id=record.asset_id, value=value, fee=fee)
        return value

    # --- AdminController entry points (authorization is checked by the caller) ---

    def _replace_parameters(self, parameters: GlobalParameters) -> None:
        self.env.journal.set_attr(self._state, "parameters", parameters)

    def _replace_owner(self, new_owner: str) -> None:
        self.env.journal.set_attr(self._state, "owner", normalize_address(new_owner, validate=True))

    def _take_fees(self) -> int:
        amount = self._state.accumulated_fees
        self.env.journal.set_attr(self._state, "accumulated_fees", 0)
        return amount

    # --- Internals ---

    def _require_record(self, asset_id: str) -> AssetRecord:
        record = self._state.assets.get(normalize_address(asset_id))
        if record is None:
            raise reject(ValidationError(INVALID_TOKEN), "lookup", asset_id=asset_id)
        return record

    def _update(self, record: AssetRecord, **changes: object) -> None:
        for name, value in changes.items():
            self.env.journal.set_attr(record, name, value)

    def _execute_buy(self, record: AssetRecord, buyer: str, value_in: int) -> BuyQuote:
        quote = compute_buy(
            record.virtual_reserve_primary,
            record.virtual_reserve_secondary,
            value_in,
            record.fee_numerator,
            record.fee_denominator,
        )
        # The secondary virtual reserve must stay positive or the curve is dead
        if quote.new_reserve_b == 0:
            raise reject(
                LiquidityError(CURVE_EXHAUSTED),
                "buy",
                asset_id=record.asset_id,
                value_in=value_in,
                virtual_reserve_secondary=record.virtual_reserve_secondary,
            )

        self.env.bank.transfer(buyer, self.address, value_in)
        self._update(
            record,
            virtual_reserve_primary=quote.new_reserve_a,
            virtual_reserve_secondary=quote.new_reserve_b,
            real_reserve_primary=(S(record.real_reserve_primary) + quote.net_in).value,
            real_reserve_secondary=record.real_reserve_secondary - quote.out_amount,
        )
        self._state.ledgers[record.asset_id].mint(self.address, buyer, quote.out_amount)
        self._accrue_fee(quote.fee)
        self.env.emit(AssetPurchased(record.asset_id, buyer, quote.out_amount, value_in))
        return quote

    def _accrue_fee(self, fee: int) -> None:
        self.env.journal.set_attr(
            self._state, "accumulated_fees", (S(self._state.accumulated_fees) + fee).to_uint256()
        )

    def _log_purchase(self, asset_id: str, buyer: str, value_in: int, quote: BuyQuote) -> None:
        logger.info(
            "asset_purchased",
            asset_id=asset_id,
            buyer=buyer,
            value_in=value_in,
            out_amount=quote.out_amount,
            fee=quote.fee,
        )

