"""API endpoints for the launchpad.

Handlers are async and never await, so every operation runs to completion on
the event loop thread: state-changing calls are sequenced one at a time, as
the core expects from its host.

The caller identity comes from the X-Caller header.
"""

import os

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException

from launchpad.errors import ValidationError
from launchpad.models.api import (
    ApproveRequest,
    AssetResponse,
    BalanceResponse,
    BuyQuoteResponse,
    BuyRequest,
    BuyResponse,
    ClaimFeesRequest,
    ClaimFeesResponse,
    DepositRequest,
    ErrorResponse,
    FeeRateUpdate,
    FeesResponse,
    LaunchRequest,
    LaunchResponse,
    MigrationFeeUpdate,
    MigrationResponse,
    ParametersResponse,
    ReservesUpdate,
    SellQuoteResponse,
    SellRequest,
    SellResponse,
)
from launchpad.models.types import is_valid_address, normalize_address, validate_uint256
from launchpad.system import Launchpad, get_default_launchpad

logger = structlog.get_logger()

# Documented on every route; bodies are built by the handlers in api.main
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid input or rejected transfer"},
    403: {"model": ErrorResponse, "description": "Caller is not authorized"},
    409: {"model": ErrorResponse, "description": "Asset state or liquidity forbids the operation"},
}

router = APIRouter(responses=ERROR_RESPONSES)

# Host faucet for local development (POST /accounts/{address}/deposit)
ENABLE_FAUCET = os.environ.get("LAUNCHPAD_ENABLE_FAUCET", "false").lower() in ("true", "1", "yes")


def get_launchpad() -> Launchpad:
    """Dependency provider for the launchpad instance.

    Override this in tests to inject a fresh launchpad:
        app.dependency_overrides[get_launchpad] = lambda: launchpad
    """
    return get_default_launchpad()


def get_faucet_enabled() -> bool:
    return ENABLE_FAUCET


def get_caller(x_caller: str = Header(alias="X-Caller")) -> str:
    """Caller identity supplied by the host."""
    if not is_valid_address(x_caller):
        raise ValidationError(f"Invalid caller: {x_caller}")
    return normalize_address(x_caller)


def _address(value: str) -> str:
    if not is_valid_address(value):
        raise ValidationError(f"Invalid address: {value}")
    return normalize_address(value)


def _amount(value: str) -> int:
    try:
        return int(validate_uint256(value))
    except ValueError as err:
        raise ValidationError(str(err)) from err


# --- Assets ---


@router.post("/assets", response_model=LaunchResponse, status_code=201)
async def launch_asset(
    request: LaunchRequest,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> LaunchResponse:
    asset_id = launchpad.registry.launch(
        request.name, request.symbol, caller, int(request.value)
    )
    record = launchpad.registry.get_asset(asset_id)
    return LaunchResponse(asset_id=asset_id, asset=AssetResponse.from_record(record))


@router.get("/assets", response_model=list[AssetResponse])
async def list_assets(launchpad: Launchpad = Depends(get_launchpad)) -> list[AssetResponse]:
    return [AssetResponse.from_record(r) for r in launchpad.registry.assets()]


@router.get("/assets/{asset_id}", response_model=AssetResponse)
async def get_asset(asset_id: str, launchpad: Launchpad = Depends(get_launchpad)) -> AssetResponse:
    return AssetResponse.from_record(launchpad.registry.get_asset(_address(asset_id)))


@router.post("/assets/{asset_id}/buy", response_model=BuyResponse)
async def buy_asset(
    asset_id: str,
    request: BuyRequest,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> BuyResponse:
    out_amount = launchpad.registry.buy(_address(asset_id), int(request.value), caller)
    return BuyResponse(out_amount=out_amount)


@router.post("/assets/{asset_id}/sell", response_model=SellResponse)
async def sell_asset(
    asset_id: str,
    request: SellRequest,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> SellResponse:
    net_out = launchpad.registry.sell(_address(asset_id), int(request.amount), caller)
    return SellResponse(net_out=net_out)


@router.post("/assets/{asset_id}/approve", status_code=204)
async def approve_asset(
    asset_id: str,
    request: ApproveRequest,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> None:
    ledger = launchpad.registry.ledger(_address(asset_id))
    spender = request.spender or launchpad.registry.address
    with launchpad.env.atomic():
        ledger.approve(caller, spender, int(request.amount))


@router.get("/assets/{asset_id}/balances/{holder}", response_model=BalanceResponse)
async def get_balance(
    asset_id: str, holder: str, launchpad: Launchpad = Depends(get_launchpad)
) -> BalanceResponse:
    ledger = launchpad.registry.ledger(_address(asset_id))
    holder_norm = _address(holder)
    return BalanceResponse(holder=holder_norm, balance=ledger.balance_of(holder_norm))


@router.get("/assets/{asset_id}/quote/buy", response_model=BuyQuoteResponse)
async def quote_buy(
    asset_id: str, value: str, launchpad: Launchpad = Depends(get_launchpad)
) -> BuyQuoteResponse:
    quote = launchpad.registry.quote_buy(_address(asset_id), _amount(value))
    return BuyQuoteResponse(
        fee=quote.fee,
        net_in=quote.net_in,
        out_amount=quote.out_amount,
        new_reserve_primary=quote.new_reserve_a,
        new_reserve_secondary=quote.new_reserve_b,
    )


@router.get("/assets/{asset_id}/quote/sell", response_model=SellQuoteResponse)
async def quote_sell(
    asset_id: str, amount: str, launchpad: Launchpad = Depends(get_launchpad)
) -> SellQuoteResponse:
    quote = launchpad.registry.quote_sell(_address(asset_id), _amount(amount))
    return SellQuoteResponse(
        fee=quote.fee,
        net_out=quote.net_out,
        gross_out=quote.gross_out,
        new_reserve_primary=quote.new_reserve_a,
        new_reserve_secondary=quote.new_reserve_b,
    )


# --- Global state ---


@router.get("/parameters", response_model=ParametersResponse)
async def get_parameters(launchpad: Launchpad = Depends(get_launchpad)) -> ParametersResponse:
    return ParametersResponse.from_parameters(
        launchpad.registry.parameters, launchpad.registry.owner
    )


@router.get("/fees", response_model=FeesResponse)
async def get_fees(launchpad: Launchpad = Depends(get_launchpad)) -> FeesResponse:
    return FeesResponse(accumulated_fees=launchpad.registry.accumulated_fees)


# --- Admin ---


@router.put("/admin/reserves", response_model=ParametersResponse)
async def update_reserves(
    request: ReservesUpdate,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> ParametersResponse:
    params = launchpad.admin.update_global_reserves(
        int(request.virtual_reserve_primary),
        int(request.virtual_reserve_secondary),
        int(request.real_reserve_secondary),
        caller=caller,
    )
    return ParametersResponse.from_parameters(params, launchpad.registry.owner)


@router.put("/admin/fee-rate", response_model=ParametersResponse)
async def update_fee_rate(
    request: FeeRateUpdate,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> ParametersResponse:
    params = launchpad.admin.update_fee_rate(
        int(request.numerator), int(request.denominator), caller=caller
    )
    return ParametersResponse.from_parameters(params, launchpad.registry.owner)


@router.put("/admin/migration-fee", response_model=ParametersResponse)
async def update_migration_fee(
    request: MigrationFeeUpdate,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> ParametersResponse:
    params = launchpad.admin.update_migration_fee(int(request.value), caller=caller)
    return ParametersResponse.from_parameters(params, launchpad.registry.owner)


@router.post("/admin/claim-fees", response_model=ClaimFeesResponse)
async def claim_fees(
    request: ClaimFeesRequest,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> ClaimFeesResponse:
    amount = launchpad.admin.claim_fees(request.recipient, caller=caller)
    return ClaimFeesResponse(recipient=request.recipient, amount=amount)


@router.post("/admin/assets/{asset_id}/migrate", response_model=MigrationResponse)
async def migrate_asset(
    asset_id: str,
    caller: str = Depends(get_caller),
    launchpad: Launchpad = Depends(get_launchpad),
) -> MigrationResponse:
    asset = _address(asset_id)
    value = launchpad.registry.migrate_liquidity(asset, caller=caller)
    return MigrationResponse(asset_id=asset, value=value)


# --- Native accounts (host) ---


@router.get("/accounts/{address}", response_model=BalanceResponse)
async def get_account(address: str, launchpad: Launchpad = Depends(get_launchpad)) -> BalanceResponse:
    holder = _address(address)
    return BalanceResponse(holder=holder, balance=launchpad.env.bank.balance_of(holder))


@router.post("/accounts/{address}/deposit", response_model=BalanceResponse)
async def deposit(
    address: str,
    request: DepositRequest,
    launchpad: Launchpad = Depends(get_launchpad),
    faucet_enabled: bool = Depends(get_faucet_enabled),
) -> BalanceResponse:
    if not faucet_enabled:
        raise HTTPException(status_code=404, detail="Faucet disabled")
    holder = _address(address)
    with launchpad.env.atomic():
        launchpad.env.bank.deposit(holder, int(request.amount))
    logger.info("faucet_deposit", address=holder, amount=request.amount)
    return BalanceResponse(holder=holder, balance=launchpad.env.bank.balance_of(holder))
