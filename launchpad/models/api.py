"""Pydantic models for the launchpad HTTP API.

Amounts travel as decimal strings so 256-bit values survive JSON; field
names are camelCase on the wire and snake_case in Python.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from launchpad.models.types import Address, Uint256
from launchpad.registry import AssetRecord, GlobalParameters


class LaunchRequest(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    symbol: str = Field(min_length=1, max_length=11)
    value: Uint256 = Field(default="0", description="Native value for the optional first buy.")


class BuyRequest(BaseModel):
    value: Uint256 = Field(description="Native value spent, fee included.")


class SellRequest(BaseModel):
    amount: Uint256 = Field(description="Tokens sold back into the curve.")


class ApproveRequest(BaseModel):
    amount: Uint256
    spender: Address | None = Field(
        default=None,
        description="Defaults to the registry, which pulls tokens on sell.",
    )


class DepositRequest(BaseModel):
    amount: Uint256


class ReservesUpdate(BaseModel):
    virtual_reserve_primary: Uint256 = Field(alias="virtualReservePrimary")
    virtual_reserve_secondary: Uint256 = Field(alias="virtualReserveSecondary")
    real_reserve_secondary: Uint256 = Field(alias="realReserveSecondary")

    model_config = {"populate_by_name": True}


class FeeRateUpdate(BaseModel):
    numerator: Uint256
    denominator: Uint256


class MigrationFeeUpdate(BaseModel):
    value: Uint256


class ClaimFeesRequest(BaseModel):
    recipient: Address


class AssetResponse(BaseModel):
    """One asset record as stored by the registry."""

    asset_id: Address = Field(alias="assetId")
    creator: Address
    name: str
    symbol: str
    virtual_reserve_primary: Uint256 = Field(alias="virtualReservePrimary")
    virtual_reserve_secondary: Uint256 = Field(alias="virtualReserveSecondary")
    real_reserve_primary: Uint256 = Field(alias="realReservePrimary")
    real_reserve_secondary: str = Field(
        alias="realReserveSecondary",
        description="Signed remaining issuable supply; reported raw, may be negative.",
    )
    fee_numerator: Uint256 = Field(alias="feeNumerator")
    fee_denominator: Uint256 = Field(alias="feeDenominator")
    migrated: bool

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: AssetRecord) -> AssetResponse:
        return cls(
            asset_id=record.asset_id,
            creator=record.creator,
            name=record.name,
            symbol=record.symbol,
            virtual_reserve_primary=record.virtual_reserve_primary,
            virtual_reserve_secondary=record.virtual_reserve_secondary,
            real_reserve_primary=record.real_reserve_primary,
            real_reserve_secondary=str(record.real_reserve_secondary),
            fee_numerator=record.fee_numerator,
            fee_denominator=record.fee_denominator,
            migrated=record.migrated,
        )


class ParametersResponse(BaseModel):
    virtual_reserve_primary: Uint256 = Field(alias="virtualReservePrimary")
    virtual_reserve_secondary: Uint256 = Field(alias="virtualReserveSecondary")
    real_reserve_secondary: Uint256 = Field(alias="realReserveSecondary")
    fee_numerator: Uint256 = Field(alias="feeNumerator")
    fee_denominator: Uint256 = Field(alias="feeDenominator")
    migration_fee: Uint256 = Field(alias="migrationFee")
    owner: Address

    model_config = {"populate_by_name": True}

    @classmethod
    def from_parameters(cls, params: GlobalParameters, owner: str) -> ParametersResponse:
        return cls(
            virtual_reserve_primary=params.virtual_reserve_primary,
            virtual_reserve_secondary=params.virtual_reserve_secondary,
            real_reserve_secondary=params.real_reserve_secondary,
            fee_numerator=params.fee_numerator,
            fee_denominator=params.fee_denominator,
            migration_fee=params.migration_fee,
            owner=owner,
        )


class LaunchResponse(BaseModel):
    asset_id: Address = Field(alias="assetId")
    asset: AssetResponse

    model_config = {"populate_by_name": True}


class BuyResponse(BaseModel):
    out_amount: Uint256 = Field(alias="outAmount")

    model_config = {"populate_by_name": True}


class SellResponse(BaseModel):
    net_out: Uint256 = Field(alias="netOut")

    model_config = {"populate_by_name": True}


class BuyQuoteResponse(BaseModel):
    fee: Uint256
    net_in: Uint256 = Field(alias="netIn")
    out_amount: Uint256 = Field(alias="outAmount")
    new_reserve_primary: Uint256 = Field(alias="newReservePrimary")
    new_reserve_secondary: Uint256 = Field(alias="newReserveSecondary")

    model_config = {"populate_by_name": True}


class SellQuoteResponse(BaseModel):
    fee: Uint256
    net_out: Uint256 = Field(alias="netOut")
    gross_out: Uint256 = Field(alias="grossOut")
    new_reserve_primary: Uint256 = Field(alias="newReservePrimary")
    new_reserve_secondary: Uint256 = Field(alias="newReserveSecondary")

    model_config = {"populate_by_name": True}


class BalanceResponse(BaseModel):
    holder: Address
    balance: Uint256


class FeesResponse(BaseModel):
    accumulated_fees: Uint256 = Field(alias="accumulatedFees")

    model_config = {"populate_by_name": True}


class ClaimFeesResponse(BaseModel):
    recipient: Address
    amount: Uint256


class MigrationResponse(BaseModel):
    asset_id: Address = Field(alias="assetId")
    value: Uint256 = Field(description="Native value handed to the migrator.")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str = Field(description="Error class, e.g. ValidationError.")
    detail: str = Field(description="Reason surfaced to the caller.")
