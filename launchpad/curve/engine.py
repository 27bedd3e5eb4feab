"""Bonding-curve math for launchpad assets.

Each asset trades against a virtual constant-product curve: x * y = k, where
x is the primary (native value) reserve and y the secondary (token) reserve.
A protocol fee is skimmed on the native side of every trade:
- buy: fee is taken from the value sent in, before it reaches the curve
- sell: fee is taken from the value paid out, after it leaves the curve

All arithmetic is integer floor division in 18-decimal fixed point so the
results match the on-chain reference exactly. Both functions are pure.
"""

from __future__ import annotations

from dataclasses import dataclass

from launchpad.constants import ONE_ETHER
from launchpad.errors import ValidationError
from launchpad.safe_int import S


@dataclass(frozen=True)
class BuyQuote:
    """Result of pushing native value into the curve."""

    fee: int
    net_in: int
    new_reserve_a: int
    new_reserve_b: int
    out_amount: int


@dataclass(frozen=True)
class SellQuote:
    """Result of pushing tokens into the curve."""

    fee: int
    net_out: int
    new_reserve_a: int
    new_reserve_b: int
    gross_out: int


def _check_curve(reserve_a: int, reserve_b: int, fee_num: int, fee_den: int) -> None:
    if reserve_a <= 0 or reserve_b <= 0:
        raise ValidationError(f"Curve reserves must be positive: ({reserve_a}, {reserve_b})")
    if fee_den <= 0:
        raise ValidationError(f"Fee denominator must be positive: {fee_den}")
    if fee_num < 0 or fee_num > fee_den:
        raise ValidationError(f"Fee ratio out of range: {fee_num}/{fee_den}")


def compute_buy(
    reserve_a: int,
    reserve_b: int,
    value_in: int,
    fee_num: int,
    fee_den: int,
) -> BuyQuote:
    """Calculate the curve state after buying with value_in.

    Formula:
        fee           = value_in * fee_num // fee_den
        net_in        = value_in - fee
        new_reserve_a = reserve_a + net_in
        new_reserve_b = reserve_a * reserve_b // new_reserve_a
        out_amount    = reserve_b - new_reserve_b

    The numerator of new_reserve_b uses the pre-trade reserve_a; the floor
    leaves the product reserve_a * reserve_b non-increasing.

    Args:
        reserve_a: Virtual primary reserve before the trade
        reserve_b: Virtual secondary reserve before the trade
        value_in: Native value sent in (fee included)
        fee_num: Fee numerator
        fee_den: Fee denominator

    Returns:
        BuyQuote with fee + net_in == value_in and 0 <= out_amount <= reserve_b

    Raises:
        ValidationError: If reserves are not positive, value_in is negative
            or the fee ratio is malformed
    """
    _check_curve(reserve_a, reserve_b, fee_num, fee_den)
    if value_in < 0:
        raise ValidationError(f"Value in cannot be negative: {value_in}")

    sa, sb = S(reserve_a), S(reserve_b)
    fee = S(value_in).mul_div(fee_num, fee_den)
    net_in = S(value_in) - fee
    new_reserve_a = sa + net_in
    new_reserve_b = (sa * sb) // new_reserve_a
    out_amount = sb - new_reserve_b

    return BuyQuote(
        fee=fee.value,
        net_in=net_in.value,
        new_reserve_a=new_reserve_a.to_uint256(),
        new_reserve_b=new_reserve_b.to_uint256(),
        out_amount=out_amount.value,
    )


def compute_sell(
    reserve_a: int,
    reserve_b: int,
    amount_in: int,
    fee_num: int,
    fee_den: int,
) -> SellQuote:
    """Calculate the curve state after selling amount_in tokens.

    Formula:
        new_reserve_b = reserve_b + amount_in
        new_reserve_a = reserve_a * reserve_b // new_reserve_b
        gross_out     = reserve_a - new_reserve_a
        fee           = gross_out * fee_num // fee_den
        net_out       = gross_out - fee

    The caller must still check gross_out against the real primary reserve
    before paying anything out.

    Args:
        reserve_a: Virtual primary reserve before the trade
        reserve_b: Virtual secondary reserve before the trade
        amount_in: Tokens sold into the curve
        fee_num: Fee numerator
        fee_den: Fee denominator

    Returns:
        SellQuote with fee + net_out == gross_out

    Raises:
        ValidationError: If reserves are not positive, amount_in is negative
            or the fee ratio is malformed
    """
    _check_curve(reserve_a, reserve_b, fee_num, fee_den)
    if amount_in < 0:
        raise ValidationError(f"Amount in cannot be negative: {amount_in}")

    sa, sb = S(reserve_a), S(reserve_b)
    new_reserve_b = sb + amount_in
    new_reserve_a = (sa * sb) // new_reserve_b
    gross_out = sa - new_reserve_a
    fee = gross_out.mul_div(fee_num, fee_den)
    net_out = gross_out - fee

    return SellQuote(
        fee=fee.value,
        net_out=net_out.value,
        new_reserve_a=new_reserve_a.to_uint256(),
        new_reserve_b=new_reserve_b.to_uint256(),
        gross_out=gross_out.value,
    )


def spot_price(reserve_a: int, reserve_b: int) -> int:
    """Marginal price of one whole token in native units (1e18 scale).

    Returns 0 for an empty secondary reserve instead of raising; the
    value is informational only and never used for settlement.
    """
    if reserve_b <= 0:
        return 0
    return S(reserve_a).mul_div(ONE_ETHER, reserve_b).value
