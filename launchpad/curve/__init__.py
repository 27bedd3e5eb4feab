"""Bonding-curve pricing."""

from launchpad.curve.engine import BuyQuote, SellQuote, compute_buy, compute_sell, spot_price

__all__ = [
    "BuyQuote",
    "SellQuote",
    "compute_buy",
    "compute_sell",
    "spot_price",
]
