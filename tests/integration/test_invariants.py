"""Randomized operation sequences checked against accounting invariants.

After every step:
- the registry's native balance equals the sum of real reserves plus fees
- accumulated fees equal the sum of fees of trades since the last claim
- each asset's virtual product never increases
- a rejected operation leaves balances, records and events untouched
"""

import random

import pytest

from launchpad.errors import LaunchpadError
from tests.helpers import (
    ALICE,
    BOB,
    CAROL,
    ETHER,
    OWNER,
    REGISTRY,
    make_launchpad,
    native_balances,
    reference_buy,
    reference_sell,
    registry_backing,
)

TRADERS = [ALICE, BOB, CAROL]


def _ledger_view(ledger):
    holders = TRADERS + [REGISTRY]
    return (
        ledger.total_supply,
        [ledger.balance_of(h) for h in holders],
        [ledger.allowance(h, REGISTRY) for h in holders],
    )


def _state(lp):
    return (
        [r for r in lp.registry.assets()],
        lp.registry.accumulated_fees,
        native_balances(lp),
        len(lp.events),
        {r.asset_id: _ledger_view(lp.registry.ledger(r.asset_id)) for r in lp.registry.assets()},
    )


@pytest.mark.parametrize("seed", range(8))
def test_random_sequence_keeps_invariants(seed):
    """Launches, buys, sells and claims in random order keep the books balanced."""
    rng = random.Random(seed)
    lp = make_launchpad(funded=TRADERS, balance=1_000 * ETHER)
    registry = lp.registry
    expected_fees = 0
    products: dict[str, int] = {}

    for step in range(60):
        op = rng.choice(["launch", "buy", "buy", "sell", "sell", "claim", "bad"])
        trader = rng.choice(TRADERS)
        ids = [r.asset_id for r in registry.assets()]

        if op == "launch" or not ids:
            value = rng.choice([0, rng.randrange(1, 3 * ETHER)])
            asset_id = registry.launch(f"T{step}", f"T{step}", trader, value)
            if value:
                expected_fees += reference_buy(15 * 10**15, 1_073_000_000 * ETHER, value, 100, 10_000).fee

        elif op == "buy":
            asset_id = rng.choice(ids)
            record = registry.get_asset(asset_id)
            value = rng.randrange(1, 5 * ETHER)
            expected = reference_buy(
                record.virtual_reserve_primary,
                record.virtual_reserve_secondary,
                value,
                record.fee_numerator,
                record.fee_denominator,
            )
            assert registry.buy(asset_id, value, trader) == expected.out_amount
            expected_fees += expected.fee

        elif op == "sell":
            asset_id = rng.choice(ids)
            ledger = registry.ledger(asset_id)
            held = ledger.balance_of(trader)
            if held == 0:
                continue
            amount = rng.randrange(1, held + 1)
            record = registry.get_asset(asset_id)
            expected = reference_sell(
                record.virtual_reserve_primary,
                record.virtual_reserve_secondary,
                amount,
                record.fee_numerator,
                record.fee_denominator,
            )
            ledger.approve(trader, REGISTRY, amount)
            if expected.gross_out == 0 or expected.gross_out > record.real_reserve_primary:
                before = _state(lp)
                with pytest.raises(LaunchpadError):
                    registry.sell(asset_id, amount, trader)
                assert _state(lp) == before
                continue
            assert registry.sell(asset_id, amount, trader) == expected.net_out
            expected_fees += expected.fee

        elif op == "claim":
            assert lp.admin.claim_fees(OWNER, caller=OWNER) == expected_fees
            expected_fees = 0

        else:
            before = _state(lp)
            with pytest.raises(LaunchpadError):
                registry.buy(rng.choice(ids), 0, trader)
            assert _state(lp) == before

        assert lp.env.bank.balance_of(REGISTRY) == registry_backing(lp)
        assert registry.accumulated_fees == expected_fees
        for record in registry.assets():
            product = record.virtual_reserve_primary * record.virtual_reserve_secondary
            assert product <= products.get(record.asset_id, product)
            products[record.asset_id] = product
            assert record.real_reserve_primary >= 0
