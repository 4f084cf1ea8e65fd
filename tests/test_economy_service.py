"""Tests for the per-player serialised economy facade."""

import asyncio
import random

import pytest

from minerapp.entities import MineralType, ToolType
from minerapp.mining_engine import MiningEngine, MiningRules
from minerapp.services.economy_service import EconomyService
from minerapp.utils.randomness import SeededRandomSource


@pytest.mark.asyncio
async def test_snapshot_of_new_player(economy):
    snapshot = await economy.snapshot(99)

    assert snapshot.player_id == "99"
    assert snapshot.balance == 10
    assert snapshot.energy == 100
    assert snapshot.max_energy == 100
    assert snapshot.mining_power == 1
    assert snapshot.last_mining_at is None
    assert snapshot.tool_counts[ToolType.PICKAXE] == 1
    assert snapshot.to_dict()["inventory"] == {
        "copper": 0,
        "silver": 0,
        "gold": 0,
        "diamond": 0,
    }


@pytest.mark.asyncio
async def test_snapshot_is_detached_from_ledger(economy, ledger):
    snapshot = await economy.snapshot("p1")
    ledger.get("p1").inventory[MineralType.GOLD] = 9

    assert snapshot.inventory[MineralType.GOLD] == 0
    with pytest.raises(TypeError):
        snapshot.inventory[MineralType.GOLD] = 1  # type: ignore[index]


@pytest.mark.asyncio
async def test_mine_sell_buy_flow(economy, rng, clock):
    rng.extend([99.0])

    mined = await economy.mine("p1")
    sold = await economy.sell("p1", "diamond", 1)
    bought = await economy.buy("p1", "pickaxe")
    clock.advance(seconds=30)
    rng.extend([10.0, 10.0])
    mined_again = await economy.mine("p1")
    snapshot = await economy.snapshot("p1")

    assert mined.found == {MineralType.DIAMOND: 1}
    assert sold.value == 50
    assert bought.balance == 10
    assert mined_again.mining_power == 2
    assert snapshot.inventory[MineralType.COPPER] == 2
    assert snapshot.energy == 80
    assert snapshot.last_mining_at == 30_000


@pytest.mark.asyncio
async def test_concurrent_sells_never_overdraw_inventory(economy, ledger):
    ledger.get_or_create("p1").inventory[MineralType.GOLD] = 5

    results = await asyncio.gather(
        *(economy.sell("p1", "gold", 1) for _ in range(8))
    )

    assert sum(r.success for r in results) == 5
    assert sum(r.error_code == "insufficient_inventory" for r in results) == 3
    player = ledger.get("p1")
    assert player.inventory[MineralType.GOLD] == 0
    assert player.balance == 10 + 5 * 20


@pytest.mark.asyncio
async def test_concurrent_mines_only_one_passes_cooldown(economy, rng, ledger):
    rng.extend([10.0] * 4)

    results = await asyncio.gather(*(economy.mine("p1", now=0) for _ in range(4)))

    assert sum(r.success for r in results) == 1
    assert all(r.error_code == "cooldown_active" for r in results if not r.success)
    assert ledger.get("p1").energy == 90


@pytest.mark.asyncio
async def test_other_players_are_not_blocked(economy, ledger):
    lock = ledger.lock_for("busy")
    await lock.acquire()
    try:
        snapshot = await asyncio.wait_for(economy.snapshot("free"), timeout=1)
        assert snapshot.player_id == "free"

        pending = asyncio.ensure_future(economy.snapshot("busy"))
        await asyncio.sleep(0)
        assert not pending.done()
    finally:
        lock.release()
    assert (await pending).player_id == "busy"


@pytest.mark.asyncio
async def test_random_operation_sequences_keep_invariants(catalog, ledger, market, constants):
    engine = MiningEngine(
        catalog,
        ledger,
        rules=MiningRules.from_constants(constants),
        random_source=SeededRandomSource(2024),
    )
    economy = EconomyService(ledger, engine, market)
    chooser = random.Random(17)
    now = 0

    for _ in range(400):
        player_id = chooser.choice(["a", "b", "c"])
        action = chooser.choice(["mine", "sell", "buy", "snapshot"])
        now += chooser.choice([0, 5_000, 30_000, 45_000])
        if action == "mine":
            await economy.mine(player_id, now=now)
        elif action == "sell":
            await economy.sell(
                player_id,
                chooser.choice(list(MineralType) + ["ruby"]),
                chooser.choice([-1, 0, 1, 2, 5, None]),
            )
        elif action == "buy":
            await economy.buy(player_id, chooser.choice(list(ToolType) + ["laser"]))
        else:
            await economy.snapshot(player_id)

        for known in ledger.player_ids():
            player = ledger.get(known)
            assert player.balance >= 0
            assert 0 <= player.energy <= 100
            assert all(count >= 0 for count in player.inventory.values())
            assert all(count >= 0 for count in player.tool_counts.values())
