import asyncio

import pytest

from minerapp.utils.locks import KeyedAsyncLock


@pytest.mark.asyncio
async def test_guard_serialises_same_key():
    locks = KeyedAsyncLock()
    order = []

    async def worker(name: str) -> None:
        async with locks.guard("player"):
            order.append(f"{name}-start")
            await asyncio.sleep(0)
            order.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]
    assert not locks.locked("player")


@pytest.mark.asyncio
async def test_guard_does_not_block_other_keys():
    locks = KeyedAsyncLock()

    async with locks.guard("one"):
        assert locks.locked("one")
        assert not locks.locked("two")
        async with locks.guard("two"):
            assert locks.locked("two")

    assert len(locks) == 2


def test_unknown_key_is_not_locked():
    assert KeyedAsyncLock().locked("nobody") is False
