"""Async facade the command layer calls for every economy action."""

from __future__ import annotations

import logging
from typing import Any, Optional

from minerapp.entities import Millis, MineralKey, ToolKey, normalize_player_id
from minerapp.ledger import PlayerLedger
from minerapp.market import Market
from minerapp.mining_engine import MiningEngine
from minerapp.results import BuyResult, MineResult, SellResult
from minerapp.snapshots import PlayerSnapshot
from minerapp.utils.logging_helpers import ContextLoggerAdapter, add_context


class EconomyService:
    """Serialise economy operations per player.

    Every call takes the player's lock from the ledger and then runs the
    synchronous engine or market operation to completion, so at most one
    mutation per player is in flight. Different players never wait on each
    other.
    """

    def __init__(
        self,
        ledger: PlayerLedger,
        engine: MiningEngine,
        market: Market,
        *,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
    ) -> None:
        self._ledger = ledger
        self._engine = engine
        self._market = market
        self._logger: ContextLoggerAdapter = add_context(
            logger or logging.getLogger(__name__),
            request_category="economy",
        )

    @property
    def ledger(self) -> PlayerLedger:
        return self._ledger

    async def mine(self, player_id: Any, now: Optional[Millis] = None) -> MineResult:
        key = normalize_player_id(player_id)
        async with self._ledger.guard(key):
            result = self._engine.mine(key, now)
        self._log_outcome("mine", key, result.error_code)
        return result

    async def sell(self, player_id: Any, mineral_type: MineralKey, amount: Any) -> SellResult:
        key = normalize_player_id(player_id)
        async with self._ledger.guard(key):
            result = self._market.sell(key, mineral_type, amount)
        self._log_outcome("sell", key, result.error_code)
        return result

    async def buy(self, player_id: Any, tool_type: ToolKey) -> BuyResult:
        key = normalize_player_id(player_id)
        async with self._ledger.guard(key):
            result = self._market.buy(key, tool_type)
        self._log_outcome("buy", key, result.error_code)
        return result

    async def snapshot(self, player_id: Any) -> PlayerSnapshot:
        key = normalize_player_id(player_id)
        async with self._ledger.guard(key):
            player = self._ledger.get_or_create(key)
            return PlayerSnapshot.capture(
                player,
                max_energy=self._ledger.max_energy,
                mining_power=self._engine.mining_power(player),
            )

    def _log_outcome(self, operation: str, player_id: str, error_code: Optional[str]) -> None:
        self._logger.debug(
            "Economy operation finished",
            extra={
                "player_id": player_id,
                "operation": operation,
                "event_type": "operation_failed" if error_code else "operation_succeeded",
                "error_type": error_code,
            },
        )
