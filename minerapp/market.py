"""Selling minerals for currency and buying tools with it."""

from __future__ import annotations

import logging
from typing import Any, Optional

from minerapp.catalog import Catalog
from minerapp.entities import (
    EconomyError,
    InsufficientBalance,
    InsufficientInventory,
    InvalidAmount,
    MineralKey,
    ToolKey,
    UnknownKey,
)
from minerapp.ledger import PlayerLedger
from minerapp.results import BuyResult, SellResult


logger = logging.getLogger(__name__)


def _coerce_amount(amount: Any) -> Optional[int]:
    """Return ``amount`` as a positive int, or ``None`` if it is unusable."""

    if amount is None or isinstance(amount, bool):
        return None
    if isinstance(amount, str):
        amount = amount.strip()
        if not amount:
            return None
        try:
            amount = int(amount)
        except ValueError:
            return None
    if isinstance(amount, float):
        if not amount.is_integer():
            return None
        amount = int(amount)
    if not isinstance(amount, int) or amount <= 0:
        return None
    return amount


class Market:
    """Single-step trades against the ledger.

    Each trade is validated completely before the player record is touched,
    so a rejected trade leaves no trace.
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: PlayerLedger,
        *,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._logger = logger_ or logger

    def _log_rejection(self, player_id: str, operation: str, error: EconomyError) -> None:
        self._logger.info(
            "Trade rejected",
            extra={
                "player_id": player_id,
                "operation": operation,
                "event_type": f"{operation}_rejected",
                "error_type": error.code,
            },
        )

    def sell(self, player_id: object, mineral_type: MineralKey, amount: Any) -> SellResult:
        player = self._ledger.get_or_create(player_id)

        try:
            spec = self._catalog.mineral(mineral_type)
        except UnknownKey as exc:
            self._log_rejection(player.player_id, "sell", exc)
            return SellResult(player_id=player.player_id, error=exc, balance=player.balance)

        units = _coerce_amount(amount)
        if units is None:
            error: EconomyError = InvalidAmount(amount)
            self._log_rejection(player.player_id, "sell", error)
            return SellResult(
                player_id=player.player_id,
                error=error,
                mineral=spec.mineral,
                balance=player.balance,
            )

        available = player.inventory.get(spec.mineral, 0)
        if available < units:
            error = InsufficientInventory(spec.mineral, available, units)
            self._log_rejection(player.player_id, "sell", error)
            return SellResult(
                player_id=player.player_id,
                error=error,
                mineral=spec.mineral,
                amount=units,
                balance=player.balance,
            )

        value = spec.value * units
        player.inventory[spec.mineral] = available - units
        player.balance += value

        self._logger.info(
            "Minerals sold",
            extra={
                "player_id": player.player_id,
                "operation": "sell",
                "event_type": "sell_completed",
                "mineral": spec.mineral,
                "amount": units,
                "value": value,
                "balance": player.balance,
            },
        )
        return SellResult(
            player_id=player.player_id,
            mineral=spec.mineral,
            amount=units,
            value=value,
            balance=player.balance,
        )

    def buy(self, player_id: object, tool_type: ToolKey) -> BuyResult:
        player = self._ledger.get_or_create(player_id)

        try:
            spec = self._catalog.tool(tool_type)
        except UnknownKey as exc:
            self._log_rejection(player.player_id, "buy", exc)
            return BuyResult(player_id=player.player_id, error=exc, balance=player.balance)

        if player.balance < spec.price:
            error = InsufficientBalance(player.balance, spec.price)
            self._log_rejection(player.player_id, "buy", error)
            return BuyResult(
                player_id=player.player_id,
                error=error,
                tool=spec.tool,
                price=spec.price,
                tool_count=player.tool_counts.get(spec.tool, 0),
                balance=player.balance,
            )

        player.balance -= spec.price
        player.tool_counts[spec.tool] = player.tool_counts.get(spec.tool, 0) + 1

        self._logger.info(
            "Tool purchased",
            extra={
                "player_id": player.player_id,
                "operation": "buy",
                "event_type": "buy_completed",
                "tool": spec.tool,
                "price": spec.price,
                "balance": player.balance,
            },
        )
        return BuyResult(
            player_id=player.player_id,
            tool=spec.tool,
            price=spec.price,
            tool_count=player.tool_counts[spec.tool],
            balance=player.balance,
        )
