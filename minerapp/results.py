"""Typed outcomes returned by engine and market operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from minerapp.entities import (
    EconomyError,
    Millis,
    MineralType,
    Money,
    PlayerId,
    ToolType,
)


@dataclass(frozen=True)
class OperationResult:
    """Common shape of every economy outcome.

    ``error`` is ``None`` on success. On failure it holds the
    :class:`~minerapp.entities.EconomyError` describing why nothing changed.
    """

    player_id: PlayerId
    error: Optional[EconomyError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "player_id": self.player_id,
            "success": self.success,
        }
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload


@dataclass(frozen=True)
class MineResult(OperationResult):
    found: Mapping[MineralType, int] = field(default_factory=dict)
    mining_power: int = 0
    energy: int = 0
    mined_at: Optional[Millis] = None

    @property
    def is_empty(self) -> bool:
        return self.success and not self.found

    @property
    def total_found(self) -> int:
        return sum(self.found.values())

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.success:
            payload.update(
                {
                    "found": {m.value: count for m, count in self.found.items()},
                    "mining_power": self.mining_power,
                    "is_empty": self.is_empty,
                    "energy": self.energy,
                    "mined_at": self.mined_at,
                }
            )
        return payload


@dataclass(frozen=True)
class SellResult(OperationResult):
    mineral: Optional[MineralType] = None
    amount: int = 0
    value: Money = 0
    balance: Money = 0

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.success:
            payload.update(
                {
                    "mineral": self.mineral.value if self.mineral else None,
                    "amount": self.amount,
                    "value": self.value,
                    "balance": self.balance,
                }
            )
        return payload


@dataclass(frozen=True)
class BuyResult(OperationResult):
    tool: Optional[ToolType] = None
    price: Money = 0
    tool_count: int = 0
    balance: Money = 0

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.success:
            payload.update(
                {
                    "tool": self.tool.value if self.tool else None,
                    "price": self.price,
                    "tool_count": self.tool_count,
                    "balance": self.balance,
                }
            )
        return payload


__all__ = ["BuyResult", "MineResult", "OperationResult", "SellResult"]
