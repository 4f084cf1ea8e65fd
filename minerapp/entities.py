#!/usr/bin/env python3

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

PlayerId = str
Money = int
Millis = int


class MineralType(str, enum.Enum):
    COPPER = "copper"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


class ToolType(str, enum.Enum):
    PICKAXE = "pickaxe"
    DRILL = "drill"
    EXCAVATOR = "excavator"


MineralKey = Union[MineralType, str]
ToolKey = Union[ToolType, str]


def normalize_player_id(player_id: object) -> PlayerId:
    """Return the canonical ledger key for ``player_id``."""

    if player_id is None:
        raise ValueError("player_id is required")
    normalized = str(player_id).strip()
    if not normalized:
        raise ValueError("player_id must not be empty")
    return normalized


@dataclass
class Player:
    """Mutable ledger record for a single player."""

    player_id: PlayerId
    balance: Money = 0
    energy: int = 0
    inventory: Dict[MineralType, int] = field(
        default_factory=lambda: {mineral: 0 for mineral in MineralType}
    )
    tool_counts: Dict[ToolType, int] = field(
        default_factory=lambda: {tool: 0 for tool in ToolType}
    )
    last_mining_at: Optional[Millis] = None


class EconomyError(Exception):
    """Base class for expected, caller-recoverable economy failures."""

    code = "economy_error"

    def to_dict(self) -> Dict[str, object]:
        return {"code": self.code, "message": str(self)}


class UnknownKey(EconomyError):
    code = "unknown_key"

    def __init__(self, key: object, kind: str = "key") -> None:
        self.key = key
        self.kind = kind
        super().__init__(f"Unknown {kind}: {key!r}")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["key"] = self.key if isinstance(self.key, str) else repr(self.key)
        return payload


class UnknownMineral(UnknownKey):
    code = "unknown_mineral"

    def __init__(self, key: object) -> None:
        super().__init__(key, kind="mineral")


class UnknownTool(UnknownKey):
    code = "unknown_tool"

    def __init__(self, key: object) -> None:
        super().__init__(key, kind="tool")


class InsufficientEnergy(EconomyError):
    code = "insufficient_energy"

    def __init__(self, energy: int, required: int) -> None:
        self.energy = energy
        self.required = required
        super().__init__(f"Energy {energy} is below the required {required}")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload.update({"energy": self.energy, "required": self.required})
        return payload


class CooldownActive(EconomyError):
    code = "cooldown_active"

    def __init__(self, seconds_remaining: int) -> None:
        self.seconds_remaining = seconds_remaining
        super().__init__(f"Mining is cooling down for {seconds_remaining} more seconds")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["seconds_remaining"] = self.seconds_remaining
        return payload


class InvalidAmount(EconomyError):
    code = "invalid_amount"

    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class InsufficientInventory(EconomyError):
    code = "insufficient_inventory"

    def __init__(self, mineral: MineralType, available: int, requested: int) -> None:
        self.mineral = mineral
        self.available = available
        self.requested = requested
        super().__init__(
            f"Not enough {mineral.value}: have {available}, need {requested}"
        )

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload.update(
            {
                "mineral": self.mineral.value,
                "available": self.available,
                "requested": self.requested,
            }
        )
        return payload


class InsufficientBalance(EconomyError):
    code = "insufficient_balance"

    def __init__(self, balance: Money, required: Money) -> None:
        self.balance = balance
        self.required = required
        super().__init__(f"Balance {balance} is below the price {required}")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload.update({"balance": self.balance, "required": self.required})
        return payload
