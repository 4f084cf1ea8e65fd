"""Immutable player snapshots for read-only display."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from minerapp.entities import Millis, MineralType, Money, Player, PlayerId, ToolType


@dataclass(frozen=True)
class PlayerSnapshot:
    """Frozen copy of a ledger record taken under the player's lock."""

    player_id: PlayerId
    balance: Money
    energy: int
    max_energy: int
    inventory: Mapping[MineralType, int]
    tool_counts: Mapping[ToolType, int]
    mining_power: int
    last_mining_at: Optional[Millis]

    @classmethod
    def capture(cls, player: Player, *, max_energy: int, mining_power: int) -> "PlayerSnapshot":
        return cls(
            player_id=player.player_id,
            balance=player.balance,
            energy=player.energy,
            max_energy=max_energy,
            inventory=MappingProxyType(dict(player.inventory)),
            tool_counts=MappingProxyType(dict(player.tool_counts)),
            mining_power=mining_power,
            last_mining_at=player.last_mining_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""

        return {
            "player_id": self.player_id,
            "balance": self.balance,
            "energy": self.energy,
            "max_energy": self.max_energy,
            "inventory": {m.value: count for m, count in self.inventory.items()},
            "tool_counts": {t.value: count for t, count in self.tool_counts.items()},
            "mining_power": self.mining_power,
            "last_mining_at": self.last_mining_at,
        }
