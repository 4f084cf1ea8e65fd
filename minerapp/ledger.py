"""In-memory per-player ledger."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncContextManager, Dict, Iterator, Mapping, Optional

from minerapp.catalog import Catalog
from minerapp.config import GameConstants, coerce_positive_int, get_game_constants
from minerapp.entities import (
    MineralType,
    Money,
    Player,
    PlayerId,
    ToolType,
    UnknownKey,
    normalize_player_id,
)
from minerapp.utils.locks import KeyedAsyncLock


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerDefaults:
    """Starting values applied to a player on first reference."""

    balance: Money = 10
    energy: int = 100
    max_energy: int = 100
    tools: Mapping[ToolType, int] = field(
        default_factory=lambda: {ToolType.PICKAXE: 1}
    )

    @classmethod
    def from_constants(
        cls,
        constants: Optional[GameConstants] = None,
    ) -> "PlayerDefaults":
        constants = constants or get_game_constants()
        section = constants.player
        defaults = constants.default_section("player")

        max_energy = coerce_positive_int(
            section.get("max_energy"),
            default=int(defaults.get("max_energy", 100)),
            setting="player.max_energy",
        )
        energy = coerce_positive_int(
            section.get("starting_energy"),
            default=int(defaults.get("starting_energy", max_energy)),
            setting="player.starting_energy",
            allow_zero=True,
        )
        balance = coerce_positive_int(
            section.get("starting_balance"),
            default=int(defaults.get("starting_balance", 10)),
            setting="player.starting_balance",
            allow_zero=True,
        )

        raw_tools = section.get("starting_tools")
        if not isinstance(raw_tools, Mapping):
            raw_tools = defaults.get("starting_tools") or {}
        tools: Dict[ToolType, int] = {}
        for key, count in raw_tools.items():
            try:
                tool = Catalog.parse_tool(key)
            except UnknownKey:
                logger.warning(
                    "Ignoring unknown starting tool %s.",
                    key,
                    extra={"category": "config", "error_type": "UnknownTool"},
                )
                continue
            tools[tool] = coerce_positive_int(
                count,
                default=0,
                setting=f"player.starting_tools.{tool.value}",
                allow_zero=True,
            )

        return cls(
            balance=balance,
            energy=min(energy, max_energy),
            max_energy=max_energy,
            tools=tools,
        )

    def new_player(self, player_id: PlayerId) -> Player:
        return Player(
            player_id=player_id,
            balance=self.balance,
            energy=self.energy,
            inventory={mineral: 0 for mineral in MineralType},
            tool_counts={tool: int(self.tools.get(tool, 0)) for tool in ToolType},
            last_mining_at=None,
        )


class PlayerLedger:
    """Explicitly owned store of :class:`Player` records keyed by player id.

    Records are created lazily and kept for the lifetime of the ledger. The
    ledger hands out the mutable record itself; callers are responsible for
    validating their own mutations and for holding :meth:`lock_for` while
    they do so.
    """

    def __init__(
        self,
        defaults: Optional[PlayerDefaults] = None,
        *,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self._defaults = defaults or PlayerDefaults()
        self._players: Dict[PlayerId, Player] = {}
        self._logger = logger_ or logger
        self._locks = KeyedAsyncLock(logger=self._logger)

    @property
    def defaults(self) -> PlayerDefaults:
        return self._defaults

    @property
    def max_energy(self) -> int:
        return self._defaults.max_energy

    def get_or_create(self, player_id: object) -> Player:
        key = normalize_player_id(player_id)
        player = self._players.get(key)
        if player is None:
            player = self._defaults.new_player(key)
            self._players[key] = player
            self._logger.info(
                "Created ledger record",
                extra={"player_id": key, "event_type": "player_created"},
            )
        return player

    def get(self, player_id: object) -> Optional[Player]:
        return self._players.get(normalize_player_id(player_id))

    def lock_for(self, player_id: object) -> asyncio.Lock:
        return self._locks.lock_for(normalize_player_id(player_id))

    def guard(self, player_id: object) -> AsyncContextManager[None]:
        """Hold the per-player lock for the duration of an `async with` block."""

        return self._locks.guard(normalize_player_id(player_id))

    def player_ids(self) -> Iterator[PlayerId]:
        return iter(list(self._players))

    def __contains__(self, player_id: object) -> bool:
        try:
            return normalize_player_id(player_id) in self._players
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._players)
