"""Probability-weighted resource mining gated by energy and cooldown."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from minerapp.catalog import Catalog
from minerapp.config import GameConstants, coerce_positive_int, get_game_constants
from minerapp.entities import (
    CooldownActive,
    EconomyError,
    InsufficientEnergy,
    Millis,
    MineralType,
    Player,
    ToolType,
)
from minerapp.ledger import PlayerLedger
from minerapp.results import MineResult
from minerapp.utils.randomness import RandomSource, SeededRandomSource
from minerapp.utils.time_utils import Clock, system_clock


logger = logging.getLogger(__name__)

#: Cumulative probability bands, checked in order: a draw ``r`` in [0, 100)
#: lands in the first band whose upper bound exceeds it (50/30/15/5 percent).
MINERAL_BANDS: Tuple[Tuple[float, MineralType], ...] = (
    (50.0, MineralType.COPPER),
    (80.0, MineralType.SILVER),
    (95.0, MineralType.GOLD),
    (100.0, MineralType.DIAMOND),
)


def classify_draw(sample: float) -> MineralType:
    """Map a uniform sample in ``[0, 100)`` onto a mineral."""

    for upper_bound, mineral in MINERAL_BANDS:
        if sample < upper_bound:
            return mineral
    return MineralType.DIAMOND


@dataclass(frozen=True)
class MiningRules:
    cooldown_ms: int = 30_000
    energy_cost: int = 10
    min_energy: int = 10

    @classmethod
    def from_constants(cls, constants: Optional[GameConstants] = None) -> "MiningRules":
        constants = constants or get_game_constants()
        section = constants.mining
        defaults = constants.default_section("mining")
        return cls(
            cooldown_ms=coerce_positive_int(
                section.get("cooldown_ms"),
                default=int(defaults.get("cooldown_ms", 30_000)),
                setting="mining.cooldown_ms",
                allow_zero=True,
            ),
            energy_cost=coerce_positive_int(
                section.get("energy_cost"),
                default=int(defaults.get("energy_cost", 10)),
                setting="mining.energy_cost",
                allow_zero=True,
            ),
            min_energy=coerce_positive_int(
                section.get("min_energy"),
                default=int(defaults.get("min_energy", 10)),
                setting="mining.min_energy",
                allow_zero=True,
            ),
        )

    def cooldown_remaining_seconds(self, last_mining_at: Optional[Millis], now: Millis) -> int:
        """Return whole seconds left on the cooldown, ``0`` when it has elapsed."""

        if last_mining_at is None:
            return 0
        elapsed = now - last_mining_at
        if elapsed >= self.cooldown_ms:
            return 0
        return math.ceil((self.cooldown_ms - elapsed) / 1000)


class MiningEngine:
    def __init__(
        self,
        catalog: Catalog,
        ledger: PlayerLedger,
        *,
        rules: Optional[MiningRules] = None,
        clock: Clock = system_clock,
        random_source: Optional[RandomSource] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._rules = rules or MiningRules()
        self._clock = clock
        self._random = random_source or SeededRandomSource()
        self._logger = logger_ or logger

    @property
    def rules(self) -> MiningRules:
        return self._rules

    def mining_power(self, player: Player) -> int:
        return sum(
            player.tool_counts.get(tool, 0) * self._catalog.tool_power(tool)
            for tool in ToolType
        )

    def check(self, player: Player, now: Millis) -> Optional[EconomyError]:
        """Return the first failing gate for ``player`` at ``now``, if any."""

        if player.energy < self._rules.min_energy:
            return InsufficientEnergy(player.energy, self._rules.min_energy)
        remaining = self._rules.cooldown_remaining_seconds(player.last_mining_at, now)
        if remaining > 0:
            return CooldownActive(remaining)
        return None

    def _draw(self, count: int) -> Dict[MineralType, int]:
        found: Counter = Counter()
        for _ in range(count):
            found[classify_draw(self._random.percent())] += 1
        return {mineral: found[mineral] for mineral in MineralType if found[mineral]}

    def mine(self, player_id: object, now: Optional[Millis] = None) -> MineResult:
        if now is None:
            now = self._clock()
        player = self._ledger.get_or_create(player_id)

        error = self.check(player, now)
        if error is not None:
            self._logger.info(
                "Mining rejected",
                extra={
                    "player_id": player.player_id,
                    "operation": "mine",
                    "event_type": "mine_rejected",
                    "error_type": error.code,
                },
            )
            return MineResult(
                player_id=player.player_id,
                error=error,
                energy=player.energy,
            )

        power = self.mining_power(player)
        if power == 0:
            self._logger.warning(
                "Player mined without any tools",
                extra={
                    "player_id": player.player_id,
                    "operation": "mine",
                    "event_type": "mine_without_tools",
                },
            )

        found = self._draw(power)
        for mineral, count in found.items():
            player.inventory[mineral] += count
        player.energy = max(player.energy - self._rules.energy_cost, 0)
        player.last_mining_at = now

        self._logger.info(
            "Mining completed",
            extra={
                "player_id": player.player_id,
                "operation": "mine",
                "event_type": "mine_completed",
                "mining_power": power,
                "found": found,
                "energy": player.energy,
            },
        )
        return MineResult(
            player_id=player.player_id,
            found=found,
            mining_power=power,
            energy=player.energy,
            mined_at=now,
        )
