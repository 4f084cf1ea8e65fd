"""Static mineral and tool definitions used by the economy engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from minerapp.config import GameConstants, coerce_positive_int, get_game_constants
from minerapp.entities import (
    MineralKey,
    MineralType,
    Money,
    ToolKey,
    ToolType,
    UnknownMineral,
    UnknownTool,
)


@dataclass(frozen=True)
class MineralSpec:
    mineral: MineralType
    value: Money
    emoji: str = ""
    labels: Mapping[str, str] = field(default_factory=dict)

    def label(self, language: Optional[str] = None) -> str:
        return _pick_label(self.labels, language, fallback=self.mineral.value)


@dataclass(frozen=True)
class ToolSpec:
    tool: ToolType
    price: Money
    power: int
    emoji: str = ""
    labels: Mapping[str, str] = field(default_factory=dict)

    def label(self, language: Optional[str] = None) -> str:
        return _pick_label(self.labels, language, fallback=self.tool.value)


def _pick_label(labels: Mapping[str, str], language: Optional[str], *, fallback: str) -> str:
    if language and labels.get(language):
        return labels[language]
    for candidate in labels.values():
        if candidate:
            return candidate
    return fallback


def _coerce_labels(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(lang): str(text) for lang, text in raw.items() if text}


def _entry(section: Mapping[str, Any], key: str) -> Dict[str, Any]:
    entry = section.get(key)
    return dict(entry) if isinstance(entry, Mapping) else {}


class Catalog:
    """Read-only lookup from mineral and tool types to their definitions.

    Every lookup is total over the closed enum sets and fails with
    :class:`~minerapp.entities.UnknownKey` for anything else, including
    strings that do not name a known member.
    """

    def __init__(
        self,
        minerals: Mapping[MineralType, MineralSpec],
        tools: Mapping[ToolType, ToolSpec],
        *,
        language: Optional[str] = None,
    ) -> None:
        missing = [m.value for m in MineralType if m not in minerals]
        missing += [t.value for t in ToolType if t not in tools]
        if missing:
            raise ValueError(f"Catalog is missing definitions for {missing}")
        self._minerals: Dict[MineralType, MineralSpec] = {
            mineral: minerals[mineral] for mineral in MineralType
        }
        self._tools: Dict[ToolType, ToolSpec] = {tool: tools[tool] for tool in ToolType}
        self.language = language

    @classmethod
    def from_constants(
        cls,
        constants: Optional[GameConstants] = None,
        *,
        language: Optional[str] = None,
    ) -> "Catalog":
        constants = constants or get_game_constants()
        mineral_section = constants.minerals
        tool_section = constants.tools
        mineral_defaults = constants.default_section("minerals")
        tool_defaults = constants.default_section("tools")

        minerals: Dict[MineralType, MineralSpec] = {}
        for mineral in MineralType:
            raw = _entry(mineral_section, mineral.value)
            default = _entry(mineral_defaults, mineral.value)
            minerals[mineral] = MineralSpec(
                mineral=mineral,
                value=coerce_positive_int(
                    raw.get("value"),
                    default=int(default.get("value", 1)),
                    setting=f"minerals.{mineral.value}.value",
                ),
                emoji=str(raw.get("emoji") or default.get("emoji") or ""),
                labels=_coerce_labels(raw.get("labels") or default.get("labels")),
            )

        tools: Dict[ToolType, ToolSpec] = {}
        for tool in ToolType:
            raw = _entry(tool_section, tool.value)
            default = _entry(tool_defaults, tool.value)
            tools[tool] = ToolSpec(
                tool=tool,
                price=coerce_positive_int(
                    raw.get("price"),
                    default=int(default.get("price", 1)),
                    setting=f"tools.{tool.value}.price",
                ),
                power=coerce_positive_int(
                    raw.get("power"),
                    default=int(default.get("power", 1)),
                    setting=f"tools.{tool.value}.power",
                ),
                emoji=str(raw.get("emoji") or default.get("emoji") or ""),
                labels=_coerce_labels(raw.get("labels") or default.get("labels")),
            )

        return cls(minerals, tools, language=language)

    @staticmethod
    def parse_mineral(key: MineralKey) -> MineralType:
        if isinstance(key, MineralType):
            return key
        if isinstance(key, str):
            try:
                return MineralType(key.strip().lower())
            except ValueError:
                pass
        raise UnknownMineral(key)

    @staticmethod
    def parse_tool(key: ToolKey) -> ToolType:
        if isinstance(key, ToolType):
            return key
        if isinstance(key, str):
            try:
                return ToolType(key.strip().lower())
            except ValueError:
                pass
        raise UnknownTool(key)

    def mineral(self, key: MineralKey) -> MineralSpec:
        return self._minerals[self.parse_mineral(key)]

    def tool(self, key: ToolKey) -> ToolSpec:
        return self._tools[self.parse_tool(key)]

    def mineral_value(self, key: MineralKey) -> Money:
        return self.mineral(key).value

    def tool_price(self, key: ToolKey) -> Money:
        return self.tool(key).price

    def tool_power(self, key: ToolKey) -> int:
        return self.tool(key).power

    def minerals(self) -> Tuple[MineralSpec, ...]:
        return tuple(self._minerals.values())

    def tools(self) -> Tuple[ToolSpec, ...]:
        return tuple(self._tools.values())

    def mineral_label(self, key: MineralKey, language: Optional[str] = None) -> str:
        return self.mineral(key).label(language or self.language)

    def tool_label(self, key: ToolKey, language: Optional[str] = None) -> str:
        return self.tool(key).label(language or self.language)
