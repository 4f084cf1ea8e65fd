import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)


_BASE_DIR = Path(__file__).resolve().parent.parent
_DEFAULT_CONFIG_DIR = _BASE_DIR / "config"
_DEFAULT_GAME_CONSTANTS_PATH = _DEFAULT_CONFIG_DIR / "game_constants.yaml"

_DEFAULT_GAME_CONSTANTS_DATA: Dict[str, Any] = {
    "minerals": {
        "copper": {"value": 1, "emoji": "🟤", "labels": {"es": "Cobre", "en": "Copper"}},
        "silver": {"value": 5, "emoji": "⚪", "labels": {"es": "Plata", "en": "Silver"}},
        "gold": {"value": 20, "emoji": "🟡", "labels": {"es": "Oro", "en": "Gold"}},
        "diamond": {"value": 50, "emoji": "💎", "labels": {"es": "Diamante", "en": "Diamond"}},
    },
    "tools": {
        "pickaxe": {
            "price": 50,
            "power": 1,
            "emoji": "⛏️",
            "labels": {"es": "Pico", "en": "Pickaxe"},
        },
        "drill": {
            "price": 200,
            "power": 3,
            "emoji": "🔩",
            "labels": {"es": "Taladro", "en": "Drill"},
        },
        "excavator": {
            "price": 500,
            "power": 7,
            "emoji": "🚜",
            "labels": {"es": "Excavadora", "en": "Excavator"},
        },
    },
    "player": {
        "starting_balance": 10,
        "starting_energy": 100,
        "max_energy": 100,
        "starting_tools": {"pickaxe": 1},
    },
    "mining": {
        "cooldown_ms": 30_000,
        "energy_cost": 10,
        "min_energy": 10,
    },
    "ui": {
        "default_language": "es",
    },
}


def _resolve_config_path(candidate: Optional[str], default: Path) -> Path:
    if not candidate:
        return default
    path = Path(candidate)
    if not path.is_absolute():
        path = _BASE_DIR / path
    return path


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and isinstance(base.get(key), dict)
        ):
            base[key] = _deep_merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


class GameConstants:
    def __init__(
        self,
        path: Optional[str] = None,
        *,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> None:
        resolved_path = _resolve_config_path(
            path or os.getenv("MINERBOT_GAME_CONSTANTS_FILE"),
            _DEFAULT_GAME_CONSTANTS_PATH,
        )
        self._path: Path = resolved_path
        self._defaults: Dict[str, Any] = deepcopy(defaults or _DEFAULT_GAME_CONSTANTS_DATA)
        self._data: Dict[str, Any] = {}
        self.reload()

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> None:
        raw_data: Dict[str, Any] = {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle) or {}
                if not isinstance(loaded, dict):
                    logger.warning(
                        "Game constants file did not contain a mapping; using defaults.",
                        extra={
                            "category": "config",
                            "config_path": str(self._path),
                            "stage": "game_constants_load",
                            "error_type": "InvalidMapping",
                        },
                    )
                else:
                    raw_data = loaded
        except FileNotFoundError:
            logger.warning(
                "Game constants file not found; using default values.",
                extra={
                    "category": "config",
                    "config_path": str(self._path),
                    "stage": "game_constants_load",
                    "error_type": "FileNotFoundError",
                },
            )
        except yaml.YAMLError as exc:
            logger.warning(
                "Failed to parse game constants file; using defaults.",
                extra={
                    "category": "config",
                    "config_path": str(self._path),
                    "stage": "game_constants_load",
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )

        merged = deepcopy(self._defaults)
        if raw_data:
            merged = _deep_merge(merged, raw_data)
        self._data = merged

    def get(self, key: str, default: Any = None) -> Any:
        value = self._data.get(key, default)
        return deepcopy(value)

    def section(self, key: str) -> Dict[str, Any]:
        section = self._data.get(key, {})
        if isinstance(section, dict):
            return deepcopy(section)
        return {}

    def default_section(self, key: str) -> Dict[str, Any]:
        section = self._defaults.get(key, {})
        if isinstance(section, dict):
            return deepcopy(section)
        return {}

    @property
    def minerals(self) -> Dict[str, Any]:
        return self.section("minerals")

    @property
    def tools(self) -> Dict[str, Any]:
        return self.section("tools")

    @property
    def player(self) -> Dict[str, Any]:
        return self.section("player")

    @property
    def mining(self) -> Dict[str, Any]:
        return self.section("mining")

    @property
    def ui(self) -> Dict[str, Any]:
        return self.section("ui")


GAME_CONSTANTS = GameConstants()


def get_game_constants() -> GameConstants:
    return GAME_CONSTANTS


def coerce_positive_int(
    value: Any, *, default: int, setting: str, allow_zero: bool = False
) -> int:
    """Return ``value`` as an int, keeping ``default`` for unusable input."""

    try:
        if isinstance(value, bool) or (
            isinstance(value, float) and not value.is_integer()
        ):
            raise ValueError(value)
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning(
            "Invalid integer value '%s' for %s; falling back to default %s.",
            value,
            setting,
            default,
            extra={"category": "config", "error_type": "InvalidInteger"},
        )
        return default
    floor = 0 if allow_zero else 1
    if parsed < floor:
        logger.warning(
            "%s must be at least %s; ignoring %s.",
            setting,
            floor,
            value,
            extra={"category": "config", "error_type": "OutOfRange"},
        )
        return default
    return parsed


class Config:
    def __init__(self, constants: Optional[GameConstants] = None):
        self.constants: GameConstants = constants or GAME_CONSTANTS
        self.DEBUG: bool = self._parse_bool_env(os.getenv("MINERBOT_DEBUG"))
        self.RNG_SEED: Optional[int] = self._parse_optional_int_env(
            os.getenv("MINERBOT_RNG_SEED"),
            env_var="MINERBOT_RNG_SEED",
        )
        default_language = str(
            self.constants.ui.get("default_language") or "es"
        ).strip()
        language_env = (os.getenv("MINERBOT_LANGUAGE") or "").strip()
        self.LANGUAGE: str = language_env or default_language or "es"

    @staticmethod
    def _parse_bool_env(raw_value: Optional[str]) -> bool:
        if raw_value is None:
            return False
        return raw_value.strip().lower() in {"1", "true", "yes", "on"}

    @staticmethod
    def _parse_optional_int_env(
        raw_value: Optional[str], *, env_var: str
    ) -> Optional[int]:
        if raw_value is None:
            return None
        raw_value = raw_value.strip()
        if not raw_value:
            return None
        try:
            return int(raw_value)
        except ValueError:
            logger.warning(
                "Invalid integer value '%s' for %s; ignoring it.",
                raw_value,
                env_var,
            )
            return None
