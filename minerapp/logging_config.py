"""JSON log output for the mining economy."""

import enum
import json
import logging
from typing import Any, Dict, Mapping

from minerapp.utils.time_utils import from_millis


#: Attribute names present on every record before ``extra`` is applied.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

#: Who did what. Always lifted to the top level of the payload.
CONTEXT_FIELDS = (
    "player_id",
    "operation",
    "event_type",
    "request_category",
    "error_type",
)

#: Outcome of a mine or a trade, grouped under ``economy``.
ECONOMY_FIELDS = (
    "mining_power",
    "found",
    "energy",
    "mineral",
    "amount",
    "value",
    "tool",
    "price",
    "balance",
)


def _jsonable(value: Any) -> Any:
    # str-based enums must be unwrapped before the plain str check
    if isinstance(value, enum.Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(_jsonable(key)): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return repr(value)


class EconomyJsonFormatter(logging.Formatter):
    """Render each record as a single JSON line.

    Context keys sit at the top level and mine or trade outcomes are nested
    under ``economy``. Mineral and tool enums are written by their catalog
    key, including when they are mapping keys such as in ``found``. Any
    other ``extra`` value lands in the ``extra`` object.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": from_millis(int(record.created * 1000)).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        for key in CONTEXT_FIELDS:
            if key in fields:
                payload[key] = _jsonable(fields.pop(key))

        economy = {
            key: _jsonable(fields.pop(key)) for key in ECONOMY_FIELDS if key in fields
        }
        if economy:
            payload["economy"] = economy
        if fields:
            payload["extra"] = {key: _jsonable(value) for key, value in fields.items()}

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(debug: bool = False, *, level: int = logging.INFO) -> None:
    """Install the JSON formatter on the root logger unless handlers exist."""

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(EconomyJsonFormatter())
        root_logger.addHandler(handler)

    root_logger.setLevel(logging.DEBUG if debug else level)
