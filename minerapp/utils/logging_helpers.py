"""Bound logging context for economy components."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Tuple, Union


#: Every economy record carries these keys, ``None`` when an event has no value.
CONTEXT_KEYS: Tuple[str, ...] = (
    "player_id",
    "operation",
    "event_type",
    "request_category",
)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Adapter whose bound context is overridden per call by ``extra``."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def getChild(self, suffix: str) -> "ContextLoggerAdapter":  # noqa: N802
        return ContextLoggerAdapter(self.logger.getChild(suffix), dict(self.extra))


def add_context(
    logger: Union[logging.Logger, logging.LoggerAdapter], **context: Any
) -> ContextLoggerAdapter:
    """Bind ``context`` to ``logger`` on top of whatever it already carries."""

    bound = dict.fromkeys(CONTEXT_KEYS)
    if isinstance(logger, logging.LoggerAdapter):
        bound.update(logger.extra or {})
        logger = logger.logger
    bound.update(context)
    return ContextLoggerAdapter(logger, bound)
