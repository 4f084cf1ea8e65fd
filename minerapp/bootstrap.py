"""Application composition root for the mining economy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from minerapp.catalog import Catalog
from minerapp.config import Config
from minerapp.ledger import PlayerDefaults, PlayerLedger
from minerapp.logging_config import setup_logging
from minerapp.market import Market
from minerapp.mining_engine import MiningEngine, MiningRules
from minerapp.services.economy_service import EconomyService
from minerapp.utils.logging_helpers import ContextLoggerAdapter, add_context
from minerapp.utils.randomness import RandomSource, SeededRandomSource
from minerapp.utils.time_utils import Clock, system_clock


@dataclass(frozen=True)
class ApplicationServices:
    """Container for the engine components shared by the command layer."""

    config: Config
    logger: ContextLoggerAdapter
    catalog: Catalog
    ledger: PlayerLedger
    mining_engine: MiningEngine
    market: Market
    economy: EconomyService


def _make_service_logger(
    parent_logger: ContextLoggerAdapter, child_name: str, category: str
) -> ContextLoggerAdapter:
    """Return a child logger enriched with the provided ``category`` context."""

    return add_context(parent_logger.getChild(child_name), request_category=category)


def build_services(
    cfg: Optional[Config] = None,
    *,
    clock: Clock = system_clock,
    random_source: Optional[RandomSource] = None,
) -> ApplicationServices:
    """Initialise logging and wire the economy engine."""

    if cfg is None:
        load_dotenv()
        cfg = Config()

    setup_logging(cfg.DEBUG)
    logger = add_context(logging.getLogger("minerbot"))

    constants = cfg.constants
    catalog = Catalog.from_constants(constants, language=cfg.LANGUAGE)
    ledger = PlayerLedger(
        PlayerDefaults.from_constants(constants),
        logger_=_make_service_logger(logger, "ledger", "ledger"),
    )
    mining_engine = MiningEngine(
        catalog,
        ledger,
        rules=MiningRules.from_constants(constants),
        clock=clock,
        random_source=random_source or SeededRandomSource(cfg.RNG_SEED),
        logger_=_make_service_logger(logger, "mining", "mining"),
    )
    market = Market(
        catalog,
        ledger,
        logger_=_make_service_logger(logger, "market", "market"),
    )
    economy = EconomyService(
        ledger,
        mining_engine,
        market,
        logger=logger.getChild("economy"),
    )

    logger.info(
        "Economy services initialised",
        extra={
            "event_type": "startup",
            "config_path": str(constants.path),
            "rng_seeded": cfg.RNG_SEED is not None,
        },
    )

    return ApplicationServices(
        config=cfg,
        logger=logger,
        catalog=catalog,
        ledger=ledger,
        mining_engine=mining_engine,
        market=market,
        economy=economy,
    )
