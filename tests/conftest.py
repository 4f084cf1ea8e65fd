"""Pytest configuration shared across the test suite."""

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from minerapp.catalog import Catalog
from minerapp.config import GameConstants
from minerapp.ledger import PlayerDefaults, PlayerLedger
from minerapp.market import Market
from minerapp.mining_engine import MiningEngine, MiningRules
from minerapp.services.economy_service import EconomyService
from minerapp.utils.randomness import ScriptedRandomSource
from minerapp.utils.time_utils import ManualClock


@pytest.fixture
def constants(tmp_path):
    """Built-in defaults only, independent of the repository YAML file."""

    return GameConstants(path=str(tmp_path / "missing.yaml"))


@pytest.fixture
def catalog(constants):
    return Catalog.from_constants(constants, language="en")


@pytest.fixture
def ledger(constants):
    return PlayerLedger(
        PlayerDefaults.from_constants(constants),
        logger_=logging.getLogger("tests.ledger"),
    )


@pytest.fixture
def clock():
    return ManualClock(0)


@pytest.fixture
def rng():
    return ScriptedRandomSource([])


@pytest.fixture
def engine(catalog, ledger, clock, rng, constants):
    return MiningEngine(
        catalog,
        ledger,
        rules=MiningRules.from_constants(constants),
        clock=clock,
        random_source=rng,
        logger_=logging.getLogger("tests.mining"),
    )


@pytest.fixture
def market(catalog, ledger):
    return Market(catalog, ledger, logger_=logging.getLogger("tests.market"))


@pytest.fixture
def economy(ledger, engine, market):
    return EconomyService(
        ledger, engine, market, logger=logging.getLogger("tests.economy")
    )
